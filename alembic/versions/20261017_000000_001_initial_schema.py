"""Initial schema: stores and their synced customers, products and orders.

Revision ID: 001
Revises:
Create Date: 2026-10-17 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    ]


def upgrade() -> None:
    op.execute("CREATE TYPE sync_type AS ENUM ('customers', 'products', 'orders')")
    op.execute("CREATE TYPE sync_status AS ENUM ('in_progress', 'success', 'error')")

    # Stores
    op.create_table(
        "stores",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("shopify_domain", sa.String(255), nullable=False),
        sa.Column("shopify_access_token", sa.Text(), nullable=True),
        sa.Column("owner_id", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("currency", sa.String(10), nullable=False, server_default="USD"),
        sa.Column("timezone", sa.String(64), nullable=False, server_default="UTC"),
        sa.Column("last_sync_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_stores")),
    )
    op.create_index(op.f("ix_stores_shopify_domain"), "stores", ["shopify_domain"])
    op.create_index(op.f("ix_stores_owner_id"), "stores", ["owner_id"])

    # Customers
    op.create_table(
        "customers",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("store_id", sa.Uuid(), nullable=False),
        sa.Column("shopify_customer_id", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("first_name", sa.String(255), nullable=True),
        sa.Column("last_name", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("total_spent", sa.Float(), nullable=False, server_default="0"),
        sa.Column("orders_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("state", sa.String(50), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=True),
        sa.Column("accepts_marketing", sa.Boolean(), nullable=True),
        sa.Column("shopify_created_at", sa.String(64), nullable=True),
        sa.Column("shopify_updated_at", sa.String(64), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["store_id"],
            ["stores.id"],
            name=op.f("fk_customers_store_id_stores"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_customers")),
    )
    op.create_index(op.f("ix_customers_store_id"), "customers", ["store_id"])
    op.create_index(
        "ix_customers_store_shopify_id",
        "customers",
        ["store_id", "shopify_customer_id"],
        unique=True,
    )
    op.create_index("ix_customers_store_email", "customers", ["store_id", "email"])

    # Products
    op.create_table(
        "products",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("store_id", sa.Uuid(), nullable=False),
        sa.Column("shopify_product_id", sa.String(255), nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("handle", sa.String(255), nullable=True),
        sa.Column("product_type", sa.String(255), nullable=True),
        sa.Column("vendor", sa.String(255), nullable=True),
        sa.Column("status", sa.String(50), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=True),
        sa.Column("price", sa.Float(), nullable=True),
        sa.Column("compare_at_price", sa.Float(), nullable=True),
        sa.Column("inventory_quantity", sa.Integer(), nullable=True),
        sa.Column("shopify_created_at", sa.String(64), nullable=True),
        sa.Column("shopify_updated_at", sa.String(64), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["store_id"],
            ["stores.id"],
            name=op.f("fk_products_store_id_stores"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_products")),
    )
    op.create_index(op.f("ix_products_store_id"), "products", ["store_id"])
    op.create_index(
        "ix_products_store_shopify_id",
        "products",
        ["store_id", "shopify_product_id"],
        unique=True,
    )

    # Orders
    op.create_table(
        "orders",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("store_id", sa.Uuid(), nullable=False),
        sa.Column("shopify_order_id", sa.String(255), nullable=False),
        sa.Column("order_number", sa.String(64), nullable=True),
        sa.Column("customer_id", sa.Uuid(), nullable=True),
        sa.Column("customer_email", sa.String(255), nullable=True),
        sa.Column("total_price", sa.Float(), nullable=False),
        sa.Column("subtotal_price", sa.Float(), nullable=True),
        sa.Column("total_tax", sa.Float(), nullable=True),
        sa.Column("total_discounts", sa.Float(), nullable=True),
        sa.Column("currency", sa.String(10), nullable=False),
        sa.Column("financial_status", sa.String(50), nullable=True),
        sa.Column("fulfillment_status", sa.String(50), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=True),
        sa.Column("order_date", sa.String(64), nullable=False),
        sa.Column("shopify_created_at", sa.String(64), nullable=True),
        sa.Column("shopify_updated_at", sa.String(64), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["store_id"],
            ["stores.id"],
            name=op.f("fk_orders_store_id_stores"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["customer_id"],
            ["customers.id"],
            name=op.f("fk_orders_customer_id_customers"),
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_orders")),
    )
    op.create_index(op.f("ix_orders_store_id"), "orders", ["store_id"])
    op.create_index(
        "ix_orders_store_shopify_id",
        "orders",
        ["store_id", "shopify_order_id"],
        unique=True,
    )
    op.create_index("ix_orders_store_date", "orders", ["store_id", "order_date"])
    op.create_index("ix_orders_store_customer", "orders", ["store_id", "customer_id"])

    # Order line items
    op.create_table(
        "order_line_items",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("store_id", sa.Uuid(), nullable=False),
        sa.Column("order_id", sa.Uuid(), nullable=False),
        sa.Column("product_id", sa.Uuid(), nullable=True),
        sa.Column("shopify_product_id", sa.String(255), nullable=True),
        sa.Column("shopify_variant_id", sa.String(255), nullable=True),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column("total_discount", sa.Float(), nullable=True),
        sa.Column("sku", sa.String(255), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["store_id"],
            ["stores.id"],
            name=op.f("fk_order_line_items_store_id_stores"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["order_id"],
            ["orders.id"],
            name=op.f("fk_order_line_items_order_id_orders"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["product_id"],
            ["products.id"],
            name=op.f("fk_order_line_items_product_id_products"),
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_order_line_items")),
    )
    op.create_index(op.f("ix_order_line_items_store_id"), "order_line_items", ["store_id"])
    op.create_index(op.f("ix_order_line_items_order_id"), "order_line_items", ["order_id"])
    op.create_index(
        "ix_order_line_items_store_product",
        "order_line_items",
        ["store_id", "product_id"],
    )

    # Sync logs
    op.create_table(
        "sync_logs",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("store_id", sa.Uuid(), nullable=False),
        sa.Column(
            "sync_type",
            postgresql.ENUM(
                "customers", "products", "orders", name="sync_type", create_type=False
            ),
            nullable=False,
        ),
        sa.Column(
            "status",
            postgresql.ENUM(
                "in_progress", "success", "error", name="sync_status", create_type=False
            ),
            nullable=False,
        ),
        sa.Column("records_processed", sa.Integer(), nullable=True),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["store_id"],
            ["stores.id"],
            name=op.f("fk_sync_logs_store_id_stores"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_sync_logs")),
    )
    op.create_index(op.f("ix_sync_logs_store_id"), "sync_logs", ["store_id"])
    op.create_index(op.f("ix_sync_logs_status"), "sync_logs", ["status"])
    op.create_index("ix_sync_logs_store_type", "sync_logs", ["store_id", "sync_type"])


def downgrade() -> None:
    op.drop_table("sync_logs")
    op.drop_table("order_line_items")
    op.drop_table("orders")
    op.drop_table("products")
    op.drop_table("customers")
    op.drop_table("stores")
    op.execute("DROP TYPE IF EXISTS sync_status")
    op.execute("DROP TYPE IF EXISTS sync_type")
