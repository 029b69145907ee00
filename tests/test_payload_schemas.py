"""Tests for Shopify payload validation and column mapping."""

import uuid
from typing import Any

import pytest
from pydantic import ValidationError

from shopmetrics.integrations.shopify.mapping import (
    map_customer,
    map_line_item,
    map_order,
    map_product,
)
from shopmetrics.schemas.shopify import CustomerPayload, OrderPayload, ProductPayload


class TestCustomerPayload:
    def test_coerces_shopify_types(self, sample_shopify_customer: dict[str, Any]) -> None:
        payload = CustomerPayload.model_validate(sample_shopify_customer)

        assert payload.id == "7001"
        assert payload.total_spent == 250.5
        assert payload.tags == ["vip", "wholesale"]

    def test_missing_id_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CustomerPayload.model_validate({"email": "a@example.com"})

    def test_null_money_is_zero(self) -> None:
        payload = CustomerPayload.model_validate(
            {"id": 1, "total_spent": None, "orders_count": None}
        )

        assert payload.total_spent == 0.0
        assert payload.orders_count == 0

    def test_non_numeric_money_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CustomerPayload.model_validate({"id": 1, "total_spent": "lots"})


class TestProductMapping:
    def test_first_variant_sets_pricing(self, sample_shopify_product: dict[str, Any]) -> None:
        store_id = uuid.uuid4()

        values = map_product(store_id, ProductPayload.model_validate(sample_shopify_product))

        assert values["store_id"] == store_id
        assert values["shopify_product_id"] == "8001"
        assert values["price"] == 29.99
        assert values["compare_at_price"] == 39.99
        assert values["inventory_quantity"] == 42

    def test_product_without_variants(self) -> None:
        values = map_product(uuid.uuid4(), ProductPayload.model_validate({"id": 1, "title": None}))

        assert values["title"] == "Untitled"
        assert values["price"] is None
        assert values["inventory_quantity"] is None


class TestOrderMapping:
    def test_order_columns(self, sample_shopify_order: dict[str, Any]) -> None:
        store_id, customer_id = uuid.uuid4(), uuid.uuid4()
        payload = OrderPayload.model_validate(sample_shopify_order)

        values = map_order(store_id, payload, customer_id=customer_id, default_currency="EUR")

        assert values["shopify_order_id"] == "9001"
        assert values["order_number"] == "1001"
        assert values["customer_id"] == customer_id
        assert values["total_price"] == 79.98
        assert values["currency"] == "USD"
        assert values["order_date"] == "2024-06-15T10:30:00-04:00"
        assert values["shopify_created_at"] == values["order_date"]

    def test_defaults_for_sparse_order(self) -> None:
        values = map_order(
            uuid.uuid4(),
            OrderPayload.model_validate({"id": 5, "total_price": None}),
            customer_id=None,
            default_currency="EUR",
        )

        assert values["total_price"] == 0.0
        assert values["currency"] == "EUR"
        assert values["order_date"]
        assert values["shopify_created_at"] is None

    def test_line_items(self, sample_shopify_order: dict[str, Any]) -> None:
        store_id, order_id = uuid.uuid4(), uuid.uuid4()
        payload = OrderPayload.model_validate(sample_shopify_order)

        rows = [map_line_item(store_id, order_id, item) for item in payload.line_items]

        assert [row["shopify_product_id"] for row in rows] == ["8001", None]
        assert rows[0]["quantity"] == 2
        assert rows[1]["price"] == 20.0
        assert all(row["order_id"] == order_id for row in rows)


def test_customer_mapping_keeps_every_column(sample_shopify_customer: dict[str, Any]) -> None:
    values = map_customer(uuid.uuid4(), CustomerPayload.model_validate(sample_shopify_customer))

    assert values["email"] == "jane@example.com"
    assert values["accepts_marketing"] is True
    assert values["shopify_created_at"] == "2024-01-02T09:00:00-05:00"
    assert set(values) >= {"phone", "state", "tags", "shopify_updated_at"}
