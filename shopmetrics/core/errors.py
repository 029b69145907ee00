"""Domain exceptions raised by services and mapped to HTTP responses in main."""


class ShopMetricsError(Exception):
    """Base class for all domain errors."""


class AuthorizationError(ShopMetricsError):
    """The caller does not own the requested store.

    Raised for missing and foreign stores alike so callers cannot test
    for the existence of other tenants' stores.
    """

    def __init__(self, message: str = "Store not found or access denied") -> None:
        super().__init__(message)


class NotFoundError(ShopMetricsError):
    """A referenced record does not exist."""


class PayloadValidationError(ShopMetricsError):
    """An inbound payload did not match the schema for its topic."""


class SyncFailure(ShopMetricsError):
    """An entity sync or full sync failed. Writes already committed stay."""


class SyncInProgressError(SyncFailure):
    """Another full sync holds the store's sync lease."""
