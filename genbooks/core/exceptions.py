class StorefrontError(Exception):
    """Base class for errors raised by the storefront services."""


class InvalidRequestError(StorefrontError, ValueError):
    def __init__(self, message: str, details=None):
        super().__init__(message)
        self.message = message
        self.details = details or []


class OrderNotFoundError(StorefrontError, LookupError):
    def __init__(self, order_id: str):
        super().__init__(f"Order not found: {order_id}")
        self.order_id = order_id


class StorageError(StorefrontError):
    """A storage backend operation failed. The original cause is chained."""

    def __init__(self, operation: str):
        super().__init__(f"Storage operation failed: {operation}")
        self.operation = operation
