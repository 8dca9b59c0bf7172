"""Custom exception classes for the price comparator."""


class PriceComparatorException(Exception):
    """Base exception for all price comparator errors."""

    def __init__(self, message: str = "An unexpected error occurred"):
        self.message = message
        super().__init__(self.message)


class NotFoundError(PriceComparatorException):
    """Raised when a requested product is not carried by any store."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} with identifier '{identifier}' not found")


class DataInconsistencyError(PriceComparatorException):
    """Raised when catalog data contradicts itself.

    Typically a discount that references a product/store pair for which
    no product record exists.
    """

    def __init__(self, product_id: str, store_name: str, detail: str = ""):
        self.product_id = product_id
        self.store_name = store_name
        message = f"No product record for '{product_id}' at store '{store_name}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class InvalidInputError(PriceComparatorException):
    """Raised when a caller passes a malformed name, filter or limit."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"Invalid value for {field}: {message}")
