"""Application errors carrying the HTTP status they map to.

Domain invariants keep raising Protean's ``ValidationError``; these classes
cover the workflow failures (authorization, missing records, conflicts) that
the API layer turns into ``{"error": message}`` responses.
"""


class StorefrontError(Exception):
    status_code = 500

    def __init__(self, message: str, **details):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        return {"error": self.message, **self.details}


class BadRequest(StorefrontError):
    status_code = 400


class InsufficientStock(BadRequest):
    """Requested quantity exceeds the stock tracked for a product or variant."""

    def __init__(self, available_stock: int, message: str | None = None):
        super().__init__(
            message or f"Only {available_stock} item(s) available in stock",
            available_stock=available_stock,
        )
        self.available_stock = available_stock


class Unauthorized(StorefrontError):
    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class Forbidden(StorefrontError):
    status_code = 403

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message)


class NotFound(StorefrontError):
    status_code = 404


class Conflict(StorefrontError):
    status_code = 409
