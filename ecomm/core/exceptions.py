"""
Domain exceptions raised by services and repositories

The application registers a handler in ``ecomm.main`` that turns these into
JSON responses with the matching HTTP status code.
"""
from typing import Optional


class DomainError(Exception):
    """Base class for business rule failures"""

    status_code = 400

    def __init__(self, message: str, suggestion: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.suggestion = suggestion

    def to_dict(self) -> dict:
        data = {"detail": self.message}
        if self.suggestion:
            data["suggestion"] = self.suggestion
        return data


class BadRequestError(DomainError):
    status_code = 400


class NotFoundError(DomainError):
    status_code = 404


class ForbiddenError(DomainError):
    status_code = 403


class ConflictError(DomainError):
    status_code = 409


class InsufficientStockError(BadRequestError):
    """Requested quantity exceeds the available stock"""

    def __init__(self, item_name: str, requested: int, available: int, suffix: str = ""):
        message = f"Insufficient stock for {item_name}. Requested: {requested}, Available: {available}."
        if suffix:
            message = f"{message} {suffix}"
        super().__init__(message)
        self.requested = requested
        self.available = available
