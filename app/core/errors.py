"""Typed service errors. The HTTP layer maps them to status codes by type."""

from collections.abc import Iterable


class ServiceError(Exception):
    """Base class for caller-visible failures raised by the service layer."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(ServiceError):
    """Raised when a referenced entity or row does not exist."""

    def __init__(
        self,
        resource: str,
        identifier: int | str | None = None,
        message: str | None = None,
    ) -> None:
        self.resource = resource
        self.identifier = identifier
        if message is None:
            label = resource.capitalize()
            message = (
                f"{label} not found"
                if identifier is None
                else f"{label} not found by id: {identifier}"
            )
        super().__init__(message)


class ConflictError(ServiceError):
    """Raised when a uniqueness constraint (role/permission name, user email) would be violated."""

    def __init__(self, resource: str, field: str, value: object) -> None:
        self.resource = resource
        self.field = field
        self.value = value
        super().__init__(f"{resource.capitalize()} with {field} {value!r} already exists")


class InvalidSortError(ServiceError):
    """Base for bad order_by / direction input on list endpoints."""


class InvalidSortColumnError(InvalidSortError):
    """Raised when order_by is not one of the entity's sortable columns."""

    def __init__(self, column: str, allowed: Iterable[str]) -> None:
        self.column = column
        self.allowed = tuple(allowed)
        super().__init__(
            "Invalid sort column. Must be one of: " + ", ".join(self.allowed)
        )


class InvalidSortDirectionError(InvalidSortError):
    """Raised when direction is not 'asc' or 'desc'."""

    def __init__(self, direction: str) -> None:
        self.direction = direction
        super().__init__("Invalid sort direction. Must be either 'asc' or 'desc'")


class InvalidPageLimitError(ServiceError):
    """Raised when a page limit is not a positive integer."""

    def __init__(self, limit: object) -> None:
        self.limit = limit
        super().__init__(f"Invalid page limit {limit!r}; must be a positive integer")
