"""Service-layer exceptions.

Every failure a caller can act on is one of these kinds; the API layer maps
each kind to a status code and never inspects message text.
"""


class RollcallError(Exception):
    """Base exception for forms, groups, assignments and responses."""

    kind = "internal"


class ValidationError(RollcallError):
    """Raised when input is malformed or out of range.

    Individual problems are kept on ``errors`` and joined into one message.
    """

    kind = "validation_error"

    def __init__(self, errors: list[str] | str) -> None:
        self.errors = [errors] if isinstance(errors, str) else list(errors)
        super().__init__("; ".join(self.errors))


class ForbiddenError(RollcallError):
    """Raised when an authenticated caller may not perform the operation."""

    kind = "forbidden"


class NotFoundError(RollcallError):
    """Raised when a referenced entity does not exist."""

    kind = "not_found"

    def __init__(self, entity: str, entity_id: object | None = None) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found")


class ConflictError(RollcallError):
    """Raised on a uniqueness violation (duplicate response, nothing new to add)."""

    kind = "conflict"
