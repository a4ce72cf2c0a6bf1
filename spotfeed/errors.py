"""Domain errors and translation of storage failures."""

from typing import Any, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError

ModelT = TypeVar("ModelT", bound=BaseModel)

# PostgreSQL SQLSTATE codes for integrity violations
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
CHECK_VIOLATION = "23514"


class SpotFeedError(Exception):
    """Base class for all domain errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(SpotFeedError, ValueError):
    """Input is out of range or malformed."""


class NotFoundError(SpotFeedError):
    """A referenced user, joint, membership or message does not exist."""


class ExpiredError(SpotFeedError):
    """Operation attempted on an expired or inactive joint, or an expired code."""


class ConflictError(SpotFeedError):
    """A uniqueness rule was violated."""


class ForbiddenError(SpotFeedError):
    """The caller is not allowed to perform the operation."""


def validate_input(model_class: Type[ModelT], **data: Any) -> ModelT:
    """Build a pydantic input model, raising the domain ValidationError on failure."""
    try:
        return model_class(**data)
    except PydanticValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'input'}: {err['msg']}"
            for err in e.errors()
        )
        raise ValidationError(details) from e


def _sqlstate(error: IntegrityError) -> Optional[str]:
    orig = error.orig
    # asyncpg (through SQLAlchemy's adapter) and psycopg both expose the code
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def translate_integrity_error(
    error: IntegrityError, not_found: str, conflict: str
) -> SpotFeedError:
    """Map a storage constraint violation to the matching domain error."""
    code = _sqlstate(error)
    text = str(error.orig).lower()

    if code == UNIQUE_VIOLATION or (code is None and "unique" in text):
        return ConflictError(conflict)
    if code == FOREIGN_KEY_VIOLATION or (code is None and "foreign key" in text):
        return NotFoundError(not_found)
    if code == CHECK_VIOLATION or (code is None and "check" in text):
        return ValidationError(f"Constraint check failed: {error.orig}")
    return ConflictError(conflict)
