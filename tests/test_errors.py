from typing import Callable

import pytest
from sqlalchemy.exc import IntegrityError

from spotfeed.errors import (
    ConflictError,
    NotFoundError,
    SpotFeedError,
    ValidationError,
    translate_integrity_error,
    validate_input,
)
from spotfeed.models.api.joints import NearbyJointsQuery


class TestTranslateIntegrityError:
    """Unit tests for storage error translation."""

    def test_unique_violation_becomes_conflict(
        self, integrity_error: Callable[..., IntegrityError]
    ) -> None:
        error = translate_integrity_error(
            integrity_error("duplicate key value", "23505"),
            not_found="missing",
            conflict="already there",
        )
        assert isinstance(error, ConflictError)
        assert error.message == "already there"

    def test_foreign_key_violation_becomes_not_found(
        self, integrity_error: Callable[..., IntegrityError]
    ) -> None:
        error = translate_integrity_error(
            integrity_error("insert violates foreign key constraint", "23503"),
            not_found="missing",
            conflict="already there",
        )
        assert isinstance(error, NotFoundError)
        assert error.message == "missing"

    def test_check_violation_becomes_validation_error(
        self, integrity_error: Callable[..., IntegrityError]
    ) -> None:
        error = translate_integrity_error(
            integrity_error('violates check constraint "valid_latitude"', "23514"),
            not_found="missing",
            conflict="already there",
        )
        assert isinstance(error, ValidationError)

    def test_falls_back_to_message_text(
        self, integrity_error: Callable[..., IntegrityError]
    ) -> None:
        unique = translate_integrity_error(
            integrity_error("UNIQUE constraint failed: users.email"),
            not_found="missing",
            conflict="already there",
        )
        foreign = translate_integrity_error(
            integrity_error("FOREIGN KEY constraint failed"),
            not_found="missing",
            conflict="already there",
        )
        assert isinstance(unique, ConflictError)
        assert isinstance(foreign, NotFoundError)


class TestValidateInput:
    """Unit tests for input validation wrapping."""

    def test_returns_model_on_success(self) -> None:
        query = validate_input(
            NearbyJointsQuery, latitude=1.0, longitude=2.0, max_distance=100
        )
        assert query.max_distance == 100

    def test_raises_domain_validation_error(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_input(
                NearbyJointsQuery, latitude=91.0, longitude=2.0, max_distance=100
            )
        assert "latitude" in exc_info.value.message
        assert isinstance(exc_info.value, SpotFeedError)
        assert isinstance(exc_info.value, ValueError)
