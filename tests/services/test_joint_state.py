from datetime import datetime, timedelta

from spotfeed.services.joint_state import (
    JOINT_ACTIVE,
    JOINT_EXPIRED,
    check_state_transition,
    is_live,
    joint_state,
)


def test_joint_is_live_before_expiry(now: datetime) -> None:
    assert joint_state(True, now + timedelta(seconds=1), now) == JOINT_ACTIVE
    assert is_live(True, now + timedelta(seconds=1), now)


def test_joint_at_expiry_is_expired(now: datetime) -> None:
    """Liveness is strict: expires_at == now is no longer live."""
    assert joint_state(True, now, now) == JOINT_EXPIRED
    assert not is_live(True, now, now)


def test_inactive_joint_is_expired(now: datetime) -> None:
    assert joint_state(False, now + timedelta(hours=1), now) == JOINT_EXPIRED


def test_active_to_expired_allowed() -> None:
    assert check_state_transition(JOINT_ACTIVE, JOINT_EXPIRED) is None


def test_expired_is_terminal() -> None:
    error = check_state_transition(JOINT_EXPIRED, JOINT_ACTIVE)
    assert error is not None
    assert "only allowed: none" in error
    assert check_state_transition(JOINT_EXPIRED, JOINT_EXPIRED) is not None
