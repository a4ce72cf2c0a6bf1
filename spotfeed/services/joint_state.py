# Joint state machine: allowed transitions only.
# active -> expired (expiry reached or explicit deactivation)
# expired -> (none)

from datetime import datetime
from typing import Dict, Optional, Set

JOINT_ACTIVE = "active"
JOINT_EXPIRED = "expired"

ALLOWED_TRANSITIONS: Dict[str, Set[str]] = {
    JOINT_ACTIVE: {JOINT_EXPIRED},
    JOINT_EXPIRED: set(),
}


def joint_state(is_active: bool, expires_at: datetime, now: datetime) -> str:
    """A joint is live only while active and before its expiry."""
    if is_active and now < expires_at:
        return JOINT_ACTIVE
    return JOINT_EXPIRED


def is_live(is_active: bool, expires_at: datetime, now: datetime) -> bool:
    return joint_state(is_active, expires_at, now) == JOINT_ACTIVE


def check_state_transition(current: str, target: str) -> Optional[str]:
    """
    Validate a state transition. Returns None if allowed, else an error message.
    """
    allowed = ALLOWED_TRANSITIONS.get(current, set())
    if target not in allowed:
        allowed_str = ", ".join(sorted(allowed)) if allowed else "none"
        return (
            f"Transition from {current} to {target} is not allowed. "
            f"From {current} only allowed: {allowed_str}."
        )
    return None
