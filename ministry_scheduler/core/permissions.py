# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Caller-side authorization policy for slot operations.

The assignment engine enforces data invariants only; these checks decide
who may ask for an assignment or a release:
    * admins may assign anyone to any slot and release any slot;
    * ministers may assign only themselves, only onto open slots, and
      release only the slot they hold.
"""

from typing import Optional

from ministry_scheduler.models.domain import CurrentUser, MinisterSlot


def can_assign(user: CurrentUser, slot: MinisterSlot, minister_id: str) -> bool:
    if user.is_admin:
        return True
    return minister_id == user.id and (slot.is_open or slot.minister_id == user.id)


def can_release(user: CurrentUser, slot: MinisterSlot) -> bool:
    if user.is_admin:
        return True
    return slot.minister_id is not None and slot.minister_id == user.id


def assign_denial_reason(user: CurrentUser, slot: MinisterSlot, minister_id: str) -> Optional[str]:
    """Message explaining why ``can_assign`` is False, else None."""
    if can_assign(user, slot, minister_id):
        return None
    if minister_id != user.id:
        return "Ministers can only sign themselves up"
    name = slot.minister_name or "another minister"
    return f"This position is already assigned to {name}"
