# taskdesk/utils/permissions.py
"""
Single authorization policy shared by every handler.

    User        -> only their own rows
    Supervisor  -> their own rows and rows of users they supervise
    Manager     -> everything

The same predicate answers read, update and delete questions.
"""

from dataclasses import dataclass
from typing import Optional

from taskdesk.models.user import Role


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str

    def __bool__(self) -> bool:
        return self.allowed


def authorize(
    actor_role: str,
    actor_id: str,
    target_owner_id: str,
    target_owner_supervisor_id: Optional[str],
) -> Decision:
    """Decide whether ``actor_id`` may act on something owned by ``target_owner_id``"""
    if actor_role == Role.MANAGER.value:
        return Decision(True, "Managers can manage every user")

    if actor_role == Role.SUPERVISOR.value:
        if actor_id == target_owner_id:
            return Decision(True, "Owner")
        if target_owner_supervisor_id is not None and target_owner_supervisor_id == actor_id:
            return Decision(True, "Supervisor of owner")
        return Decision(False, "You can only manage your own tasks or those of users you supervise")

    if actor_role == Role.USER.value:
        if actor_id == target_owner_id:
            return Decision(True, "Owner")
        return Decision(False, "You can only manage your own tasks")

    return Decision(False, f"Unknown role '{actor_role}'")
