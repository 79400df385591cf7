# taskdesk/routers/users.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from taskdesk.models.user import Role, SUPERVISOR_ROLES
from taskdesk.schemas.user import (
    DirectoryUser,
    SupervisedUser,
    SupervisorOption,
    UserEnvelope,
    UserUpdate,
)
from taskdesk.services.table_store import TableStore, get_store
from taskdesk.utils.auth import oauth2_scheme, resolve_actor
from taskdesk.utils.hierarchy import HierarchyManager

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
def get_users(
    type: Optional[str] = Query(default=None),
    user_id: Optional[str] = Query(default=None, alias="userId"),
    store: TableStore = Depends(get_store),
    token: Optional[str] = Depends(oauth2_scheme),
):
    """Directory lookups

    - ``type=supervisors``: everyone who can be picked as a supervisor
    - ``type=supervised``: users supervised by ``userId`` (Supervisor/Manager)
    - ``type=all``: every user (Manager only)
    """
    hierarchy = HierarchyManager(store)

    if type == "supervisors":
        return {"supervisors": [SupervisorOption(**row).model_dump() for row in hierarchy.get_supervisors()]}

    if type not in ("supervised", "all"):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid request type")

    actor = resolve_actor(hierarchy, user_id, token=token)

    if type == "supervised":
        if actor["role"] not in SUPERVISOR_ROLES:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Permission denied")
        rows = hierarchy.get_direct_subordinates(actor["id"])
        return {"users": [SupervisedUser(**row).model_dump() for row in rows]}

    if actor["role"] != Role.MANAGER.value:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Permission denied")
    return {"users": [DirectoryUser(**row).model_dump() for row in hierarchy.get_all_users()]}


@router.put("", response_model=UserEnvelope)
def update_user(
    payload: UserUpdate,
    store: TableStore = Depends(get_store),
    token: Optional[str] = Depends(oauth2_scheme),
):
    """Change a user's role (Manager only) or supervisor assignment"""
    if not payload.user_id or not payload.target_user_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User ID and target user ID are required",
        )

    hierarchy = HierarchyManager(store)
    actor = resolve_actor(hierarchy, payload.user_id, token=token)

    target = hierarchy.get_user(payload.target_user_id)
    if target is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    update_data = {}

    if payload.role is not None:
        if actor["role"] != Role.MANAGER.value:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only managers can change roles")
        # Supervisees must keep a supervisor with a supervising role
        if payload.role.value not in SUPERVISOR_ROLES and hierarchy.get_subordinate_ids(target["id"]):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User still supervises other users")
        update_data["role"] = payload.role.value

    # Distinguish "not sent" from an explicit null
    if "supervisor_id" in payload.model_fields_set:
        decision = hierarchy.check(actor, target)
        if not decision:
            logger.warning(f"User {actor['id']} denied reassigning {target['id']}: {decision.reason}")
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=decision.reason)

        new_supervisor_id = payload.supervisor_id or None
        if new_supervisor_id is not None:
            if new_supervisor_id == target["id"]:
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User cannot be their own supervisor")
            supervisor = hierarchy.get_user(new_supervisor_id)
            if supervisor is None:
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid supervisor ID")
            if supervisor["role"] not in SUPERVISOR_ROLES:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Assigned supervisor must have Supervisor or Manager role",
                )
        update_data["supervisor_id"] = new_supervisor_id

    if not update_data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Nothing to update")

    updated = store.update("users", update_data, {"id": target["id"]})
    if not updated:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    logger.info(f"User {actor['id']} updated {target['id']}: {sorted(update_data)}")
    return {"user": DirectoryUser(**{k: updated[0][k] for k in ("id", "username", "role", "supervisor_id")})}
