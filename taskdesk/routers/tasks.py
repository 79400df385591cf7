# taskdesk/routers/tasks.py
import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from taskdesk.models.user import Role, SUPERVISOR_ROLES
from taskdesk.schemas.task import DeleteResult, TaskCreate, TaskEnvelope, TaskList, TaskUpdate
from taskdesk.services.table_store import Row, TableStore, get_store
from taskdesk.utils.auth import oauth2_scheme, resolve_actor
from taskdesk.utils.hierarchy import HierarchyManager

logger = logging.getLogger(__name__)

router = APIRouter()


def _role_value(role) -> Optional[str]:
    return role.value if role is not None else None


def _with_owners(hierarchy: HierarchyManager, tasks: List[Row]) -> List[Row]:
    """Attach the owner's username, role and supervisor to each task"""
    owners = {u["id"]: u for u in hierarchy.get_users(sorted({t["user_id"] for t in tasks}))}
    result = []
    for task in tasks:
        owner = owners.get(task["user_id"])
        result.append({
            **task,
            "owner": {
                "username": owner["username"],
                "role": owner["role"],
                "supervisor_id": owner["supervisor_id"],
            } if owner else None,
        })
    return result


def _get_task(store: TableStore, task_id: str) -> Row:
    rows = store.select("tasks", {"id": task_id}, limit=1)
    if not rows:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    return rows[0]


def visible_owner_ids(
    hierarchy: HierarchyManager,
    actor: Row,
    supervisor_filter: Optional[str] = None,
) -> Optional[List[str]]:
    """Owner ids whose tasks ``actor`` may list; None means no restriction"""
    role = actor["role"]

    if supervisor_filter and role != Role.MANAGER.value:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only managers can filter by supervisor")

    if role == Role.MANAGER.value:
        if supervisor_filter:
            return hierarchy.get_subordinate_ids(supervisor_filter)
        return None

    if role == Role.SUPERVISOR.value:
        return [actor["id"], *hierarchy.get_subordinate_ids(actor["id"])]

    return [actor["id"]]


@router.get("", response_model=TaskList)
def get_tasks(
    user_id: Optional[str] = Query(default=None, alias="userId"),
    role: Optional[str] = Query(default=None),
    supervisor_id: Optional[str] = Query(default=None, alias="supervisorId"),
    target_user_id: Optional[str] = Query(default=None, alias="targetUserId"),
    store: TableStore = Depends(get_store),
    token: Optional[str] = Depends(oauth2_scheme),
):
    """Get tasks with role-based visibility

    - User: own tasks
    - Supervisor: own tasks + tasks of supervised users
    - Manager: all tasks, or only those of users under ``supervisorId``
    """
    hierarchy = HierarchyManager(store)
    actor = resolve_actor(hierarchy, user_id, role, token)

    owner_ids = visible_owner_ids(hierarchy, actor, supervisor_id)

    if target_user_id:
        target = hierarchy.get_user(target_user_id)
        if target is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        decision = hierarchy.check(actor, target)
        if not decision:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=decision.reason)
        if owner_ids is not None and target_user_id not in owner_ids:
            return {"tasks": []}
        owner_ids = [target_user_id]

    if owner_ids is not None and not owner_ids:
        return {"tasks": []}

    filters = {"user_id": owner_ids} if owner_ids is not None else None
    tasks = store.select("tasks", filters)
    return {"tasks": _with_owners(hierarchy, tasks)}


@router.post("", response_model=TaskEnvelope)
def create_task(
    payload: TaskCreate,
    store: TableStore = Depends(get_store),
    token: Optional[str] = Depends(oauth2_scheme),
):
    """Create a task for the actor, or for a user the actor supervises"""
    title = (payload.title or "").strip()
    if not title:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Title is required")

    hierarchy = HierarchyManager(store)
    actor = resolve_actor(hierarchy, payload.user_id, _role_value(payload.role), token)

    owner_id = actor["id"]
    if payload.assigned_user_id and payload.assigned_user_id != actor["id"]:
        if actor["role"] not in SUPERVISOR_ROLES:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You can only create tasks for yourself")
        assignee = hierarchy.get_user(payload.assigned_user_id)
        if assignee is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Assigned user not found")
        decision = hierarchy.check(actor, assignee)
        if not decision:
            logger.warning(f"User {actor['id']} denied assigning task to {assignee['id']}: {decision.reason}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You can only assign tasks to users you supervise",
            )
        owner_id = assignee["id"]

    task = store.insert("tasks", {
        "title": title,
        "user_id": owner_id,
        "created_by": actor["id"],
        "completed": False,
        "completed_at": None,
    })
    logger.info(f"User {actor['id']} created task {task['id']} for {owner_id}")
    return {"task": _with_owners(hierarchy, [task])[0]}


@router.put("", response_model=TaskEnvelope)
def update_task(
    payload: TaskUpdate,
    store: TableStore = Depends(get_store),
    token: Optional[str] = Depends(oauth2_scheme),
):
    """Set or flip a task's completion; the timestamp is written with the flag"""
    if not payload.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Task ID is required")

    hierarchy = HierarchyManager(store)
    actor = resolve_actor(hierarchy, payload.user_id, _role_value(payload.role), token)
    task = _get_task(store, payload.id)

    decision = hierarchy.check_owner_id(actor, task["user_id"])
    if not decision:
        logger.warning(f"User {actor['id']} denied updating task {task['id']}: {decision.reason}")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=decision.reason)

    completed = (not task["completed"]) if payload.completed is None else payload.completed
    update_payload = {
        "completed": completed,
        "completed_at": datetime.now(timezone.utc) if completed else None,
    }

    updated = store.update("tasks", update_payload, {"id": task["id"]})
    if not updated:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")

    logger.info(f"User {actor['id']} set task {task['id']} completed={completed}")
    return {"task": _with_owners(hierarchy, updated)[0]}


@router.delete("", response_model=DeleteResult)
def delete_task(
    id: Optional[str] = Query(default=None),
    user_id: Optional[str] = Query(default=None, alias="userId"),
    role: Optional[str] = Query(default=None),
    store: TableStore = Depends(get_store),
    token: Optional[str] = Depends(oauth2_scheme),
):
    """Delete a task (owner, owner's supervisor, or any manager)"""
    if not id or not user_id or not role:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Task ID, User ID, and Role are required",
        )

    hierarchy = HierarchyManager(store)
    actor = resolve_actor(hierarchy, user_id, role, token)
    task = _get_task(store, id)

    decision = hierarchy.check_owner_id(actor, task["user_id"])
    if not decision:
        logger.warning(f"User {actor['id']} denied deleting task {task['id']}: {decision.reason}")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=decision.reason)

    store.delete("tasks", {"id": task["id"]})
    logger.info(f"User {actor['id']} deleted task {task['id']}")
    return {"success": True}
