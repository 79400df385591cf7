# taskdesk/routers/auth.py
import logging

from fastapi import APIRouter, Depends, HTTPException, status

from taskdesk.models.user import Role, SUPERVISOR_ROLES
from taskdesk.schemas.tokens import Token
from taskdesk.schemas.user import AuthRequest, UserOut
from taskdesk.services.table_store import TableStore, get_store
from taskdesk.utils.hierarchy import PUBLIC_USER_COLUMNS
from taskdesk.utils.security import create_access_token, get_password_hash, verify_password

logger = logging.getLogger(__name__)

router = APIRouter()


def _token_response(user: dict) -> dict:
    public = {key: user.get(key) for key in PUBLIC_USER_COLUMNS}
    token = create_access_token(data={"sub": user["id"], "role": user["role"]})
    return {
        "access_token": token,
        "token_type": "bearer",
        "user": UserOut.model_validate(public),
    }


@router.post("", response_model=Token)
def authenticate(payload: AuthRequest, store: TableStore = Depends(get_store)):
    """Log in (``isLogin: true``) or sign up with a username and password"""
    username = payload.username.strip()
    if not username or not payload.password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username and password are required")

    if payload.is_login:
        return login(store, username, payload.password)
    return signup(store, username, payload)


def login(store: TableStore, username: str, password: str) -> dict:
    rows = store.select("users", {"username": username}, limit=1)
    user = rows[0] if rows else None

    # Same message for unknown user and wrong password
    if user is None or not verify_password(password, user["password_hash"]):
        logger.warning(f"Failed login for username {username!r}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid username or password")

    logger.info(f"User {user['id']} logged in")
    return _token_response(user)


def signup(store: TableStore, username: str, payload: AuthRequest) -> dict:
    if store.select("users", {"username": username}, columns=("id",), limit=1):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already exists")

    user_data = {
        "username": username,
        "password_hash": get_password_hash(payload.password),
        "role": (payload.role or Role.USER).value,
    }

    if payload.supervisor_id:
        supervisors = store.select("users", {"id": payload.supervisor_id}, columns=("role",), limit=1)
        if not supervisors:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid supervisor ID")
        if supervisors[0]["role"] not in SUPERVISOR_ROLES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Assigned supervisor must have Supervisor or Manager role",
            )
        user_data["supervisor_id"] = payload.supervisor_id

    new_user = store.insert("users", user_data)
    logger.info(f"Signed up user {new_user['id']} as {new_user['role']}")
    return _token_response(new_user)
