# taskdesk/utils/auth.py
import logging
from typing import Optional

from fastapi import HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from taskdesk.config import settings
from taskdesk.services.table_store import Row
from taskdesk.utils.hierarchy import HierarchyManager
from taskdesk.utils.security import verify_token

logger = logging.getLogger(__name__)

# The bearer header is optional unless TASKDESK_REQUIRE_TOKEN is set
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth", auto_error=False)


def resolve_actor(
    hierarchy: HierarchyManager,
    user_id: Optional[str],
    role: Optional[str] = None,
    token: Optional[str] = None,
) -> Row:
    """Load the acting user.

    The role is taken from the stored record; a ``role`` sent by the client
    must agree with it. A bearer token, when given, must belong to ``user_id``.
    """
    if not user_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User ID is required")

    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if token is None and settings.REQUIRE_TOKEN:
        raise credentials_exception
    if token is not None:
        payload = verify_token(token)
        if payload is None or payload.get("sub") != user_id:
            logger.warning(f"Rejected token presented for user {user_id}")
            raise credentials_exception

    actor = hierarchy.get_user(user_id)
    if actor is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unknown user")

    if role and role != actor["role"]:
        logger.warning(f"User {user_id} claimed role {role} but is {actor['role']}")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Role does not match the user record")

    return actor
