# taskdesk/utils/hierarchy.py
from typing import List, Optional

from taskdesk.models.user import SUPERVISOR_ROLES
from taskdesk.services.table_store import Row, TableStore
from taskdesk.utils.permissions import Decision, authorize

# Never hand the password hash back to a caller
PUBLIC_USER_COLUMNS = ("id", "username", "role", "supervisor_id", "created_at")


class HierarchyManager:
    """Lookups over the single-level supervisor -> supervisee relation"""

    def __init__(self, store: TableStore):
        self.store = store

    def get_user(self, user_id: str) -> Optional[Row]:
        """Get a user row without its password hash"""
        rows = self.store.select("users", {"id": user_id}, columns=PUBLIC_USER_COLUMNS, limit=1)
        return rows[0] if rows else None

    def get_users(self, user_ids: List[str]) -> List[Row]:
        if not user_ids:
            return []
        return self.store.select("users", {"id": list(user_ids)}, columns=PUBLIC_USER_COLUMNS)

    def get_all_users(self) -> List[Row]:
        return self.store.select("users", columns=("id", "username", "role", "supervisor_id"))

    def get_supervisors(self) -> List[Row]:
        """Every user that may be picked as somebody's supervisor"""
        return self.store.select("users", {"role": list(SUPERVISOR_ROLES)}, columns=("id", "username"))

    def get_direct_subordinates(self, supervisor_id: str) -> List[Row]:
        return self.store.select(
            "users", {"supervisor_id": supervisor_id}, columns=("id", "username", "role")
        )

    def get_subordinate_ids(self, supervisor_id: str) -> List[str]:
        return [row["id"] for row in self.store.select("users", {"supervisor_id": supervisor_id}, columns=("id",))]

    def check(self, actor: Row, owner: Row) -> Decision:
        """Run the shared policy for ``actor`` against an already loaded ``owner`` row"""
        return authorize(actor["role"], actor["id"], owner["id"], owner.get("supervisor_id"))

    def check_owner_id(self, actor: Row, owner_id: str) -> Decision:
        """Like ``check`` but loads the owner first; a missing owner has no supervisor"""
        if actor["id"] == owner_id:
            return authorize(actor["role"], actor["id"], owner_id, None)
        owner = self.get_user(owner_id)
        supervisor_id = owner.get("supervisor_id") if owner else None
        return authorize(actor["role"], actor["id"], owner_id, supervisor_id)
