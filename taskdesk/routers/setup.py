# taskdesk/routers/setup.py
import logging

from fastapi import APIRouter, Depends

from taskdesk.services.table_store import StoreError, TableStore, get_store

logger = logging.getLogger(__name__)

router = APIRouter()

SETUP_SQL = """
CREATE TABLE IF NOT EXISTS users (
  id VARCHAR(36) PRIMARY KEY,
  username TEXT UNIQUE NOT NULL,
  password_hash TEXT NOT NULL,
  role TEXT NOT NULL DEFAULT 'User',
  supervisor_id VARCHAR(36) REFERENCES users(id) ON DELETE SET NULL,
  created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS tasks (
  id VARCHAR(36) PRIMARY KEY,
  user_id VARCHAR(36) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
  created_by VARCHAR(36) REFERENCES users(id) ON DELETE SET NULL,
  title TEXT NOT NULL,
  completed BOOLEAN NOT NULL DEFAULT FALSE,
  completed_at TIMESTAMP WITH TIME ZONE,
  created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
);
"""


def _probe(store: TableStore, table: str):
    """Return the error message for ``table`` or None if a read succeeds"""
    try:
        store.select(table, columns=("id",), limit=1)
    except StoreError as e:
        return e.message
    return None


@router.get("/setup-db")
def check_database(store: TableStore = Depends(get_store)):
    """Report whether both tables are reachable; never writes"""
    users_error = _probe(store, "users")
    tasks_error = _probe(store, "tasks")

    logger.info(f"Database check: users ok={users_error is None}, tasks ok={tasks_error is None}")

    return {
        "success": True,
        "message": "Database check complete",
        "status": {
            "usersTableExists": users_error is None,
            "tasksTableExists": tasks_error is None,
            "usersError": users_error,
            "tasksError": tasks_error,
        },
        "setupInstructions": SETUP_SQL.strip(),
    }
