from .user import User, Role, SUPERVISOR_ROLES, new_id
from .task import Task
