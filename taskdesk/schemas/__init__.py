from .user import (
    AuthRequest, UserOut, SupervisorOption, SupervisedUser, DirectoryUser,
    SupervisorList, UserUpdate, UserEnvelope,
)
from .tokens import Token
from .task import TaskCreate, TaskUpdate, TaskOwner, TaskOut, TaskList, TaskEnvelope, DeleteResult
