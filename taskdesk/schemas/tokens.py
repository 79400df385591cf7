# taskdesk/schemas/tokens.py
from pydantic import BaseModel

from taskdesk.schemas.user import UserOut


class Token(BaseModel):
    access_token: str
    token_type: str
    user: UserOut
