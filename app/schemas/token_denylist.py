from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class TokenDenylistCreate(BaseModel):
    jti: str
    user_id: Optional[int] = None
    # naive UTC, same as every other stored datetime
    exp: datetime
