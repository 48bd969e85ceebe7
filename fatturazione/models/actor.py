"""
Caller identity, used for audit logging only.
"""
from typing import List

from pydantic import BaseModel, Field


class ActorContext(BaseModel):
    user_id: str
    user_name: str
    roles: List[str] = Field(default_factory=list)

    @classmethod
    def system(cls) -> "ActorContext":
        return cls(user_id="system", user_name="System")
