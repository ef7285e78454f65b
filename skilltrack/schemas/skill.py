from datetime import datetime
from typing import Optional

from .base import CamelModel


class SkillCreate(CamelModel):
    name: str
    target_minutes: Optional[float] = None


class SkillUpdate(CamelModel):
    name: Optional[str] = None
    target_minutes: Optional[float] = None


class SkillOut(CamelModel):
    id: str
    user_id: str
    name: str
    total_minutes: int
    target_minutes: int
    created_at: datetime
    updated_at: datetime
