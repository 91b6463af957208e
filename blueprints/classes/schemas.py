from __future__ import annotations
from typing import List
from pydantic import BaseModel, ConfigDict, Field

# ---------- Registration ----------
class ScheduleItemIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    week_day: int
    from_: str = Field(alias="from")
    to: str

    def as_item(self) -> dict:
        return {"week_day": self.week_day, "from": self.from_, "to": self.to}

class ClassRegistrationIn(BaseModel):
    name: str
    avatar: str
    whatsapp: str
    bio: str
    subject: str
    cost: float
    schedule: List[ScheduleItemIn] = Field(default_factory=list)

    def tutor_fields(self) -> dict:
        return {"name": self.name, "avatar": self.avatar, "whatsapp": self.whatsapp, "bio": self.bio}

    def class_fields(self) -> dict:
        return {"subject": self.subject, "cost": self.cost}

    def schedule_items(self) -> list[dict]:
        return [item.as_item() for item in self.schedule]

# ---------- Output ----------
class ScheduleSlotOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    week_day: int
    from_: str = Field(alias="from")
    to: str

class TutorOut(BaseModel):
    id: int
    name: str
    avatar: str
    whatsapp: str
    bio: str

class ClassDetailOut(BaseModel):
    id: int
    subject: str
    cost: float
    tutor: TutorOut
    schedule: List[ScheduleSlotOut]
