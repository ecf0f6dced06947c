from typing import Optional

from pydantic import BaseModel

from app.models import GroupType


class AdminLogin(BaseModel):
    password: Optional[str] = None


class ParticipantLogin(BaseModel):
    code: Optional[str] = None


class UserRead(BaseModel):
    id: str
    name: str
    nickname: Optional[str]
    code: str
    group_type: GroupType
    seat_number: Optional[str]


class ParticipantLoginResult(BaseModel):
    success: bool = True
    user: UserRead
    should_setup_profile: bool


class NicknameUpdate(BaseModel):
    nickname: Optional[str] = None
