"""Pydantic schemas for user requests and responses."""

from pydantic import BaseModel
from typing import Optional, Literal
from datetime import datetime


UserRole = Literal["viewer", "editor", "admin", "super_admin"]
DepartmentType = Literal["ems", "police", "doj", "fire", "government"]


class UserBase(BaseModel):
    email: str
    username: str
    department: DepartmentType
    role: UserRole = "viewer"
    game_character_name: Optional[str] = None
    rank: Optional[str] = None
    job_title: Optional[str] = None
    callsign: Optional[str] = None
    assignment: Optional[str] = None


class UserCreate(UserBase):
    pass


class UserProfileUpdate(BaseModel):
    username: Optional[str] = None
    game_character_name: Optional[str] = None
    rank: Optional[str] = None
    job_title: Optional[str] = None
    phone_number: Optional[str] = None
    callsign: Optional[str] = None
    assignment: Optional[str] = None
    activity: Optional[Literal["Active", "Moderate", "Inactive"]] = None
    duty_status: Optional[Literal["Full-Time", "Part-Time", "On-Call"]] = None
    timezone: Optional[str] = None
    discord_username: Optional[str] = None
    is_fto: Optional[bool] = None
    is_solo_cleared: Optional[bool] = None
    is_water_rescue: Optional[bool] = None
    is_co_pilot_cert: Optional[bool] = None
    is_aviation_cert: Optional[bool] = None
    is_psych_neuro: Optional[bool] = None


class UserRoleUpdate(BaseModel):
    role: UserRole
    department: Optional[DepartmentType] = None


class UserOut(UserBase):
    user_id: int
    phone_number: Optional[str] = None
    activity: Optional[str] = None
    duty_status: Optional[str] = None
    timezone: Optional[str] = None
    discord_username: Optional[str] = None
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class RosterEntry(BaseModel):
    user_id: int
    name: str
    rank: str
    callsign: str
    assignment: str
    activity: str
    status: str
    fto: bool
    solo_cleared: bool
    water_rescue: bool
    co_pilot: bool
    aviation: bool
    psych_neuro: bool


class RosterOut(BaseModel):
    department: str
    users: list[RosterEntry]
    total: int


class LoginRequest(BaseModel):
    email: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut
