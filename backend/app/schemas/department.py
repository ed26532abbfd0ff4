"""Pydantic schemas for department requests and responses."""

from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class DepartmentBase(BaseModel):
    name: str
    slug: str
    color: str = "#dc2626"
    logo: Optional[str] = None
    is_active: bool = True


class DepartmentCreate(DepartmentBase):
    pass


class DepartmentUpdate(BaseModel):
    name: Optional[str] = None
    color: Optional[str] = None
    logo: Optional[str] = None
    is_active: Optional[bool] = None


class DepartmentOut(DepartmentBase):
    department_id: int
    created_at: Optional[datetime]

    model_config = {"from_attributes": True}
