from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import date, datetime


class ChildCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    birth_date: date

    @field_validator("birth_date")
    @classmethod
    def birth_date_not_in_future(cls, v):
        if v > date.today():
            raise ValueError("Birth date cannot be in the future")
        return v


class ChildResponse(BaseModel):
    id: int
    name: str
    birth_date: date
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
