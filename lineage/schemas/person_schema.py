from pydantic import BaseModel, Field
from typing import Optional, Literal
from datetime import date, datetime


Gender = Literal["MALE", "FEMALE", "OTHER", "PREFER_NOT_TO_SAY"]


# ---------------------------------------------------------
# CREATE
# ---------------------------------------------------------
class PersonCreate(BaseModel):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    maiden_name: Optional[str] = None
    gender: Optional[Gender] = None
    date_of_birth: Optional[date] = None
    date_of_passing: Optional[date] = None
    is_living: bool = True


# ---------------------------------------------------------
# OUT
# ---------------------------------------------------------
class PersonOut(PersonCreate):
    id: str
    created_at: datetime
    updated_at: datetime

    model_config = {
        "from_attributes": True
    }


# ---------------------------------------------------------
# SUMMARY (embedded in relationships)
# ---------------------------------------------------------
class PersonSummary(BaseModel):
    id: str
    first_name: str
    last_name: str
    gender: Optional[Gender] = None

    model_config = {
        "from_attributes": True
    }
