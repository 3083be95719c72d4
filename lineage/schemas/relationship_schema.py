from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date

from lineage.models.relationship import RelationshipType
from .person_schema import PersonSummary


# --------------------------------------------------
# CREATE
# --------------------------------------------------
class RelationshipCreate(BaseModel):
    person_id: str = Field(min_length=1)
    related_person_id: str = Field(min_length=1)
    type: RelationshipType
    marriage_date: Optional[date] = None
    divorce_date: Optional[date] = None


# --------------------------------------------------
# UPDATE (dates only; omitted dates are cleared)
# --------------------------------------------------
class RelationshipUpdate(BaseModel):
    marriage_date: Optional[date] = None
    divorce_date: Optional[date] = None


# --------------------------------------------------
# OUT
# --------------------------------------------------
class RelationshipOut(BaseModel):
    id: str
    person_id: str
    related_person_id: str
    type: RelationshipType
    is_active: bool
    marriage_date: Optional[date] = None
    divorce_date: Optional[date] = None
    related_person: PersonSummary

    model_config = {
        "from_attributes": True
    }


class RelationshipId(BaseModel):
    id: str


# --------------------------------------------------
# LIST (paginated)
# --------------------------------------------------
class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class RelationshipPage(BaseModel):
    items: List[RelationshipOut]
    pagination: Pagination
