from pydantic import BaseModel
from typing import Optional, List, Literal

from .person_schema import PersonSummary


# ---------------------------------------------------------
# ANCESTORS / DESCENDANTS
# ---------------------------------------------------------
class GenerationEntry(BaseModel):
    person: PersonSummary
    # 1 = parent (or child), 2 = grandparent (or grandchild), ...
    generation: int


# ---------------------------------------------------------
# PATH BETWEEN TWO PERSONS
# ---------------------------------------------------------
class RelationshipPathOut(BaseModel):
    found: bool
    relationship: Optional[str] = None
    distance: Optional[int] = None
    path: List[PersonSummary] = []
    steps: List[Literal["parent", "child", "spouse", "sibling"]] = []


# ---------------------------------------------------------
# COMMON ANCESTOR
# ---------------------------------------------------------
class CommonAncestorOut(BaseModel):
    found: bool
    person: Optional[PersonSummary] = None
    generations_from_person: Optional[int] = None
    generations_from_other: Optional[int] = None
