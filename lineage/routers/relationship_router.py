import math
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from lineage.config import settings
from lineage.database import get_db
from lineage.core import family_graph, relationship_sync
from lineage.core.errors import InvalidPaginationError
from lineage.models.relationship import RelationshipType
from lineage.schemas.relationship_schema import (
    RelationshipCreate,
    RelationshipUpdate,
    RelationshipOut,
    RelationshipId,
    RelationshipPage,
)
from lineage.schemas.family_graph_schema import RelationshipPathOut, CommonAncestorOut

router = APIRouter(prefix="/relationships", tags=["Relationships"])


# --------------------------------------------------
# LIST (one person's forward edges, paginated)
# --------------------------------------------------
@router.get("", response_model=RelationshipPage)
def list_relationships(
    person_id: Optional[str] = None,
    type: Optional[RelationshipType] = None,
    page: int = 1,
    limit: int = Query(default=settings.DEFAULT_PAGE_LIMIT),
    db: Session = Depends(get_db),
):
    if page < 1 or limit < 1 or limit > settings.MAX_PAGE_LIMIT:
        raise InvalidPaginationError(page, limit, settings.MAX_PAGE_LIMIT)

    if not person_id:
        return {
            "items": [],
            "pagination": {"page": page, "limit": limit, "total": 0, "pages": 0},
        }

    items = relationship_sync.list_for_person(db, person_id, type)

    total = len(items)
    start = (page - 1) * limit

    return {
        "items": items[start:start + limit],
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "pages": math.ceil(total / limit),
        },
    }


# --------------------------------------------------
# CREATE
# --------------------------------------------------
@router.post("", response_model=RelationshipId, status_code=201)
def create_relationship(
    payload: RelationshipCreate,
    db: Session = Depends(get_db),
):
    relationship_id = relationship_sync.create_relationship(
        db,
        person_id=payload.person_id,
        related_person_id=payload.related_person_id,
        type=payload.type,
        marriage_date=payload.marriage_date,
        divorce_date=payload.divorce_date,
    )
    return {"id": relationship_id}


# --------------------------------------------------
# PATH BETWEEN TWO PERSONS
# --------------------------------------------------
@router.get("/path", response_model=RelationshipPathOut)
def relationship_path(
    person_id: str,
    other_person_id: str,
    db: Session = Depends(get_db),
):
    result = family_graph.find_relationship_path(db, person_id, other_person_id)
    if result is None:
        return {"found": False}
    return {"found": True, **result}


# --------------------------------------------------
# NEAREST COMMON ANCESTOR
# --------------------------------------------------
@router.get("/common-ancestor", response_model=CommonAncestorOut)
def common_ancestor(
    person_id: str,
    other_person_id: str,
    db: Session = Depends(get_db),
):
    result = family_graph.find_common_ancestor(db, person_id, other_person_id)
    if result is None:
        return {"found": False}
    return {"found": True, **result}


# --------------------------------------------------
# GET ONE
# --------------------------------------------------
@router.get("/{relationship_id}", response_model=RelationshipOut)
def get_relationship(
    relationship_id: str,
    db: Session = Depends(get_db),
):
    return relationship_sync.get_relationship(db, relationship_id)


# --------------------------------------------------
# UPDATE DATES
# --------------------------------------------------
@router.put("/{relationship_id}", response_model=RelationshipId)
def update_relationship(
    relationship_id: str,
    payload: RelationshipUpdate,
    db: Session = Depends(get_db),
):
    updated_id = relationship_sync.update_relationship(
        db,
        relationship_id,
        marriage_date=payload.marriage_date,
        divorce_date=payload.divorce_date,
    )
    return {"id": updated_id}


# --------------------------------------------------
# DELETE (both edges)
# --------------------------------------------------
@router.delete("/{relationship_id}", status_code=204)
def delete_relationship(
    relationship_id: str,
    db: Session = Depends(get_db),
):
    relationship_sync.delete_relationship(db, relationship_id)
    return Response(status_code=204)
