import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from lineage.database import get_db
from lineage.core.family_graph import require_person, find_ancestors, find_descendants
from lineage.core.relationship_sync import delete_all_for_person
from lineage.models.person import Person
from lineage.schemas.person_schema import PersonCreate, PersonOut
from lineage.schemas.family_graph_schema import GenerationEntry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/persons", tags=["Persons"])


@router.post("", response_model=PersonOut, status_code=201)
def create_person(
    payload: PersonCreate,
    db: Session = Depends(get_db),
):
    person = Person(**payload.model_dump())

    db.add(person)
    db.commit()
    db.refresh(person)
    return person


@router.get("", response_model=List[PersonOut])
def list_persons(db: Session = Depends(get_db)):
    return (
        db.query(Person)
        .order_by(Person.last_name, Person.first_name)
        .all()
    )


@router.get("/{person_id}", response_model=PersonOut)
def get_person(
    person_id: str,
    db: Session = Depends(get_db),
):
    return require_person(db, person_id)


@router.get("/{person_id}/ancestors", response_model=List[GenerationEntry])
def get_ancestors(
    person_id: str,
    max_generations: Optional[int] = Query(default=None, ge=1),
    db: Session = Depends(get_db),
):
    return find_ancestors(db, person_id, max_generations)


@router.get("/{person_id}/descendants", response_model=List[GenerationEntry])
def get_descendants(
    person_id: str,
    max_generations: Optional[int] = Query(default=None, ge=1),
    db: Session = Depends(get_db),
):
    return find_descendants(db, person_id, max_generations)


@router.delete("/{person_id}", status_code=204)
def delete_person(
    person_id: str,
    db: Session = Depends(get_db),
):
    person = require_person(db, person_id)

    # Both edges of every pair go with the person
    removed = delete_all_for_person(db, person_id)
    db.delete(person)
    db.commit()

    logger.info("Deleted person %s and %d relationship rows", person_id, removed)
    return Response(status_code=204)
