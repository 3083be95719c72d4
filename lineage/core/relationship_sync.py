"""
Bidirectional relationship storage.

Each family relationship is kept as two rows, a forward edge (A, B, T)
and its reciprocal (B, A, inverse(T)), so either person can list their
relationships with a plain filter on person_id. Both rows of a pair are
always written in the same transaction.
"""

import logging
from datetime import date
from typing import List, Optional, Union

from sqlalchemy.exc import SQLAlchemyError, IntegrityError
from sqlalchemy.orm import Session, joinedload

from lineage.core.errors import (
    SelfRelationshipError,
    DuplicateRelationshipError,
    PersonNotFoundError,
    RelationshipNotFoundError,
)
from lineage.models.person import Person
from lineage.models.relationship import Relationship, RelationshipType

logger = logging.getLogger(__name__)


_INVERSE = {
    RelationshipType.PARENT: RelationshipType.CHILD,
    RelationshipType.CHILD: RelationshipType.PARENT,
    RelationshipType.SPOUSE: RelationshipType.SPOUSE,
    RelationshipType.SIBLING: RelationshipType.SIBLING,
}


def inverse_type(type: Union[RelationshipType, str]) -> RelationshipType:
    """PARENT <-> CHILD; SPOUSE and SIBLING are symmetric."""
    return _INVERSE[RelationshipType(type)]


def compute_is_active(type: Union[RelationshipType, str], divorce_date: Optional[date]) -> bool:
    return not (RelationshipType(type) == RelationshipType.SPOUSE and divorce_date is not None)


def _find_edge(db: Session, person_id: str, related_person_id: str, type: Union[RelationshipType, str]):
    return (
        db.query(Relationship)
        .filter(
            Relationship.person_id == person_id,
            Relationship.related_person_id == related_person_id,
            Relationship.type == RelationshipType(type).value,
        )
        .first()
    )


# ============================================================
# READ
# ============================================================

def list_for_person(
    db: Session,
    person_id: str,
    type: Optional[Union[RelationshipType, str]] = None,
) -> List[Relationship]:
    """
    Relationships where person_id is the forward subject.

    The reciprocal rows (where the person is related_person_id) are
    deliberately left out, otherwise every relationship would be
    reported twice. An unknown person_id yields an empty list.
    """
    query = (
        db.query(Relationship)
        .options(joinedload(Relationship.related_person))
        .filter(Relationship.person_id == person_id)
    )

    if type is not None:
        query = query.filter(Relationship.type == RelationshipType(type).value)

    return query.order_by(Relationship.created_at, Relationship.id).all()


def get_relationship(db: Session, relationship_id: str) -> Relationship:
    relationship = (
        db.query(Relationship)
        .options(joinedload(Relationship.related_person))
        .filter(Relationship.id == relationship_id)
        .first()
    )
    if not relationship:
        raise RelationshipNotFoundError(relationship_id)
    return relationship


# ============================================================
# CREATE
# ============================================================

def create_relationship(
    db: Session,
    person_id: str,
    related_person_id: str,
    type: Union[RelationshipType, str],
    marriage_date: Optional[date] = None,
    divorce_date: Optional[date] = None,
) -> str:
    """
    Insert the forward edge and its reciprocal, returning the forward id.

    Raises SelfRelationshipError, PersonNotFoundError or
    DuplicateRelationshipError before anything is written. If either
    insert fails, neither row is kept.
    """
    type = RelationshipType(type)

    if person_id == related_person_id:
        raise SelfRelationshipError(person_id)

    for pid in (person_id, related_person_id):
        if not db.query(Person).filter(Person.id == pid).first():
            raise PersonNotFoundError(pid)

    if _find_edge(db, person_id, related_person_id, type):
        raise DuplicateRelationshipError(person_id, related_person_id, type.value)

    is_active = compute_is_active(type, divorce_date)

    forward = Relationship(
        person_id=person_id,
        related_person_id=related_person_id,
        type=type.value,
        marriage_date=marriage_date,
        divorce_date=divorce_date,
        is_active=is_active,
    )
    reciprocal = Relationship(
        person_id=related_person_id,
        related_person_id=person_id,
        type=inverse_type(type).value,
        marriage_date=marriage_date,
        divorce_date=divorce_date,
        is_active=is_active,
    )

    try:
        db.add(forward)
        db.flush()
        db.add(reciprocal)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        # Lost a race with a concurrent create of the same pair
        if _find_edge(db, person_id, related_person_id, type) or _find_edge(
            db, related_person_id, person_id, inverse_type(type)
        ):
            raise DuplicateRelationshipError(person_id, related_person_id, type.value) from exc
        logger.exception(
            "Failed to create relationship pair %s -[%s]-> %s",
            person_id, type.value, related_person_id,
        )
        raise
    except SQLAlchemyError:
        db.rollback()
        logger.exception(
            "Failed to create relationship pair %s -[%s]-> %s",
            person_id, type.value, related_person_id,
        )
        raise

    logger.info(
        "Created relationship %s: %s -[%s]-> %s",
        forward.id, person_id, type.value, related_person_id,
    )
    return forward.id


# ============================================================
# UPDATE
# ============================================================

def update_relationship(
    db: Session,
    relationship_id: str,
    marriage_date: Optional[date] = None,
    divorce_date: Optional[date] = None,
) -> str:
    """
    Replace the date fields of a relationship and recompute is_active.

    Omitted dates are cleared. Only SPOUSE edges push the change to
    their reciprocal row.
    """
    relationship = db.query(Relationship).filter(Relationship.id == relationship_id).first()
    if not relationship:
        raise RelationshipNotFoundError(relationship_id)

    is_active = compute_is_active(relationship.type, divorce_date)

    try:
        relationship.marriage_date = marriage_date
        relationship.divorce_date = divorce_date
        relationship.is_active = is_active

        # TODO: confirm with product whether PARENT/CHILD/SIBLING reciprocals should sync too
        if relationship.type == RelationshipType.SPOUSE.value:
            reciprocal = _find_edge(
                db,
                relationship.related_person_id,
                relationship.person_id,
                RelationshipType.SPOUSE,
            )
            if reciprocal:
                reciprocal.marriage_date = marriage_date
                reciprocal.divorce_date = divorce_date
                reciprocal.is_active = is_active

        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to update relationship %s", relationship_id)
        raise

    logger.info("Updated relationship %s (is_active=%s)", relationship_id, is_active)
    return relationship_id


# ============================================================
# DELETE
# ============================================================

def delete_relationship(db: Session, relationship_id: str) -> None:
    """Delete a relationship together with its reciprocal, if one exists."""
    relationship = db.query(Relationship).filter(Relationship.id == relationship_id).first()
    if not relationship:
        raise RelationshipNotFoundError(relationship_id)

    person_id = relationship.person_id
    related_person_id = relationship.related_person_id
    reciprocal_type = inverse_type(relationship.type)

    try:
        db.delete(relationship)
        db.query(Relationship).filter(
            Relationship.person_id == related_person_id,
            Relationship.related_person_id == person_id,
            Relationship.type == reciprocal_type.value,
        ).delete(synchronize_session=False)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to delete relationship %s", relationship_id)
        raise

    logger.info(
        "Deleted relationship %s and its %s reciprocal",
        relationship_id, reciprocal_type.value,
    )


def delete_all_for_person(db: Session, person_id: str) -> int:
    """
    Remove every edge that mentions person_id, in either direction.
    Does not commit; the caller owns the transaction.
    """
    return (
        db.query(Relationship)
        .filter(
            (Relationship.person_id == person_id)
            | (Relationship.related_person_id == person_id)
        )
        .delete(synchronize_session=False)
    )
