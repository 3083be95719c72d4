import enum
import uuid

from sqlalchemy import (
    Column,
    String,
    Date,
    Boolean,
    DateTime,
    ForeignKey,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from lineage.database import Base, utcnow


class RelationshipType(str, enum.Enum):
    PARENT = "PARENT"
    CHILD = "CHILD"
    SPOUSE = "SPOUSE"
    SIBLING = "SIBLING"


class Relationship(Base):
    """
    One directed edge of a family relationship.

    Every row (A, B, T) is stored alongside its reciprocal
    (B, A, inverse(T)); see lineage.core.relationship_sync.
    """

    __tablename__ = "relationships"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))

    # ------------------------------------
    # Edge endpoints
    # ------------------------------------
    # How *person* relates to *related_person*: "person is PARENT of related_person"
    person_id = Column(
        String,
        ForeignKey("persons.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    related_person_id = Column(
        String,
        ForeignKey("persons.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # PARENT | CHILD | SPOUSE | SIBLING
    type = Column(String, nullable=False)

    # ------------------------------------
    # SPOUSE only
    # ------------------------------------
    marriage_date = Column(Date, nullable=True)
    divorce_date = Column(Date, nullable=True)

    # False only for a SPOUSE edge with a divorce date
    is_active = Column(Boolean, default=True, nullable=False)

    # ------------------------------------
    # Timestamps
    # ------------------------------------
    # Set in Python so sub-second order survives on SQLite
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )

    related_person = relationship("Person", foreign_keys=[related_person_id])

    __table_args__ = (
        UniqueConstraint(
            "person_id",
            "related_person_id",
            "type",
            name="uq_relationships_person_related_type",
        ),
    )
