import uuid

from sqlalchemy import Column, String, Date, Boolean, DateTime

from lineage.database import Base, utcnow


class Person(Base):
    """
    A member of the family tree.
    Relationships reference persons by id in both directions.
    """
    __tablename__ = "persons"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))

    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    maiden_name = Column(String, nullable=True)

    # MALE | FEMALE | OTHER | PREFER_NOT_TO_SAY
    gender = Column(String, nullable=True)

    date_of_birth = Column(Date, nullable=True)
    date_of_passing = Column(Date, nullable=True)
    is_living = Column(Boolean, default=True, nullable=False)

    # Set in Python so sub-second order survives on SQLite
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )
