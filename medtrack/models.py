"""
Defines the SQLAlchemy ORM models for the database.

Each class in this file represents a table in the database and its columns.
"""

from sqlalchemy import Column, Integer, String, ForeignKey, Boolean, UniqueConstraint
from sqlalchemy.orm import relationship

from .database import Base


class User(Base):
    """
    Represents the 'users' table in the database.

    An account is either a patient, who owns medication entries, or a
    caretaker, who owns none but may read patients' entries.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(String, nullable=False, default="patient")

    medications = relationship("Medication", back_populates="owner")


class Medication(Base):
    """
    Represents the 'medications' table.

    Rows are never physically removed: deleting sets `active` to False.
    """
    __tablename__ = "medications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    name = Column(String, nullable=False)
    dosage = Column(String, nullable=False)  # e.g., "1 tablet", "10ml"
    frequency = Column(String, nullable=False)  # e.g., "daily", "twice a day"

    # ISO yyyy-MM-dd, so string ordering matches calendar ordering
    date = Column(String(10), index=True, nullable=False)
    time = Column(String(8), nullable=False)

    active = Column(Boolean, nullable=False, default=True)
    taken = Column(Boolean, nullable=False, default=False)

    owner = relationship("User", back_populates="medications")


class CaretakerAssignment(Base):
    """Links a caretaker to a patient they are allowed to monitor."""
    __tablename__ = "caretaker_assignments"
    __table_args__ = (UniqueConstraint("caretaker_id", "patient_id", name="uq_caretaker_patient"),)

    id = Column(Integer, primary_key=True, index=True)
    caretaker_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    patient_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)

    patient = relationship("User", foreign_keys=[patient_id])
