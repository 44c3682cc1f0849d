"""
Defines Pydantic schemas for API data validation and serialization.

These schemas determine the shape of the data for API requests and responses.
Response field names follow the JSON the web client already consumes
(`userId`, `totalTaken`, ...).
"""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel


class Role(str, Enum):
    """The two kinds of account."""
    PATIENT = "patient"
    CARETAKER = "caretaker"


# --- Accounts & Sessions ---

class UserCreate(BaseModel):
    """Schema for validating new user registration data."""
    username: str
    password: str
    role: Role


class UserLogin(BaseModel):
    """Schema for validating user login credentials."""
    username: str
    password: str


class SignupResponse(BaseModel):
    message: str
    userId: int


class LoginResponse(BaseModel):
    """Schema for the session token response."""
    message: str
    token: str
    role: Role
    userId: int


class SessionResponse(BaseModel):
    """The decoded session of the caller."""
    id: int
    username: str
    role: Role
    expires_at: datetime


class PatientResponse(BaseModel):
    id: int
    username: str

    class Config:
        from_attributes = True


# --- Medications ---

class MedicationCreate(BaseModel):
    """
    Schema for a new medication entry.

    Fields are optional here so that a missing field and an empty one are
    rejected with the same message by the repository.
    """
    name: Optional[str] = None
    dosage: Optional[str] = None
    frequency: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None


class MedicationResponse(BaseModel):
    """Schema for a medication entry in API responses."""
    id: int
    user_id: int
    name: str
    dosage: str
    frequency: str
    date: str
    time: str
    active: bool
    taken: bool

    class Config:
        from_attributes = True


class MessageResponse(BaseModel):
    message: str


class MedicationCreated(BaseModel):
    message: str
    id: int


class BatchTakenRequest(BaseModel):
    """Ids to mark taken together; either all succeed or none do."""
    ids: List[int]


class BatchTakenResponse(BaseModel):
    message: str
    ids: List[int]


# --- Caretaker & Summaries ---

class PatientDateQuery(BaseModel):
    """Body for reads scoped to one user and one reference date."""
    user_id: Optional[int] = None
    date: Optional[str] = None


class PatientQuery(BaseModel):
    user_id: Optional[int] = None


class AssignmentResponse(BaseModel):
    message: str
    caretaker_id: int
    patient_id: int


class AdherenceSummaryResponse(BaseModel):
    """Monthly adherence figures for one user."""
    streak: int
    totalTaken: int
    totalMissed: int
    adherenceRate: str
    days: Dict[str, List[MedicationResponse]]
