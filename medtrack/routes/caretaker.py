"""
Defines the API endpoints caretakers use to find and monitor patients.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import schemas, database
from ..auth import SessionContext, require_caretaker
from ..exceptions import NotFoundOrUnowned
from ..services import assignments
from ..services.medication_repository import MedicationRepository

router = APIRouter(tags=["Caretaker"])


@router.get("/patients", response_model=List[schemas.PatientResponse])
def get_patients(
    db: Session = Depends(database.get_db),
    session: SessionContext = Depends(require_caretaker),
):
    """Lists the patients this caretaker can monitor."""
    return assignments.list_patients(db, session.id)


@router.post("/caretaker/medications", response_model=List[schemas.MedicationResponse])
def get_patient_medications(
    query: schemas.PatientDateQuery,
    db: Session = Depends(database.get_db),
    session: SessionContext = Depends(require_caretaker),
):
    """Lists a patient's active entries for one date."""
    return MedicationRepository(db).list_for_patient(session, query.user_id, query.date)


@router.get("/caretaker/patients", response_model=List[schemas.PatientResponse])
def get_assigned_patients(
    db: Session = Depends(database.get_db),
    session: SessionContext = Depends(require_caretaker),
):
    """Lists the patients explicitly assigned to this caretaker."""
    return assignments.list_assigned(db, session.id)


@router.post("/caretaker/patients/{patient_id}", response_model=schemas.AssignmentResponse)
def assign_patient(
    patient_id: int,
    db: Session = Depends(database.get_db),
    session: SessionContext = Depends(require_caretaker),
):
    """Assigns a patient to the calling caretaker."""
    assignment = assignments.assign(db, session.id, patient_id)
    return {
        "message": "Patient assigned",
        "caretaker_id": assignment.caretaker_id,
        "patient_id": assignment.patient_id,
    }


@router.delete("/caretaker/patients/{patient_id}", response_model=schemas.AssignmentResponse)
def unassign_patient(
    patient_id: int,
    db: Session = Depends(database.get_db),
    session: SessionContext = Depends(require_caretaker),
):
    """Removes a patient from the calling caretaker."""
    if not assignments.unassign(db, session.id, patient_id):
        raise NotFoundOrUnowned("Patient is not assigned to this caretaker")
    return {"message": "Patient unassigned", "caretaker_id": session.id, "patient_id": patient_id}
