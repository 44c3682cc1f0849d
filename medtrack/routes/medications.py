"""
Defines the API endpoints for a user's own medication entries and the
adherence summaries built from them.
"""

from typing import Dict, List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import schemas, database
from ..auth import SessionContext, get_current_session
from ..exceptions import ValidationError
from ..services import adherence
from ..services.assignments import ensure_can_read
from ..services.medication_repository import MedicationRepository
from ..utils.dates import month_window, parse_iso_date

router = APIRouter(prefix="/medications", tags=["Medications"])


def get_repository(db: Session = Depends(database.get_db)) -> MedicationRepository:
    """Dependency that binds a MedicationRepository to the request's session."""
    return MedicationRepository(db)


@router.post("", response_model=schemas.MedicationCreated)
def add_medication(
    medication: schemas.MedicationCreate,
    repo: MedicationRepository = Depends(get_repository),
    session: SessionContext = Depends(get_current_session),
):
    """Creates a new medication entry for the caller."""
    medication_id = repo.add(
        session.id,
        medication.name,
        medication.dosage,
        medication.frequency,
        medication.date,
        medication.time,
    )
    return {"message": "Medication added", "id": medication_id}


@router.get("", response_model=List[schemas.MedicationResponse])
def get_medications(
    date: Optional[str] = None,
    repo: MedicationRepository = Depends(get_repository),
    session: SessionContext = Depends(get_current_session),
):
    """Lists the caller's active entries for one date."""
    return repo.list_for_date(session.id, date)


@router.put("/taken", response_model=schemas.BatchTakenResponse)
def mark_many_taken(
    request: schemas.BatchTakenRequest,
    repo: MedicationRepository = Depends(get_repository),
    session: SessionContext = Depends(get_current_session),
):
    """Marks several of the caller's entries taken; all succeed or none do."""
    ids = repo.mark_taken_batch(session.id, request.ids)
    return {"message": "Medications marked as taken", "ids": ids}


@router.put("/{medication_id}/taken", response_model=schemas.MessageResponse)
def mark_taken(
    medication_id: int,
    repo: MedicationRepository = Depends(get_repository),
    session: SessionContext = Depends(get_current_session),
):
    """Marks one of the caller's entries taken. Unknown ids are ignored."""
    repo.mark_taken(session.id, medication_id)
    return {"message": "Medication marked as taken"}


@router.delete("/{medication_id}", response_model=schemas.MessageResponse)
def delete_medication(
    medication_id: int,
    repo: MedicationRepository = Depends(get_repository),
    session: SessionContext = Depends(get_current_session),
):
    """Soft-deletes one of the caller's entries. Unknown ids are ignored."""
    repo.soft_delete(session.id, medication_id)
    return {"message": "Medication deleted"}


@router.post("/summary", response_model=schemas.AdherenceSummaryResponse)
def get_summary(
    query: schemas.PatientDateQuery,
    repo: MedicationRepository = Depends(get_repository),
    session: SessionContext = Depends(get_current_session),
):
    """
    Computes streak, totals and adherence rate for the month of `date`.

    Callers may summarize themselves; caretakers may summarize patients.
    """
    if not query.user_id or not query.date:
        raise ValidationError("user_id and date are required")
    ensure_can_read(repo.db, session, query.user_id, allow_self=True)

    reference = parse_iso_date(query.date)
    start, end = month_window(reference)
    summary = adherence.summarize(repo.list_window(query.user_id, start, end), reference)
    summary.days = {
        day: [schemas.MedicationResponse.model_validate(entry) for entry in entries]
        for day, entries in summary.days.items()
    }
    return summary.as_response()


@router.post("/calendar-summary", response_model=Dict[str, str])
def get_calendar_summary(
    query: schemas.PatientQuery,
    repo: MedicationRepository = Depends(get_repository),
    session: SessionContext = Depends(get_current_session),
):
    """Maps every date with entries to "taken" or "missed" for calendar colouring."""
    if not query.user_id:
        raise ValidationError("user_id is required")
    ensure_can_read(repo.db, session, query.user_id, allow_self=True)

    return adherence.calendar_summary(repo.list_active(query.user_id))
