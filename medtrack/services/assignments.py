"""
Caretaker to patient assignments and the read-access rule built on them.
"""

import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import models
from ..core.config import settings
from ..exceptions import AccessDenied, NotFoundOrUnowned
from ..schemas import Role

logger = logging.getLogger(__name__)


def is_assigned(db: Session, caretaker_id: int, patient_id: int) -> bool:
    return db.query(models.CaretakerAssignment).filter(
        models.CaretakerAssignment.caretaker_id == caretaker_id,
        models.CaretakerAssignment.patient_id == patient_id,
    ).first() is not None


def ensure_can_read(db: Session, session, owner_id: int, allow_self: bool = False) -> None:
    """
    Checks that the caller may read another account's medication data.

    Caretakers may read any patient unless ENFORCE_CARETAKER_ASSIGNMENTS is
    set, in which case the patient must be assigned to them. With
    `allow_self`, callers may always read their own data.

    Raises:
        AccessDenied: If the caller is not allowed to read `owner_id`.
    """
    if allow_self and session.id == owner_id:
        return
    if not session.is_caretaker:
        logger.warning(f"User {session.id} denied access to data of user {owner_id}.")
        raise AccessDenied()
    if settings.ENFORCE_CARETAKER_ASSIGNMENTS and not is_assigned(db, session.id, owner_id):
        logger.warning(f"Caretaker {session.id} is not assigned to user {owner_id}.")
        raise AccessDenied("Patient is not assigned to this caretaker")


def list_patients(db: Session, caretaker_id: int) -> List[models.User]:
    """Patients visible to a caretaker: all of them, or only assigned ones when enforced."""
    if settings.ENFORCE_CARETAKER_ASSIGNMENTS:
        return list_assigned(db, caretaker_id)
    return db.query(models.User).filter(models.User.role == Role.PATIENT.value).order_by(models.User.id).all()


def list_assigned(db: Session, caretaker_id: int) -> List[models.User]:
    return (
        db.query(models.User)
        .join(models.CaretakerAssignment, models.CaretakerAssignment.patient_id == models.User.id)
        .filter(models.CaretakerAssignment.caretaker_id == caretaker_id)
        .order_by(models.User.id)
        .all()
    )


def assign(db: Session, caretaker_id: int, patient_id: int) -> models.CaretakerAssignment:
    """
    Links a patient to a caretaker. Assigning twice returns the existing link.

    Raises:
        NotFoundOrUnowned: If `patient_id` is not a patient account.
    """
    patient = db.query(models.User).filter(
        models.User.id == patient_id,
        models.User.role == Role.PATIENT.value,
    ).first()
    if patient is None:
        raise NotFoundOrUnowned("Patient not found")

    existing = db.query(models.CaretakerAssignment).filter(
        models.CaretakerAssignment.caretaker_id == caretaker_id,
        models.CaretakerAssignment.patient_id == patient_id,
    ).first()
    if existing:
        return existing

    assignment = models.CaretakerAssignment(caretaker_id=caretaker_id, patient_id=patient_id)
    db.add(assignment)
    try:
        db.commit()
    except IntegrityError:
        # Another request created the same link first
        db.rollback()
        return db.query(models.CaretakerAssignment).filter(
            models.CaretakerAssignment.caretaker_id == caretaker_id,
            models.CaretakerAssignment.patient_id == patient_id,
        ).one()
    db.refresh(assignment)
    logger.info(f"Caretaker {caretaker_id} assigned to patient {patient_id}.")
    return assignment


def unassign(db: Session, caretaker_id: int, patient_id: int) -> bool:
    """Removes a link; returns False when there was none."""
    removed = db.query(models.CaretakerAssignment).filter(
        models.CaretakerAssignment.caretaker_id == caretaker_id,
        models.CaretakerAssignment.patient_id == patient_id,
    ).delete(synchronize_session=False)
    db.commit()
    if removed:
        logger.info(f"Caretaker {caretaker_id} unassigned from patient {patient_id}.")
    return removed > 0
