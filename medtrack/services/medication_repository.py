"""
Medication Repository: create, query, mark and soft-delete medication entries.

All queries are scoped by the owning user. Deleting only clears the `active`
flag, so every read goes through `_active()` unless it explicitly wants
tombstoned rows.
"""

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import models
from ..exceptions import AccessDenied, NotFoundOrUnowned, StoreError, ValidationError
from ..utils.dates import parse_iso_date, parse_time_of_day
from .assignments import ensure_can_read

logger = logging.getLogger(__name__)


class MedicationRepository:
    def __init__(self, db: Session):
        self.db = db

    def _commit(self):
        """Commits the session, rolling back and raising StoreError on failure."""
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to commit medication changes: {e}")
            raise StoreError("Failed to save medication changes") from e

    def _active(self, owner_id: int):
        return self.db.query(models.Medication).filter(
            models.Medication.user_id == owner_id,
            models.Medication.active.is_(True),
        )

    def add(self, owner_id: int, name: str, dosage: str, frequency: str, date: str, time: str) -> int:
        """
        Creates an active, not-yet-taken entry and returns its id.

        Raises:
            ValidationError: If any field is empty, or date/time are malformed.
        """
        if not all([name, dosage, frequency, date, time]):
            raise ValidationError("All fields are required")

        entry = models.Medication(
            user_id=owner_id,
            name=name,
            dosage=dosage,
            frequency=frequency,
            # Store the canonical form so string comparison stays calendar order
            date=parse_iso_date(date).isoformat(),
            time=parse_time_of_day(time),
            active=True,
            taken=False,
        )
        self.db.add(entry)
        self._commit()
        self.db.refresh(entry)
        return entry.id

    def get(self, medication_id: int) -> Optional[models.Medication]:
        """Fetches a row by id whether or not it has been deleted."""
        return self.db.query(models.Medication).filter(models.Medication.id == medication_id).first()

    def list_for_date(self, owner_id: int, day: str) -> List[models.Medication]:
        day = parse_iso_date(day).isoformat()
        return self._active(owner_id).filter(models.Medication.date == day).order_by(models.Medication.id).all()

    def list_for_patient(self, session, owner_id: Optional[int], day: Optional[str]) -> List[models.Medication]:
        """
        Lists a patient's entries for one date on behalf of a caretaker.

        Raises:
            AccessDenied: If the caller may not read `owner_id`.
            ValidationError: If `owner_id` or `day` is missing.
        """
        if not session.is_caretaker:
            raise AccessDenied()
        if not owner_id or not day:
            raise ValidationError("user_id and date are required")
        ensure_can_read(self.db, session, owner_id)
        return self.list_for_date(owner_id, day)

    def list_window(self, owner_id: int, start: date, end: date) -> List[models.Medication]:
        """Active entries with start <= date <= end, oldest date first."""
        return (
            self._active(owner_id)
            .filter(models.Medication.date.between(start.isoformat(), end.isoformat()))
            .order_by(models.Medication.date.asc(), models.Medication.id.asc())
            .all()
        )

    def list_active(self, owner_id: int) -> List[models.Medication]:
        return self._active(owner_id).order_by(models.Medication.date.asc(), models.Medication.id.asc()).all()

    def mark_taken(self, owner_id: int, medication_id: int) -> bool:
        """
        Sets `taken` on an entry owned by `owner_id`.

        An unknown or foreign id changes nothing and is not an error; the
        return value only reports whether a row matched.
        """
        updated = self.db.query(models.Medication).filter(
            models.Medication.id == medication_id,
            models.Medication.user_id == owner_id,
        ).update({models.Medication.taken: True}, synchronize_session=False)
        self._commit()
        if not updated:
            logger.info(f"mark_taken matched no medication {medication_id} for user {owner_id}.")
        return updated > 0

    def mark_taken_batch(self, owner_id: int, medication_ids: List[int]) -> List[int]:
        """
        Marks several entries taken in one transaction.

        Raises:
            ValidationError: If no ids are given.
            NotFoundOrUnowned: If any id is not an active entry of `owner_id`;
                in that case no entry is changed.
        """
        if not medication_ids:
            raise ValidationError("ids must not be empty")

        unique_ids = list(dict.fromkeys(medication_ids))
        entries = self._active(owner_id).filter(models.Medication.id.in_(unique_ids)).all()
        found = {entry.id for entry in entries}
        missing = [i for i in unique_ids if i not in found]
        if missing:
            raise NotFoundOrUnowned(f"Medications not found: {', '.join(str(i) for i in missing)}")

        for entry in entries:
            entry.taken = True
        self._commit()
        return unique_ids

    def soft_delete(self, owner_id: int, medication_id: int) -> bool:
        """Marks an entry owned by `owner_id` inactive. Same silent policy as mark_taken."""
        updated = self.db.query(models.Medication).filter(
            models.Medication.id == medication_id,
            models.Medication.user_id == owner_id,
        ).update({models.Medication.active: False}, synchronize_session=False)
        self._commit()
        if not updated:
            logger.info(f"soft_delete matched no medication {medication_id} for user {owner_id}.")
        return updated > 0
