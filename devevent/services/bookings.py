import logging
import re
import uuid
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from devevent.core.errors import DomainError, NotFoundError, ValidationError
from devevent.database.db import ConnectionManager
from devevent.models.bookings import Booking
from devevent.services import events as event_service

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(
    r"^(?=.{1,254}$)(?=.{1,64}@)[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}$",
    re.IGNORECASE,
)

EventLookup = Callable[[str], bool]


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_PATTERN.match(value.strip()))


def resolve_event_id(value: str) -> str:
    """Convert ``value`` to the stored event id form (UUID hex)."""
    try:
        return uuid.UUID(str(value).strip()).hex
    except ValueError as e:
        raise ValidationError(
            f"Invalid eventId format: {value}", field="eventId"
        ) from e


def create_booking(
    db: Session,
    *,
    event_id: str | None,
    email: str | None,
    event_exists: EventLookup | None = None,
) -> Booking:
    """Validate a booking request and persist it.

    ``event_exists`` answers whether an event id is live; it defaults to a
    lookup against ``db``.

    The existence check and the insert are separate statements, so an event
    deleted between them would leave an orphaned booking. Nothing deletes
    events today.

    Raises:
        ValidationError: If a field is missing, the email is malformed or the
            event id cannot be parsed.
        NotFoundError: If no event has the given id.
    """
    if not event_id or not str(event_id).strip():
        raise ValidationError("eventId is required", field="eventId")
    if not email or not email.strip():
        raise ValidationError("email is required", field="email")
    if "@" not in email or not is_valid_email(email):
        raise ValidationError("email must be a valid email address", field="email")

    resolved_id = resolve_event_id(event_id)

    if event_exists is None:
        def event_exists(candidate_id: str) -> bool:
            return event_service.event_exists(db, candidate_id)

    if not event_exists(resolved_id):
        raise NotFoundError(f"Event not found for eventId: {resolved_id}")

    booking = Booking(event_id=resolved_id, email=email.strip().lower())
    db.add(booking)
    db.commit()
    db.refresh(booking)
    logger.info(f"Created booking {booking.id} for event {resolved_id}")
    return booking


def submit_booking(
    connections: ConnectionManager, *, event_id: str | None, email: str | None
) -> dict:
    """Booking form entry point: never raises, reports ``{success, error}``."""
    try:
        with connections.session() as db:
            create_booking(db, event_id=event_id, email=email)
    except DomainError as e:
        logger.error(f"Error creating booking: {e}")
        return {"success": False, "error": str(e)}
    except SQLAlchemyError as e:
        logger.error(f"Error creating booking: {e}")
        return {"success": False, "error": "Failed to create booking. Please try again."}

    return {"success": True, "error": None}
