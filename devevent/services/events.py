import logging
from typing import Any, Mapping

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from devevent.core.errors import ConflictError, NotFoundError
from devevent.models.events import Event
from devevent.services.normalization import NormalizedEvent, normalize_event

logger = logging.getLogger(__name__)


def _slug_taken(db: Session, slug: str, exclude_id: str | None = None) -> bool:
    stmt = select(Event.id).where(Event.slug == slug)
    if exclude_id is not None:
        stmt = stmt.where(Event.id != exclude_id)
    return db.scalar(stmt.limit(1)) is not None


def _save(db: Session, event: Event, normalized: NormalizedEvent) -> Event:
    """Claim the slug and write ``event`` in one transaction.

    The unique index on ``events.slug`` settles races between concurrent
    writers; the losing writer gets ``ConflictError``.
    """
    if _slug_taken(db, normalized.slug, exclude_id=event.id):
        raise ConflictError(f"An event with slug '{normalized.slug}' already exists")

    for field, value in normalized.as_dict().items():
        setattr(event, field, value)

    db.add(event)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Slug conflict on write for '{normalized.slug}': {e.orig}")
        raise ConflictError(
            f"An event with slug '{normalized.slug}' already exists"
        ) from e
    db.refresh(event)
    return event


def create_event(db: Session, payload: Mapping[str, Any]) -> Event:
    """Normalize ``payload`` and persist it as a new event.

    Raises:
        ValidationError: If the payload fails normalization.
        ConflictError: If the derived slug belongs to another event.
    """
    normalized = normalize_event(payload)
    event = _save(db, Event(), normalized)
    logger.info(f"Created event {event.id} ({event.slug})")
    return event


def update_event(db: Session, event_id: str, payload: Mapping[str, Any]) -> Event:
    """Re-run the pipeline over ``payload`` for an existing event.

    The slug is regenerated only when the title changes.
    """
    event = db.get(Event, event_id)
    if event is None:
        raise NotFoundError(f"Event not found for eventId: {event_id}")

    normalized = normalize_event(payload, existing=event)
    event = _save(db, event, normalized)
    logger.info(f"Updated event {event.id} ({event.slug})")
    return event


def list_events(db: Session) -> list[Event]:
    """All events, newest first."""
    return list(db.scalars(select(Event).order_by(Event.created_at.desc())))


def get_event_by_slug(db: Session, slug: str) -> Event | None:
    return db.scalar(select(Event).where(Event.slug == slug))


def event_exists(db: Session, event_id: str) -> bool:
    return db.scalar(select(Event.id).where(Event.id == event_id)) is not None


def get_similar_events_by_slug(db: Session, slug: str) -> list[Event]:
    """Other events sharing at least one tag with the event at ``slug``."""
    event = get_event_by_slug(db, slug)
    if event is None:
        return []

    tags = set(event.tags)
    # tags are stored as JSON, so overlap is checked here rather than in SQL
    candidates = db.scalars(
        select(Event).where(Event.id != event.id).order_by(Event.created_at.desc())
    )
    return [candidate for candidate in candidates if tags.intersection(candidate.tags)]
