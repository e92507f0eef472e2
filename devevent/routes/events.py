import json
import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from devevent.core.errors import DomainError
from devevent.database.db import ConnectionManager, get_connection_manager
from devevent.schemas.events import serialize_event
from devevent.services import events as event_service
from devevent.services.uploads import UploadcareClient, get_image_uploader

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/events", tags=["events"])


@router.post("", status_code=201)
def create_event(
    image: UploadFile | None = File(None),
    title: str | None = Form(None),
    description: str | None = Form(None),
    overview: str | None = Form(None),
    venue: str | None = Form(None),
    location: str | None = Form(None),
    date: str | None = Form(None),
    time: str | None = Form(None),
    mode: str | None = Form(None),
    audience: str | None = Form(None),
    organizer: str | None = Form(None),
    tags: str | None = Form(None),
    agenda: str | None = Form(None),
    connections: ConnectionManager = Depends(get_connection_manager),
    uploader: UploadcareClient = Depends(get_image_uploader),
):
    """Create an event from a multipart form.

    ``image`` is required; ``tags`` and ``agenda`` are JSON-encoded lists.
    """
    if image is None:
        return JSONResponse(status_code=400, content={"message": "Image file is required !"})

    try:
        parsed_tags = json.loads(tags) if tags is not None else None
        parsed_agenda = json.loads(agenda) if agenda is not None else None
    except ValueError as e:
        logger.error(f"Invalid JSON in event form: {e}")
        return JSONResponse(status_code=400, content={"message": "Invalid JSON Format"})

    try:
        image_url = uploader.upload(
            image.file.read(), image.filename or "image", image.content_type
        )
        payload = {
            "title": title,
            "description": description,
            "overview": overview,
            "image": image_url,
            "venue": venue,
            "location": location,
            "date": date,
            "time": time,
            "mode": mode,
            "audience": audience,
            "organizer": organizer,
            "tags": parsed_tags,
            "agenda": parsed_agenda,
        }
        with connections.session() as db:
            event = event_service.create_event(db, payload)
            body = serialize_event(event)
    except (DomainError, SQLAlchemyError) as e:
        logger.error(f"Event creation failed: {e}")
        return JSONResponse(
            status_code=500,
            content={"message": "Event Creation Failed!", "error": str(e)},
        )

    return JSONResponse(
        status_code=201,
        content={"message": "Event Created Successfully!", "event": body},
    )


@router.get("")
def list_events(connections: ConnectionManager = Depends(get_connection_manager)):
    """All events, newest first."""
    try:
        with connections.session() as db:
            events = [serialize_event(e) for e in event_service.list_events(db)]
    except (DomainError, SQLAlchemyError) as e:
        logger.error(f"Error fetching all events: {e}")
        return JSONResponse(status_code=500, content={"message": "Failed to fetch events!"})

    return {"message": "Successfully fetched event", "events": events}


@router.get("/{slug}/similar")
def similar_events(slug: str, connections: ConnectionManager = Depends(get_connection_manager)):
    try:
        with connections.session() as db:
            events = [
                serialize_event(e)
                for e in event_service.get_similar_events_by_slug(db, slug)
            ]
    except (DomainError, SQLAlchemyError) as e:
        logger.error(f"Error fetching similar events: {e}")
        events = []

    return {"events": events}


@router.get("/{slug}")
def get_event(slug: str, connections: ConnectionManager = Depends(get_connection_manager)):
    try:
        with connections.session() as db:
            event = event_service.get_event_by_slug(db, slug)
            body = serialize_event(event) if event is not None else None
    except (DomainError, SQLAlchemyError) as e:
        logger.error(f"Error fetching event {slug}: {e}")
        return JSONResponse(status_code=500, content={"message": "Failed to fetch event!"})

    if body is None:
        return JSONResponse(status_code=404, content={"message": "Event not found"})
    return {"message": "Event fetched successfully", "event": body}
