from datetime import datetime

from pydantic import BaseModel


class EventOut(BaseModel):
    id: str
    title: str
    slug: str
    description: str
    overview: str
    image: str
    venue: str
    location: str
    date: str
    time: str
    mode: str
    audience: str
    organizer: str
    agenda: list[str]
    tags: list[str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


def serialize_event(event) -> dict:
    return EventOut.model_validate(event).model_dump(mode="json")
