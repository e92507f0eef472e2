from pydantic import BaseModel, Field


class BookingRequest(BaseModel):
    # Field checks live in the booking service so the form gets its message
    event_id: str | None = Field(default=None, alias="eventId")
    email: str | None = None

    class Config:
        populate_by_name = True


class BookingResult(BaseModel):
    success: bool
    error: str | None = None
