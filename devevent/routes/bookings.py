from fastapi import APIRouter, Depends

from devevent.database.db import ConnectionManager, get_connection_manager
from devevent.schemas.bookings import BookingRequest, BookingResult
from devevent.services.bookings import submit_booking

router = APIRouter(prefix="/api/bookings", tags=["bookings"])


@router.post("", response_model=BookingResult)
def book_event(
    payload: BookingRequest,
    connections: ConnectionManager = Depends(get_connection_manager),
):
    return submit_booking(connections, event_id=payload.event_id, email=payload.email)
