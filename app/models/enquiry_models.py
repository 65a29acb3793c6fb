"""Voyage CMS - Visitor Enquiry Models."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel
from sqlmodel import Field

from app.models.content_models import TimestampedModel


class EnquiryStatus(str, Enum):
    """Sales pipeline state of an enquiry."""

    PENDING = "pending"
    CONTACTED = "contacted"
    BOOKED = "booked"
    CANCELLED = "cancelled"


class Enquiry(TimestampedModel, table=True):
    """A visitor's request for information about a trip.

    Trip details are copied at submission time so the enquiry still reads
    correctly after the trip is edited or removed.
    """

    __tablename__ = "enquiries"

    id: Optional[int] = Field(default=None, primary_key=True)
    trip_id: Optional[int] = Field(default=None, index=True)
    trip_title: Optional[str] = None
    trip_location: Optional[str] = None
    trip_price: Optional[float] = None
    selected_month: Optional[str] = None
    number_of_travelers: int = 1
    name: str
    email: str = Field(index=True)
    phone: Optional[str] = None
    message: Optional[str] = None
    status: str = Field(default=EnquiryStatus.PENDING.value, index=True)


class EnquiryStatusUpdate(BaseModel):
    """Request body for PATCH /api/enquiries/{id}/status."""

    status: Optional[str] = None
