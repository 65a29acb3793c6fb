"""Voyage CMS - Curated Content Models.

Trips, destinations, certificates and written reviews. Each row owns zero or
more assets hosted in the asset store; the ``*_public_id(s)`` columns hold the
deletion handles. Structured columns hold JSON text and are decoded by the
repository layer, never here.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ContentStatus(str, Enum):
    """Publication state. Only ``active`` is visible to the public."""

    ACTIVE = "active"
    DRAFT = "draft"
    ARCHIVED = "archived"


class TimestampedModel(SQLModel):
    """Server-assigned bookkeeping columns shared by every table."""

    created_at: datetime = Field(default_factory=utcnow, index=True)
    updated_at: datetime = Field(default_factory=utcnow)


# ─────────────────────────────────────────────
# TRIPS
# ─────────────────────────────────────────────


class Trip(TimestampedModel, table=True):
    """A bookable trip with cover media, gallery and long-form sections."""

    __tablename__ = "trips"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    location: str = Field(index=True)
    duration: str
    price: float
    old_price: Optional[float] = None
    subtitle: Optional[str] = None
    intro: Optional[str] = None
    slug: str = Field(index=True, unique=True)

    # Media
    image_url: Optional[str] = None
    image_public_id: Optional[str] = None
    video_url: Optional[str] = None
    video_public_id: Optional[str] = None
    gallery: str = Field(default="[]", description="JSON list of image URLs")
    gallery_public_ids: str = Field(default="[]", description="JSON list of handles")

    # Structured sections (JSON lists)
    why_visit: str = "[]"
    itinerary: str = "[]"
    included: str = "[]"
    not_included: str = "[]"
    notes: str = "[]"
    faq: str = "[]"
    reviews: str = "[]"

    status: str = Field(default=ContentStatus.ACTIVE.value, index=True)
    created_by: Optional[str] = None


# ─────────────────────────────────────────────
# DESTINATIONS
# ─────────────────────────────────────────────


class Destination(TimestampedModel, table=True):
    __tablename__ = "destinations"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    image: Optional[str] = None
    image_public_id: Optional[str] = None
    status: str = Field(default=ContentStatus.ACTIVE.value, index=True)
    created_by: Optional[str] = None


# ─────────────────────────────────────────────
# CERTIFICATES
# ─────────────────────────────────────────────


class Certificate(TimestampedModel, table=True):
    """Legal / accreditation certificate shown as an image set."""

    __tablename__ = "certificates"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    description: Optional[str] = None
    images: str = Field(default="[]", description="JSON list of image URLs")
    images_public_ids: str = Field(default="[]", description="JSON list of handles")
    status: str = Field(default=ContentStatus.ACTIVE.value, index=True)
    created_by: Optional[str] = None


# ─────────────────────────────────────────────
# WRITTEN REVIEWS
# ─────────────────────────────────────────────


class WrittenReview(TimestampedModel, table=True):
    __tablename__ = "written_reviews"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    location: Optional[str] = None
    rating: Optional[int] = None
    review_text: str
    avatar: Optional[str] = None
    avatar_public_id: Optional[str] = None
    status: str = Field(default=ContentStatus.ACTIVE.value, index=True)
    created_by: Optional[str] = None
