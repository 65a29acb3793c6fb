"""Voyage CMS - Entity Registry.

Declares the storage mapping for every resource type. When adding a new
resource, define its table in ``app.models`` and register a mapping here;
the generic repository and routers pick it up unchanged.
"""

import re
from typing import Any, Dict

from app.models.content_models import (
    Certificate,
    ContentStatus,
    Destination,
    Trip,
    WrittenReview,
)
from app.models.enquiry_models import Enquiry, EnquiryStatus
from app.repository.codecs import JSON_LIST
from app.repository.mapping import (
    AssetKind,
    AssetSlot,
    EntityMapping,
    FieldSpec,
    FilterSpec,
)

CONTENT_STATUSES = frozenset(s.value for s in ContentStatus)
ENQUIRY_STATUSES = frozenset(s.value for s in EnquiryStatus)


def slugify(title: str) -> str:
    """Lower-case, drop punctuation, join words with hyphens."""
    slug = title.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[\s_-]+", "-", slug)
    return slug.strip("-")


def _slug_from_title(payload: Dict[str, Any]) -> str:
    return slugify(str(payload.get("title") or ""))


def _status(default: str = ContentStatus.ACTIVE.value) -> FieldSpec:
    return FieldSpec("status", "status", default=default, choices=CONTENT_STATUSES)


CREATED_BY = FieldSpec("createdBy", "created_by", updatable=False, normalize=str)


# ─────────────────────────────────────────────
# CONTENT: admin-curated, public when active
# ─────────────────────────────────────────────

TRIPS = EntityMapping(
    name="trip",
    label="Trip",
    key="trip",
    collection_key="trips",
    path="trips",
    model=Trip,
    fields=(
        FieldSpec("title", "title", required=True),
        FieldSpec("location", "location", required=True),
        FieldSpec("duration", "duration", required=True),
        FieldSpec("price", "price", required=True),
        FieldSpec("oldPrice", "old_price"),
        FieldSpec("subtitle", "subtitle"),
        FieldSpec("intro", "intro"),
        FieldSpec("slug", "slug", default=_slug_from_title),
        FieldSpec("imageUrl", "image_url", aliases=("image",)),
        FieldSpec("imagePublicId", "image_public_id"),
        FieldSpec("videoUrl", "video_url", aliases=("video",)),
        FieldSpec("videoPublicId", "video_public_id"),
        FieldSpec("gallery", "gallery", codec=JSON_LIST),
        FieldSpec("galleryPublicIds", "gallery_public_ids", codec=JSON_LIST),
        FieldSpec("whyVisit", "why_visit", codec=JSON_LIST),
        FieldSpec("itinerary", "itinerary", codec=JSON_LIST),
        FieldSpec("included", "included", codec=JSON_LIST),
        FieldSpec("notIncluded", "not_included", codec=JSON_LIST),
        FieldSpec("notes", "notes", codec=JSON_LIST),
        FieldSpec("faq", "faq", codec=JSON_LIST),
        FieldSpec("reviews", "reviews", codec=JSON_LIST),
        _status(),
        CREATED_BY,
    ),
    filters=(FilterSpec("location", "location", match="contains"),),
    assets=(
        AssetSlot("imageUrl", "imagePublicId", AssetKind.IMAGE),
        AssetSlot("videoUrl", "videoPublicId", AssetKind.VIDEO),
        AssetSlot("gallery", "galleryPublicIds", AssetKind.IMAGE, multiple=True),
    ),
    slug_field="slug",
)

DESTINATIONS = EntityMapping(
    name="destination",
    label="Destination",
    key="destination",
    collection_key="destinations",
    path="destinations",
    model=Destination,
    fields=(
        FieldSpec("name", "name", required=True),
        FieldSpec("image", "image"),
        FieldSpec("imagePublicId", "image_public_id"),
        _status(),
        CREATED_BY,
    ),
    assets=(AssetSlot("image", "imagePublicId", AssetKind.IMAGE),),
)

CERTIFICATES = EntityMapping(
    name="certificate",
    label="Certificate",
    key="certificate",
    collection_key="certificates",
    path="certificates",
    model=Certificate,
    fields=(
        FieldSpec("title", "title", required=True),
        FieldSpec("description", "description"),
        FieldSpec("images", "images", codec=JSON_LIST),
        FieldSpec("imagesPublicIds", "images_public_ids", codec=JSON_LIST),
        _status(),
        CREATED_BY,
    ),
    assets=(AssetSlot("images", "imagesPublicIds", AssetKind.IMAGE, multiple=True),),
)

WRITTEN_REVIEWS = EntityMapping(
    name="written_review",
    label="Written review",
    key="writtenReview",
    collection_key="writtenReviews",
    path="written-reviews",
    model=WrittenReview,
    fields=(
        FieldSpec("name", "name", required=True),
        FieldSpec("review", "review_text", required=True),
        FieldSpec("location", "location"),
        FieldSpec("rating", "rating"),
        FieldSpec("avatar", "avatar"),
        FieldSpec("avatarPublicId", "avatar_public_id"),
        _status(),
        CREATED_BY,
    ),
    assets=(AssetSlot("avatar", "avatarPublicId", AssetKind.IMAGE),),
)


# ─────────────────────────────────────────────
# ENQUIRIES: visitor-submitted, admin-only reads
# ─────────────────────────────────────────────

ENQUIRIES = EntityMapping(
    name="enquiry",
    label="Enquiry",
    key="enquiry",
    collection_key="enquiries",
    path="enquiries",
    model=Enquiry,
    fields=(
        FieldSpec("tripId", "trip_id"),
        FieldSpec("tripTitle", "trip_title"),
        FieldSpec("tripLocation", "trip_location"),
        FieldSpec("tripPrice", "trip_price"),
        FieldSpec("selectedMonth", "selected_month"),
        FieldSpec("numberOfTravelers", "number_of_travelers", default=1),
        FieldSpec("name", "name", required=True),
        FieldSpec("email", "email", required=True, normalize=lambda v: str(v).lower()),
        FieldSpec("phone", "phone"),
        FieldSpec("message", "message"),
        FieldSpec(
            "status",
            "status",
            default=EnquiryStatus.PENDING.value,
            choices=ENQUIRY_STATUSES,
        ),
    ),
    filters=(FilterSpec("tripId", "trip_id", cast=int),),
    visible_status=None,
)


# ─────────────────────────────────────────────
# ROUTED CONTENT
# ─────────────────────────────────────────────

CONTENT_MAPPINGS = (TRIPS, DESTINATIONS, CERTIFICATES, WRITTEN_REVIEWS)

