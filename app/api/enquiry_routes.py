"""Voyage CMS - Enquiry Routes."""

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query

from app.api.resource_routes import repository_for
from app.core.errors import NotFoundError, ValidationError
from app.core.logging import get_logger
from app.core.security import Identity, require_admin, require_main_admin
from app.models.enquiry_models import EnquiryStatus, EnquiryStatusUpdate
from app.repository.base import ResourceRepository
from app.repository.registry import ENQUIRIES

logger = get_logger("api.enquiries")

router = APIRouter(prefix="/api/enquiries", tags=["Enquiries"])

get_repository = repository_for(ENQUIRIES)

SUBMITTABLE_FIELDS = (
    "tripId",
    "tripTitle",
    "tripLocation",
    "tripPrice",
    "selectedMonth",
    "numberOfTravelers",
    "name",
    "email",
    "phone",
    "message",
)


@router.post("", status_code=201)
async def submit_enquiry(
    body: Any = Body(...),
    repo: ResourceRepository = Depends(get_repository),
):
    """Public enquiry submission. Visitors cannot set status."""
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    payload = {k: body[k] for k in SUBMITTABLE_FIELDS if k in body}

    if not payload.get("name") or not payload.get("email"):
        raise ValidationError("Name and email are required", fields=["name", "email"])
    if "@" not in str(payload["email"]):
        raise ValidationError("Invalid email format", fields=["email"])

    enquiry = repo.create(payload)
    logger.info(
        f"Enquiry received for {enquiry.get('tripTitle') or 'general interest'}",
        extra={"entity": "enquiry", "entity_id": enquiry["id"]},
    )
    return {
        "message": "Enquiry submitted successfully",
        "enquiry": {
            "id": enquiry["id"],
            "tripTitle": enquiry["tripTitle"],
            "selectedMonth": enquiry["selectedMonth"],
            "numberOfTravelers": enquiry["numberOfTravelers"],
        },
    }


@router.get("")
async def list_enquiries(
    status: Optional[str] = Query(None),
    trip_id: Optional[int] = Query(None, alias="tripId"),
    limit: Optional[int] = Query(None, ge=1, le=500),
    offset: Optional[int] = Query(None, ge=0),
    repo: ResourceRepository = Depends(get_repository),
    identity: Identity = Depends(require_admin),
):
    enquiries = repo.find_all(
        {"status": status, "tripId": trip_id, "limit": limit, "offset": offset}
    )
    return {"enquiries": enquiries, "count": len(enquiries)}


@router.get("/{enquiry_id}")
async def get_enquiry(
    enquiry_id: int,
    repo: ResourceRepository = Depends(get_repository),
    identity: Identity = Depends(require_admin),
):
    enquiry = repo.find_by_id(enquiry_id)
    if enquiry is None:
        raise NotFoundError("Enquiry not found")
    return {"enquiry": enquiry}


@router.patch("/{enquiry_id}/status")
async def update_enquiry_status(
    enquiry_id: int,
    request: EnquiryStatusUpdate,
    repo: ResourceRepository = Depends(get_repository),
    identity: Identity = Depends(require_admin),
):
    valid = {s.value for s in EnquiryStatus}
    if request.status not in valid:
        raise ValidationError("Valid status is required", fields=["status"])

    enquiry = repo.update(enquiry_id, {"status": request.status})
    if enquiry is None:
        raise NotFoundError("Enquiry not found")
    return {"message": "Enquiry status updated successfully", "enquiry": enquiry}


@router.delete("/{enquiry_id}")
async def delete_enquiry(
    enquiry_id: int,
    repo: ResourceRepository = Depends(get_repository),
    identity: Identity = Depends(require_main_admin),
):
    """Permanently remove an enquiry and the visitor's contact details."""
    if repo.delete(enquiry_id) is None:
        raise NotFoundError("Enquiry not found")
    logger.info(
        f"Enquiry {enquiry_id} deleted",
        extra={"entity": "enquiry", "entity_id": enquiry_id, "user_id": identity.user_id},
    )
    return {"message": "Enquiry deleted successfully"}
