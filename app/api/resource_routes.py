"""Voyage CMS - Curated Content Routes.

One router per content entity, built from its ``EntityMapping``. Reads are
public and see only active records; writes need an admin token. Updates and
deletes write the row first, then release superseded assets in the
background.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, BackgroundTasks, Body, Depends, Request
from sqlmodel import Session

from app.assets.lifecycle import plan_delete, plan_update, purge_assets
from app.assets.store import AssetStore, get_asset_store
from app.core.errors import NotFoundError, ValidationError
from app.core.logging import get_logger
from app.core.security import (
    ADMIN_ROLES,
    Identity,
    has_role,
    optional_auth,
    require_admin,
)
from app.database import get_session
from app.repository.base import ResourceRepository
from app.repository.mapping import EntityMapping

logger = get_logger("api.resources")


def repository_for(mapping: EntityMapping):
    """Build a dependency yielding a repository bound to this request's session."""

    def _repository(session: Session = Depends(get_session)) -> ResourceRepository:
        return ResourceRepository(mapping, session)

    return _repository


def _payload(body: Any) -> Dict[str, Any]:
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def build_resource_router(mapping: EntityMapping) -> APIRouter:
    """Create the CRUD router for a content entity."""
    router = APIRouter(prefix=f"/api/{mapping.path}", tags=[mapping.label])
    get_repository = repository_for(mapping)
    label = mapping.label

    def _not_found() -> NotFoundError:
        return NotFoundError(f"{label} not found")

    @router.get("")
    async def list_public(
        request: Request, repo: ResourceRepository = Depends(get_repository)
    ):
        """List active records. Honours ``limit``, ``offset`` and entity filters."""
        filters = dict(request.query_params)
        filters.pop("includeDraft", None)
        filters["status"] = mapping.visible_status
        records = repo.find_all(filters)
        return {mapping.collection_key: records, "count": len(records)}

    @router.get("/admin")
    async def list_admin(
        request: Request,
        repo: ResourceRepository = Depends(get_repository),
        identity: Identity = Depends(require_admin),
    ):
        """List records of every status, optionally narrowed by ``status``."""
        filters = dict(request.query_params)
        filters["includeDraft"] = True
        records = repo.find_all(filters)
        return {mapping.collection_key: records, "count": len(records)}

    if mapping.slug_field:

        @router.get("/slug/{slug}")
        async def get_by_slug(
            slug: str, repo: ResourceRepository = Depends(get_repository)
        ):
            record = repo.find_one(mapping.slug_field, slug)
            if record is None:
                raise _not_found()
            return {mapping.key: record}

    @router.get("/{record_id}")
    async def get_one(
        record_id: int,
        repo: ResourceRepository = Depends(get_repository),
        identity: Optional[Identity] = Depends(optional_auth),
    ):
        """Fetch one record. Non-active records are only shown to admins."""
        record = repo.find_by_id(record_id)
        if record is None:
            raise _not_found()
        if record.get("status") != mapping.visible_status and not has_role(
            identity, *ADMIN_ROLES
        ):
            raise _not_found()
        return {mapping.key: record}

    @router.post("", status_code=201)
    async def create(
        body: Any = Body(...),
        repo: ResourceRepository = Depends(get_repository),
        identity: Identity = Depends(require_admin),
    ):
        payload = {**_payload(body), "createdBy": identity.user_id}
        record = repo.create(payload)
        return {"message": f"{label} created successfully", mapping.key: record}

    @router.put("/{record_id}")
    async def update(
        record_id: int,
        background_tasks: BackgroundTasks,
        body: Any = Body(...),
        repo: ResourceRepository = Depends(get_repository),
        store: AssetStore = Depends(get_asset_store),
        identity: Identity = Depends(require_admin),
    ):
        existing = repo.find_by_id(record_id)
        if existing is None:
            raise _not_found()

        plan = plan_update(mapping.assets, existing, _payload(body))
        record = repo.update(record_id, plan.payload)
        if record is None:
            raise _not_found()

        if plan.deletions:
            background_tasks.add_task(purge_assets, store, plan.deletions, mapping.name)
        return {"message": f"{label} updated successfully", mapping.key: record}

    @router.delete("/{record_id}")
    async def delete(
        record_id: int,
        background_tasks: BackgroundTasks,
        repo: ResourceRepository = Depends(get_repository),
        store: AssetStore = Depends(get_asset_store),
        identity: Identity = Depends(require_admin),
    ):
        record = repo.delete(record_id)
        if record is None:
            raise _not_found()

        deletions = plan_delete(mapping.assets, record)
        if deletions:
            background_tasks.add_task(purge_assets, store, deletions, mapping.name)
        logger.info(
            f"{label} {record_id} deleted, {len(deletions)} asset(s) queued",
            extra={"entity": mapping.name, "entity_id": record_id, "user_id": identity.user_id},
        )
        return {"message": f"{label} deleted successfully"}

    return router
