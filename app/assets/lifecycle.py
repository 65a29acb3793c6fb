"""Voyage CMS - Asset Lifecycle Coordinator.

Keeps hosted assets in step with the rows that reference them.

Planning is pure: from the stored record and the incoming payload it decides
which deletion handles are no longer referenced. Targets are only ever drawn
from handles the new payload drops, so a crash between the write and the
purge can leak an asset but never leave a row pointing at a destroyed one.

Purging follows the best-effort policy: the database write happens first and
always stands. Each deletion is attempted once; a failure is logged and
swallowed, never raised to the request that triggered it.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Sequence

from app.assets.store import AssetStore
from app.core.logging import get_logger
from app.repository.mapping import AssetKind, AssetSlot

logger = get_logger("assets.lifecycle")


@dataclass(frozen=True)
class AssetDeletion:
    public_id: str
    kind: AssetKind


@dataclass
class AssetPlan:
    """Payload to write, plus the deletions to issue once it is written."""

    payload: Dict[str, Any]
    deletions: List[AssetDeletion] = field(default_factory=list)


def _handles(value: Any) -> List[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    return [h for h in value if h]


def _dedupe(deletions: Iterable[AssetDeletion]) -> List[AssetDeletion]:
    seen = set()
    unique = []
    for deletion in deletions:
        if deletion.public_id not in seen:
            seen.add(deletion.public_id)
            unique.append(deletion)
    return unique


def superseded(
    slots: Sequence[AssetSlot], old: Mapping[str, Any], new: Mapping[str, Any]
) -> List[AssetDeletion]:
    """Handles on ``old`` that ``new`` no longer references.

    Single slot: the old handle goes only when the payload brings a different
    non-empty URL. A handle-only change releases nothing while the URL column
    still points at the asset.
    Multi slot: ``old handles - new handles`` when the payload carries the
    handle list; otherwise nothing.
    """
    deletions: List[AssetDeletion] = []
    for slot in slots:
        if slot.multiple:
            if slot.handle_field not in new:
                continue
            keep = set(_handles(new.get(slot.handle_field)))
            deletions.extend(
                AssetDeletion(h, slot.kind)
                for h in _handles(old.get(slot.handle_field))
                if h not in keep
            )
            continue

        old_handle = old.get(slot.handle_field)
        if not old_handle:
            continue
        if slot.handle_field in new and new.get(slot.handle_field) == old_handle:
            continue
        new_url = new.get(slot.url_field)
        if new_url and new_url != old.get(slot.url_field):
            deletions.append(AssetDeletion(old_handle, slot.kind))
    return _dedupe(deletions)


def plan_update(
    slots: Sequence[AssetSlot], old: Mapping[str, Any], payload: Mapping[str, Any]
) -> AssetPlan:
    """Work out deletions for an update and patch the payload to match.

    When a single slot's URL is replaced without a new handle, the handle is
    cleared in the same write so the row stops listing it.
    """
    patched = dict(payload)
    for slot in slots:
        if slot.multiple or slot.handle_field in patched:
            continue
        new_url = patched.get(slot.url_field)
        if new_url and new_url != old.get(slot.url_field) and old.get(slot.handle_field):
            patched[slot.handle_field] = None
    return AssetPlan(payload=patched, deletions=superseded(slots, old, payload))


def plan_delete(slots: Sequence[AssetSlot], record: Mapping[str, Any]) -> List[AssetDeletion]:
    """Every handle referenced by a record that is being removed."""
    deletions: List[AssetDeletion] = []
    for slot in slots:
        deletions.extend(
            AssetDeletion(h, slot.kind) for h in _handles(record.get(slot.handle_field))
        )
    return _dedupe(deletions)


async def purge_assets(
    store: AssetStore, deletions: Sequence[AssetDeletion], entity: str = ""
) -> List[AssetDeletion]:
    """Issue deletions best-effort. Returns the ones that failed."""
    failed: List[AssetDeletion] = []
    for deletion in deletions:
        extra = {"entity": entity, "public_id": deletion.public_id}
        try:
            ok = await store.delete(deletion.public_id, deletion.kind)
        except Exception as e:
            logger.error(f"Asset deletion failed: {e}", extra=extra)
            failed.append(deletion)
            continue
        if ok:
            logger.info(f"Deleted {deletion.kind.value} asset", extra=extra)
        else:
            logger.warning("Asset store did not delete asset", extra=extra)
            failed.append(deletion)
    if failed:
        logger.warning(
            f"{len(failed)} of {len(deletions)} asset deletions left for cleanup",
            extra={"entity": entity},
        )
    return failed
