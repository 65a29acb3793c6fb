"""Voyage CMS - Generic Resource Repository.

One implementation serves every entity type; an ``EntityMapping`` supplies
the table, the wire <-> column map and the default visibility. Records cross
this boundary as plain dicts keyed by wire name.

The repository knows nothing about hosted assets. Callers decide which assets
to release around the write (see ``app.assets.lifecycle``).
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import exc as sa_exc
from sqlalchemy.orm.exc import StaleDataError
from sqlmodel import Session, select

from app.core.errors import IntegrityError, NotFoundError, ValidationError
from app.core.logging import get_logger
from app.repository.mapping import EntityMapping, FieldSpec

Record = Dict[str, Any]


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _as_count(value: Any, name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        count = int(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"'{name}' must be an integer", fields=[name]) from e
    if count < 0:
        raise ValidationError(f"'{name}' must not be negative", fields=[name])
    return count


class ResourceRepository:
    """CRUD over one entity table, speaking wire-shaped dicts."""

    def __init__(self, mapping: EntityMapping, session: Session):
        self.mapping = mapping
        self.model = mapping.model
        self.session = session
        self.logger = get_logger(f"repository.{mapping.name}")

    # ── Mapping between wire and storage ──

    def _to_storage(self, spec: FieldSpec, value: Any) -> Any:
        if spec.required and _is_blank(value):
            raise ValidationError(
                f"Field '{spec.wire}' is required", fields=[spec.wire]
            )
        if spec.codec is not None:
            return spec.codec.encode(value, spec.wire)
        if value is not None and spec.normalize is not None:
            value = spec.normalize(value)
        if spec.choices is not None and value is not None and value not in spec.choices:
            raise ValidationError(
                f"Field '{spec.wire}' must be one of {sorted(spec.choices)}",
                fields=[spec.wire],
            )
        return value

    def _to_record(self, row) -> Record:
        record: Record = {"id": row.id}
        for spec in self.mapping.fields:
            value = getattr(row, spec.column)
            if spec.codec is not None:
                try:
                    value = spec.codec.decode(value, spec.column)
                except IntegrityError as e:
                    self.logger.error(
                        f"Undecodable {self.mapping.name} row: {e.message}",
                        extra={"entity": self.mapping.name, "entity_id": row.id},
                    )
                    raise IntegrityError(
                        f"{self.mapping.name} {row.id}: {e.message}"
                    ) from e
            record[spec.wire] = value
            for alias in spec.aliases:
                record[alias] = value
        record["createdAt"] = row.created_at
        record["updatedAt"] = row.updated_at
        return record

    def _commit(self, row) -> None:
        try:
            self.session.commit()
        except StaleDataError as e:
            self.session.rollback()
            raise NotFoundError(f"{self.mapping.label} not found") from e
        except sa_exc.IntegrityError as e:
            self.session.rollback()
            raise ValidationError(
                f"{self.mapping.label} conflicts with an existing record"
            ) from e
        self.session.refresh(row)

    # ── Operations ──

    def create(self, payload: Mapping[str, Any]) -> Record:
        """Validate, encode and insert a new row. Returns the stored record."""
        missing = [
            wire for wire in self.mapping.required_fields if _is_blank(payload.get(wire))
        ]
        if missing:
            raise ValidationError(
                f"Missing required fields: {', '.join(missing)}", fields=missing
            )

        values: Dict[str, Any] = {}
        for spec in self.mapping.fields:
            value = payload.get(spec.wire)
            if _is_blank(value):
                value = spec.default_for(payload)
            values[spec.column] = self._to_storage(spec, value)

        row = self.model(**values)
        self.session.add(row)
        self._commit(row)
        self.logger.info(
            f"Created {self.mapping.name} {row.id}",
            extra={"entity": self.mapping.name, "entity_id": row.id},
        )
        return self._to_record(row)

    def find_by_id(self, record_id: int) -> Optional[Record]:
        row = self.session.get(self.model, record_id)
        return self._to_record(row) if row is not None else None

    def find_one(
        self, wire: str, value: Any, include_draft: bool = False
    ) -> Optional[Record]:
        """Find the first record whose ``wire`` field equals ``value``."""
        spec = self.mapping.spec_for(wire)
        if spec is None:
            raise ValidationError(f"Unknown field '{wire}'", fields=[wire])
        query = select(self.model).where(getattr(self.model, spec.column) == value)
        if not include_draft and self.mapping.visible_status:
            query = query.where(self.model.status == self.mapping.visible_status)
        row = self.session.exec(query).first()
        return self._to_record(row) if row is not None else None

    def find_all(self, filters: Optional[Mapping[str, Any]] = None) -> List[Record]:
        """List records.

        Recognized filter keys: ``status`` (exact), ``includeDraft`` (skip the
        default visibility filter), the entity's own filters, ``limit`` and
        ``offset``. Anything else is ignored.
        """
        filters = filters or {}
        query = select(self.model)

        status = filters.get("status")
        if status:
            query = query.where(self.model.status == status)
        elif not filters.get("includeDraft") and self.mapping.visible_status:
            query = query.where(self.model.status == self.mapping.visible_status)

        for flt in self.mapping.filters:
            value = filters.get(flt.wire)
            if _is_blank(value):
                continue
            try:
                value = flt.cast(value)
            except (TypeError, ValueError) as e:
                raise ValidationError(
                    f"Invalid value for filter '{flt.wire}'", fields=[flt.wire]
                ) from e
            column = getattr(self.model, flt.column)
            if flt.match == "contains":
                query = query.where(column.ilike(f"%{value}%"))
            else:
                query = query.where(column == value)

        order_column = getattr(self.model, self.mapping.order_by)
        if self.mapping.descending:
            query = query.order_by(order_column.desc(), self.model.id.desc())
        else:
            query = query.order_by(order_column.asc(), self.model.id.asc())

        limit = _as_count(filters.get("limit"), "limit")
        offset = _as_count(filters.get("offset"), "offset")
        if limit:
            query = query.limit(limit)
        if offset:
            query = query.offset(offset)

        rows = self.session.exec(query).all()
        return [self._to_record(row) for row in rows]

    def update(self, record_id: int, payload: Mapping[str, Any]) -> Optional[Record]:
        """Apply a partial update.

        Only wire fields present in ``payload`` change. A structured field
        sent as ``[]`` clears it; an absent one is left alone. With nothing
        recognized the current record is returned without a write.
        Returns ``None`` when the id does not exist.
        """
        row = self.session.get(self.model, record_id)
        if row is None:
            return None

        changes = {
            spec.column: self._to_storage(spec, payload[spec.wire])
            for spec in self.mapping.fields
            if spec.updatable and spec.wire in payload
        }
        if not changes:
            return self._to_record(row)

        for column, value in changes.items():
            setattr(row, column, value)
        row.updated_at = datetime.now(timezone.utc)
        self.session.add(row)
        self._commit(row)
        self.logger.info(
            f"Updated {self.mapping.name} {record_id}: {sorted(changes)}",
            extra={"entity": self.mapping.name, "entity_id": record_id},
        )
        return self._to_record(row)

    def delete(self, record_id: int) -> Optional[Record]:
        """Remove a row and return it as it was, or ``None`` if absent."""
        row = self.session.get(self.model, record_id)
        if row is None:
            return None
        record = self._to_record(row)
        self.session.delete(row)
        try:
            self.session.commit()
        except StaleDataError as e:
            self.session.rollback()
            raise NotFoundError(f"{self.mapping.label} not found") from e
        self.logger.info(
            f"Deleted {self.mapping.name} {record_id}",
            extra={"entity": self.mapping.name, "entity_id": record_id},
        )
        return record
