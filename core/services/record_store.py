# =============================================================================
# core/services/record_store.py - Generic Record Store
# =============================================================================
# Validation + CRUD boundary for one record type backed by one Supabase table.
#
# Each store is built once at process start with an injected client:
#   store = PaymentStore(client, strict=settings.STRICT_RECORD_VALIDATION)
#
# Guarantees:
# - Input is validated before any backend call, so a rejected record is
#   never partially written.
# - created_at / updated_at are set to the operation time when omitted.
# - update() refreshes updated_at (never created_at) on every save.
# - Backend failures surface as app.exceptions errors, never swallowed.
# =============================================================================

import logging
from collections.abc import Mapping
from datetime import datetime, timedelta
from decimal import Decimal
from enum import Enum
from functools import lru_cache
from typing import Any, Generic, TypeVar, get_args
from uuid import UUID

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from supabase import Client

from app.exceptions import NotFoundError, RecordStoreException, ValidationError
from core.models.base import StoredRecord
from lib.supabase_client import translate_backend_error
from lib.utils import ensure_utc, normalize_uuid, utc_now

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=StoredRecord)

_TIMESTAMP_FIELDS = ("created_at", "updated_at")


class RecordStore(Generic[RecordT]):
    """
    Validation and CRUD for one record type.

    Subclasses set `model` and `table_name`. The table name can be
    overridden per instance (e.g. from settings).

    Example:
        store = PaymentStore(client)
        payment = store.create({...})
        pending = store.find_many({"status": "pending"})
        payment.status = PaymentStatus.COMPLETED
        payment = store.update(payment)
    """

    model: type[RecordT]
    table_name: str

    def __init__(
        self,
        client: Client,
        table_name: str | None = None,
        strict: bool = False,
    ):
        self._client = client
        if table_name:
            self.table_name = table_name
        self.strict = strict

    @property
    def entity(self) -> str:
        """Entity name used in logs and errors."""
        return self.model.entity_name

    # -------------------------------------------------------------------------
    # Create
    # -------------------------------------------------------------------------

    def create(self, record: Mapping[str, Any] | RecordT) -> RecordT:
        """
        Validate and insert a new record.

        Args:
            record: Field mapping or an unsaved model instance. The id must
                be supplied; timestamps default to now when omitted.

        Returns:
            The stored record as returned by the backend

        Raises:
            ValidationError: Missing/mistyped field (nothing is written)
            DuplicateKeyError: A record with this id already exists
            BackendUnavailableError: The backend can't be reached
        """
        data = self._input_data(record)

        now = utc_now()
        for field in _TIMESTAMP_FIELDS:
            if data.get(field) is None:
                data[field] = now

        candidate = self._validate(data)
        self._check_consistency(candidate)

        record_id = str(candidate.id)
        response = self._execute(
            self._table().insert(candidate.to_row()),
            operation="create",
            record_id=record_id,
        )

        if not response.data:
            raise RecordStoreException(
                message=f"Insert returned no data for {self.entity} {record_id}",
                details={"operation": "create", "id": record_id},
            )

        logger.info(f"Created {self.entity}: {record_id}")
        return self._from_row(response.data[0])

    # -------------------------------------------------------------------------
    # Read
    # -------------------------------------------------------------------------

    def find_many(
        self,
        filters: Mapping[str, Any] | None = None,
        limit: int | None = None,
    ) -> list[RecordT]:
        """
        Find records matching every equality filter.

        Args:
            filters: Field name -> value. None matches missing values.
            limit: Maximum number of records to return

        Returns:
            Matching records in backend order (empty list if none)

        Raises:
            ValidationError: Unknown field, unfilterable value, or bad limit
        """
        if limit is not None and limit < 1:
            raise ValidationError(self.entity, f"limit must be positive (got {limit})")

        query = self._table().select("*")
        for column, value in self._filter_params(filters or {}).items():
            if value is None:
                query = query.is_(column, "null")
            else:
                query = query.eq(column, value)
        if limit is not None:
            query = query.limit(limit)

        logger.debug(f"Querying {self.table_name} with filters={dict(filters or {})} limit={limit}")
        response = self._execute(query, operation="find")
        return [self._from_row(row) for row in response.data or []]

    def find_one(self, filters: Mapping[str, Any] | None = None) -> RecordT | None:
        """First record matching the filters, or None."""
        results = self.find_many(filters, limit=1)
        return results[0] if results else None

    def find_by_id(self, record_id: str | UUID) -> RecordT | None:
        """Record with this id, or None."""
        return self.find_one({"id": record_id})

    def get(self, record_id: str | UUID) -> RecordT:
        """
        Record with this id.

        Raises:
            NotFoundError: If no record has this id
        """
        record = self.find_by_id(record_id)
        if record is None:
            raise NotFoundError(self.entity, str(record_id))
        return record

    # -------------------------------------------------------------------------
    # Update
    # -------------------------------------------------------------------------

    def update(self, record: RecordT) -> RecordT:
        """
        Persist a previously fetched record after mutating its fields.

        The whole document is written. updated_at is refreshed to the
        current time and always moves forward from the value the caller
        holds; created_at is written back unchanged.

        Args:
            record: Model instance (usually from find_* or create)

        Returns:
            The stored record as returned by the backend

        Raises:
            ValidationError: Record is not valid (nothing is written)
            NotFoundError: No record with this id exists anymore
            BackendUnavailableError: The backend can't be reached
        """
        if not isinstance(record, self.model):
            raise ValidationError(
                self.entity,
                f"update expects a {self.model.__name__} instance, got {type(record).__name__}",
            )

        candidate = self._validate(record.model_dump())
        self._check_consistency(candidate)

        now = utc_now()
        if now <= candidate.updated_at:
            now = candidate.updated_at + timedelta(microseconds=1)
        candidate = candidate.model_copy(update={"updated_at": now})

        record_id = str(candidate.id)
        row = candidate.to_row()
        row.pop("id")

        response = self._execute(
            self._table().update(row).eq("id", record_id),
            operation="update",
            record_id=record_id,
        )

        if not response.data:
            raise NotFoundError(self.entity, record_id)

        logger.info(f"Updated {self.entity}: {record_id}")
        return self._from_row(response.data[0])

    def _modify(self, record_id: str | UUID, **changes: Any) -> RecordT:
        """Fetch a record, apply field changes and save it."""
        record = self.get(record_id)
        return self.update(record.model_copy(update=changes))

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _table(self):
        return self._client.table(self.table_name)

    def _execute(self, query, operation: str, record_id: str | None = None):
        try:
            return query.execute()
        except Exception as e:
            logger.error(f"Failed to {operation} {self.entity} in {self.table_name}: {e}")
            raise translate_backend_error(e, self.entity, operation, record_id=record_id) from e

    def _input_data(self, record: Mapping[str, Any] | RecordT) -> dict[str, Any]:
        if isinstance(record, StoredRecord):
            if not isinstance(record, self.model):
                raise ValidationError(
                    self.entity,
                    f"expected a {self.model.__name__}, got {type(record).__name__}",
                )
            # Only what the caller set; unset timestamps get the operation time
            return record.model_dump(exclude_unset=True)
        if isinstance(record, Mapping):
            return dict(record)
        raise ValidationError(
            self.entity,
            f"expected a mapping or {self.model.__name__}, got {type(record).__name__}",
        )

    def _validate(self, data: Mapping[str, Any]) -> RecordT:
        try:
            return self.model.model_validate(data)
        except PydanticValidationError as e:
            errors = e.errors(include_url=False)
            summary = "; ".join(
                f"{'.'.join(str(part) for part in err['loc']) or '<record>'}: {err['msg']}"
                for err in errors
            )
            raise ValidationError(self.entity, summary, errors=errors) from e

    def _check_consistency(self, record: RecordT) -> None:
        problems = record.consistency_problems()
        if not problems:
            return
        if self.strict:
            raise ValidationError(
                self.entity,
                "; ".join(problems),
                errors=[{"loc": ["<record>"], "msg": problem} for problem in problems],
            )
        logger.warning(f"{self.entity} {record.id} is inconsistent: {'; '.join(problems)}")

    def _filter_params(self, filters: Mapping[str, Any]) -> dict[str, str | None]:
        fields = self.model.model_fields
        params: dict[str, str | None] = {}

        for name, value in filters.items():
            if name not in fields:
                raise ValidationError(self.entity, f"unknown filter field '{name}'")
            if isinstance(value, (list, tuple, set, dict)):
                raise ValidationError(
                    self.entity,
                    f"field '{name}' can only be filtered by a single value",
                )
            if value is None:
                params[name] = None
                continue

            annotation = fields[name].annotation
            if annotation is UUID or UUID in get_args(annotation):
                try:
                    params[name] = normalize_uuid(value)
                except (TypeError, ValueError, AttributeError) as e:
                    raise ValidationError(
                        self.entity, f"field '{name}' must be a UUID (got {value!r})"
                    ) from e
                continue

            try:
                value = _field_adapter(self.model, name).validate_python(value)
            except PydanticValidationError as e:
                raise ValidationError(
                    self.entity,
                    f"invalid filter value for '{name}': {e.errors()[0]['msg']}",
                    errors=e.errors(include_url=False),
                ) from e
            params[name] = _filter_value(value)

        return params

    def _from_row(self, row: Mapping[str, Any]) -> RecordT:
        known = self.model.field_names()
        try:
            return self.model.model_validate({k: v for k, v in row.items() if k in known})
        except PydanticValidationError as e:
            raise RecordStoreException(
                message=f"Stored {self.entity} failed validation: {e.error_count()} error(s)",
                code="INVALID_STORED_RECORD",
                suggestion=f"Check the {self.table_name} table for rows written outside the store",
                details={"id": row.get("id"), "errors": e.errors(include_url=False)},
            ) from e


@lru_cache(maxsize=None)
def _field_adapter(model: type[StoredRecord], name: str) -> TypeAdapter:
    """Validator for a single field, so filter values get the same coercion as writes."""
    return TypeAdapter(model.model_fields[name].rebuild_annotation())


def _filter_value(value: Any) -> str:
    """Render a filter value the way PostgREST expects it in a query string."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, datetime):
        return ensure_utc(value).isoformat()
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)
