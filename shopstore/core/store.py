"""
Generic JSON-document entity store.

One EntityStore owns one document on disk:

    {"schemaVersion": "1.0", "<collection>": [ {record}, ... ]}

Every operation reads the whole document, works on the decoded copy and, for
mutations, writes the whole document back through a temp file and an atomic
rename. Disk I/O runs in a worker thread so callers on an event loop never
block. There is no locking between concurrent mutations: the last full write
wins.
"""

import asyncio
import contextlib
import copy
import json
import os
import tempfile
import uuid
from collections.abc import Hashable
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from .config import get_schema_version
from .errors import CorruptionFault, NotFoundFault, SchemaFault, StorageFault, ValidationFault
from .schema import IMMUTABLE_FIELDS, empty_document, next_timestamp, parse_timestamp
from ..util.logging import logger

Record = Dict[str, Any]
Document = Dict[str, Any]


def is_present(value: Any) -> bool:
    """True unless the value is None, blank text or an empty collection."""
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, dict, tuple)):
        return len(value) > 0
    return True


class EntityStore:
    """Single-document store for one entity collection."""

    # Enumerated status field, validated on create and update
    status_field: Optional[str] = None
    valid_statuses: Sequence[str] = ()
    default_status: Optional[str] = None

    def __init__(self, path: Union[str, Path], collection: str, schema_version: Optional[str] = None):
        self.path = Path(path)
        self.collection = collection
        self.schema_version = schema_version or get_schema_version()
        self.label = collection[:-1] if collection.endswith("s") else collection

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(path={str(self.path)!r}, collection={self.collection!r})"

    def empty_document(self) -> Document:
        return empty_document(self.collection, self.schema_version)

    # ----- Disk access (worker thread) -----

    def _read_text(self) -> str:
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise NotFoundFault(f"{self.path} does not exist") from e
        except OSError as e:
            raise StorageFault(f"Error reading {self.label} data: {e}") from e

    def _decode(self, text: str) -> Any:
        try:
            return json.loads(text)
        except ValueError as e:
            raise CorruptionFault(f"Error parsing {self.label} data: {e}") from e

    def _check_shape(self, doc: Any, require_version: bool) -> None:
        if not isinstance(doc, dict):
            raise SchemaFault(f"Invalid data structure: {self.collection} document must be an object")
        if not isinstance(doc.get(self.collection), list):
            raise SchemaFault(f"Invalid data structure: {self.collection} array is required")
        if require_version and not isinstance(doc.get("schemaVersion"), str):
            raise SchemaFault("Invalid data structure: schemaVersion string is required")

    def _serialize(self, doc: Document) -> str:
        try:
            return json.dumps(doc, indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise SchemaFault(f"Invalid data structure: {self.collection} document is not JSON serializable: {e}") from e

    def _replace(self, payload: str) -> None:
        """Write payload to a temp file beside the document, then rename it over the document."""
        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=str(self.path.parent), prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except OSError as e:
            if tmp_path is not None:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_path)
            logger.log_operation(f"{self.collection}.write", "failed", {"path": str(self.path), "error": str(e)})
            raise StorageFault(f"Error writing {self.label} data: {e}") from e

    def _initialize(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageFault(f"Failed to initialize {self.collection} database: {e}") from e

        try:
            text = self._read_text()
        except NotFoundFault:
            self._replace(self._serialize(self.empty_document()))
            logger.log_operation(f"{self.collection}.initialize", "created", {"path": str(self.path)})
            return

        try:
            doc = self._decode(text)
            self._check_shape(doc, require_version=False)
        except (CorruptionFault, SchemaFault) as e:
            # Destructive: malformed content is discarded, not merged
            logger.log_document_recovery(str(self.path), str(e))
            self._replace(self._serialize(self.empty_document()))
            return

        if not isinstance(doc.get("schemaVersion"), str):
            doc["schemaVersion"] = self.schema_version
            logger.log_document_recovery(str(self.path), "missing schemaVersion")
            self._replace(self._serialize(doc))

    def _load(self) -> Document:
        doc = self._decode(self._read_text())
        self._check_shape(doc, require_version=False)
        if not isinstance(doc.get("schemaVersion"), str):
            doc["schemaVersion"] = self.schema_version
        return doc

    # ----- Document operations -----

    async def ensure_initialized(self) -> None:
        """Create the document, or recreate it when malformed. No-op when healthy."""
        await asyncio.to_thread(self._initialize)

    async def read_document(self) -> Document:
        """Load and decode the whole document.

        A missing file is initialized and read as empty. Undecodable content raises
        CorruptionFault and a missing records array raises SchemaFault; neither is
        recovered here.
        """
        try:
            return await asyncio.to_thread(self._load)
        except NotFoundFault:
            logger.warning(f"{self.path} not found, initializing empty {self.collection} document")
            await self.ensure_initialized()
            return self.empty_document()

    async def write_document(self, doc: Document) -> None:
        """Validate the document shape and persist it atomically."""
        self._check_shape(doc, require_version=True)
        payload = self._serialize(doc)
        await asyncio.to_thread(self._replace, payload)

    # ----- Queries -----

    async def get_all(self) -> List[Record]:
        """Every record, freshly decoded from disk, so callers own the returned objects."""
        doc = await self.read_document()
        return doc[self.collection]

    async def get_by_id(self, record_id: str) -> Optional[Record]:
        records = await self.get_all()
        return next((r for r in records if r.get("id") == record_id), None)

    async def get_by_field(self, field: str, value: Any) -> List[Record]:
        records = await self.get_all()
        return [r for r in records if field in r and r[field] == value]

    async def find_one(self, field: str, value: Any) -> Optional[Record]:
        matches = await self.get_by_field(field, value)
        return matches[0] if matches else None

    async def filter(self, predicate: Callable[[Record], bool]) -> List[Record]:
        records = await self.get_all()
        return [r for r in records if predicate(r)]

    async def search(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        start_date: Any = None,
        end_date: Any = None,
    ) -> List[Record]:
        """Records matching every equality filter and an inclusive createdAt range.

        Filters whose value is None are ignored.
        """
        active = {k: v for k, v in (filters or {}).items() if v is not None}
        start = self._date_bound(start_date, "startDate")
        end = self._date_bound(end_date, "endDate")

        def matches(record: Record) -> bool:
            for field, value in active.items():
                if field not in record or record[field] != value:
                    return False
            if start is None and end is None:
                return True
            created = parse_timestamp(record.get("createdAt"))
            if created is None:
                return False
            if start is not None and created < start:
                return False
            if end is not None and created > end:
                return False
            return True

        return await self.filter(matches)

    async def count_by_field(self, field: str, values: Iterable[Any]) -> Dict[Any, int]:
        """Count records per enumerated value; every value gets an entry."""
        counts = {value: 0 for value in values}
        for record in await self.get_all():
            value = record.get(field)
            if isinstance(value, Hashable) and value in counts:
                counts[value] += 1
        return counts

    async def count(self) -> int:
        return len(await self.get_all())

    # ----- Mutations -----

    async def create(self, data: Mapping[str, Any]) -> Record:
        """Validate, stamp and append a new record; returns the stored record."""
        data = dict(data or {})
        if self.status_field and data.get(self.status_field) is None:
            data.pop(self.status_field, None)

        self.validate_new(data)
        self.check_status(data)

        doc = await self.read_document()
        records = doc[self.collection]
        self.check_conflicts(data, records)

        timestamp = next_timestamp()
        fields = self.build_record(data, timestamp)
        record = {"id": self._new_id(records), **fields, "createdAt": timestamp, "updatedAt": timestamp}

        records.append(record)
        await self.write_document(doc)

        logger.log_store_operation(self.collection, "create", record["id"])
        return copy.deepcopy(record)

    async def update(self, record_id: str, data: Mapping[str, Any]) -> Optional[Record]:
        """Shallow-merge data over a record. Returns None when the id is unknown."""
        changes = {k: v for k, v in dict(data or {}).items() if k not in IMMUTABLE_FIELDS}

        doc = await self.read_document()
        records = doc[self.collection]
        index = self._index_of(records, record_id)
        if index is None:
            return None

        self.check_status(changes)
        existing = records[index]
        changes = self.prepare_update(existing, changes)
        self.check_conflicts(changes, records, existing)

        updated = {**existing, **changes}
        updated["updatedAt"] = next_timestamp(existing.get("updatedAt"))
        records[index] = updated
        await self.write_document(doc)

        logger.log_store_operation(self.collection, "update", record_id, details={"fields": sorted(changes)})
        return copy.deepcopy(updated)

    async def update_status(self, record_id: str, status: str) -> Optional[Record]:
        if not self.status_field:
            raise ValidationFault(f"{self.collection} records have no status field", "status")
        self.check_status({self.status_field: status})
        return await self.update(record_id, {self.status_field: status})

    async def delete(self, record_id: str) -> bool:
        doc = await self.read_document()
        records = doc[self.collection]
        index = self._index_of(records, record_id)
        if index is None:
            return False

        del records[index]
        await self.write_document(doc)

        logger.log_store_operation(self.collection, "delete", record_id)
        return True

    # ----- Hooks for entity stores -----

    def validate_new(self, data: Dict[str, Any]) -> None:
        """Check required fields of a record about to be created."""

    def check_conflicts(self, data: Dict[str, Any], records: List[Record], existing: Optional[Record] = None) -> None:
        """Check new data against the records already stored.

        existing is the record being updated, or None on create.
        """

    def build_record(self, data: Dict[str, Any], timestamp: str) -> Dict[str, Any]:
        """Domain fields of a new record (id and timestamps are added by create)."""
        fields = {k: v for k, v in data.items() if k not in ("id", "createdAt", "updatedAt")}
        if self.status_field and self.default_status is not None:
            fields.setdefault(self.status_field, self.default_status)
        return fields

    def prepare_update(self, existing: Record, changes: Dict[str, Any]) -> Dict[str, Any]:
        """Adjust the changes about to be merged over an existing record."""
        return changes

    # ----- Validation helpers -----

    def fault(self, message: str, field: Optional[str] = None) -> ValidationFault:
        logger.log_validation_fault(self.collection, field or "", message)
        return ValidationFault(message, field)

    def require(self, data: Mapping[str, Any], field: str, message: Optional[str] = None) -> None:
        if not is_present(data.get(field)):
            raise self.fault(message or f"{field} is required", field)

    def check_status(self, data: Mapping[str, Any]) -> None:
        if not self.status_field or self.status_field not in data:
            return
        if data[self.status_field] not in self.valid_statuses:
            raise self.fault(
                f"Invalid {self.label} status. Valid statuses are: {', '.join(self.valid_statuses)}",
                self.status_field,
            )

    def check_choice(self, data: Mapping[str, Any], field: str, choices: Sequence[str], kind: str) -> None:
        if field in data and data[field] not in choices:
            raise self.fault(f"Invalid {kind}. Valid values are: {', '.join(choices)}", field)

    # ----- Internals -----

    @staticmethod
    def _index_of(records: List[Record], record_id: str) -> Optional[int]:
        for i, record in enumerate(records):
            if record.get("id") == record_id:
                return i
        return None

    @staticmethod
    def _new_id(records: List[Record]) -> str:
        taken = {r.get("id") for r in records}
        while True:
            candidate = str(uuid.uuid4())
            if candidate not in taken:
                return candidate

    def _date_bound(self, value: Any, field: str):
        if value is None or value == "":
            return None
        parsed = parse_timestamp(value)
        if parsed is None:
            raise self.fault(f"Invalid date for {field}: {value}", field)
        return parsed
