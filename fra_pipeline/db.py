# fra_pipeline/db.py
"""
In-memory record store for FRA claims and their atlas entries.

One store object is created at process start and handed to callers; nothing
here is a module-level singleton. Records and atlas entries are always
extended together under one lock, and readers take snapshots under the same
lock, so a record is never visible without its entry.
"""
import logging
import threading
from collections import Counter
from typing import Any, Dict, List, Mapping, Optional, Union

from fra_pipeline.models import (
    RECORD_ADAPTER,
    AtlasEntry,
    ClaimType,
    Statistics,
    utcnow,
)
from fra_pipeline.services.atlas import project_record

logger = logging.getLogger(__name__)

RECORD_PREFIX = "FRA"
ENTRY_PREFIX = "ATLAS"


def _value(v: Any) -> Any:
    return getattr(v, "value", v)


def _coordinates(coords: List[Any]) -> List[Any]:
    # fresh lists; callers may edit the FeatureCollection freely
    return [list(c) if isinstance(c, (list, tuple)) else c for c in coords]


class RecordStore:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: List[Any] = []
        self._atlas_entries: List[AtlasEntry] = []
        self._counter = 1

    # ----------------------------
    # Writes
    # ----------------------------
    def save(self, record: Union[Mapping[str, Any], Any]):
        """
        Assign an id, stamp timestamps, store the record and its atlas entry.

        Accepts a canonical record model or a plain mapping of its fields.
        Any exception leaves the store untouched.
        """
        if isinstance(record, Mapping):
            record = RECORD_ADAPTER.validate_python(dict(record))

        with self._lock:
            seq = self._counter
            now = utcnow()
            saved = record.model_copy(update={
                "id": f"{RECORD_PREFIX}_{seq}",
                "created_at": now,
                "updated_at": now,
            })
            entry = project_record(saved, f"{ENTRY_PREFIX}_{seq + 1}")

            if any(r.application_number == saved.application_number for r in self._records):
                logger.warning("Duplicate application number %s (saved as %s)",
                               saved.application_number, saved.id)

            self._records.append(saved)
            self._atlas_entries.append(entry)
            self._counter = seq + 2

        logger.info("FRA record saved: %s (%s, %s)", saved.id, _value(saved.record_type), saved.state.value)
        return saved

    def clear_all(self) -> None:
        with self._lock:
            self._records = []
            self._atlas_entries = []
            self._counter = 1

    # ----------------------------
    # Reads
    # ----------------------------
    def get_all(self) -> List[Any]:
        with self._lock:
            return list(self._records)

    def get_record(self, record_id: str):
        with self._lock:
            return next((r for r in self._records if r.id == record_id), None)

    def get_by_state(self, state) -> List[Any]:
        state = _value(state)
        return [r for r in self.get_all() if r.state.value == state]

    def get_by_district(self, district: str) -> List[Any]:
        return [r for r in self.get_all() if r.district == district]

    def get_atlas_entries(self, state=None, district: Optional[str] = None,
                          entry_type=None) -> List[AtlasEntry]:
        """All filters optional; the ones given must all match."""
        with self._lock:
            entries = list(self._atlas_entries)
        if state:
            entries = [e for e in entries if e.state.value == _value(state)]
        if district:
            entries = [e for e in entries if e.district == district]
        if entry_type:
            entries = [e for e in entries if e.entry_type.value == _value(entry_type)]
        return entries

    def get_geojson(self, state=None, district: Optional[str] = None,
                    entry_type=None) -> Dict[str, Any]:
        features = []
        for entry in self.get_atlas_entries(state=state, district=district, entry_type=entry_type):
            features.append({
                "type": "Feature",
                "id": entry.id,
                "geometry": {
                    "type": entry.geometry.type,
                    "coordinates": _coordinates(entry.geometry.coordinates),
                },
                "properties": {
                    **entry.properties,
                    "entryType": entry.entry_type.value,
                    "state": entry.state.value,
                    "district": entry.district,
                    "village": entry.village,
                    "eligibleSchemes": dict(entry.eligible_schemes),
                },
            })
        return {"type": "FeatureCollection", "features": features}

    def get_statistics(self) -> Statistics:
        records = self.get_all()
        by_type = Counter(_value(r.record_type) for r in records)
        by_state: Dict[str, int] = {}
        for r in records:
            by_state[r.state.value] = by_state.get(r.state.value, 0) + 1
        return Statistics(
            total=len(records),
            individual_count=by_type.get(ClaimType.INDIVIDUAL.value, 0),
            community_count=by_type.get(ClaimType.COMMUNITY.value, 0),
            count_by_state=by_state,
            last_updated=utcnow(),
        )
