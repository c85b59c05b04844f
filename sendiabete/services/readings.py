import threading
import time
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable

from sendiabete.services.classifier import SeverityBand

DEFAULT_LIST_LIMIT = 50


@dataclass(frozen=True)
class Reading:
    reading_id: int
    owner_account_id: str
    patient_id: str
    patient_name: str | None
    patient_phone: str | None
    diabetes_type: str | None
    treatment: str | None
    image_payload: bytes
    numeric_value: Decimal
    severity_band: SeverityBand
    notification_text: str
    created_at: datetime


class ReadingLedger:
    """Append-only log of readings, most recent first."""

    def __init__(self, readings: Iterable[Reading] = ()):
        # callers hand over the persisted snapshot already ordered most-recent-first
        self._readings: list[Reading] = list(readings)
        self._lock = threading.Lock()
        self._last_id = max((r.reading_id for r in self._readings), default=0)

    def next_reading_id(self) -> int:
        """Clock-derived id (microseconds), strictly increasing."""
        with self._lock:
            candidate = time.time_ns() // 1000
            self._last_id = max(candidate, self._last_id + 1)
            return self._last_id

    def append(self, reading: Reading) -> None:
        with self._lock:
            self._readings.insert(0, reading)

    def list_for(self, account_id: str, limit: int = DEFAULT_LIST_LIMIT) -> list[Reading]:
        if limit <= 0:
            return []
        with self._lock:
            snapshot = list(self._readings)
        out = []
        for reading in snapshot:
            if reading.owner_account_id != account_id:
                continue
            out.append(reading)
            if len(out) >= limit:
                break
        return out

    def __len__(self) -> int:
        return len(self._readings)
