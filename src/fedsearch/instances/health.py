from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional

from .registry import Instance

logger = logging.getLogger(__name__)


@dataclass
class HealthRecord:
    failure_count: int
    last_failure_at: float


class HealthTracker:
    """Per-instance failure counter with a time-boxed cooldown.

    An instance is blocked only while its record is at or above the threshold
    and its last failure is still inside the cooldown window. Expired records
    are dropped lazily when eligibility is checked; nothing sweeps in the
    background.

    All methods are synchronous, so each read-modify-write on a record runs
    without an await in between and is atomic with respect to other tasks.
    """

    def __init__(
        self,
        failure_threshold: int = 3,
        cooldown_seconds: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._threshold = failure_threshold
        self._cooldown = cooldown_seconds
        self._clock = clock
        self._records: Dict[Instance, HealthRecord] = {}

    def is_eligible(self, instance: Instance) -> bool:
        rec = self._records.get(instance)
        if rec is None or rec.failure_count < self._threshold:
            return True
        if self._clock() - rec.last_failure_at > self._cooldown:
            del self._records[instance]
            logger.debug("Cooldown expired for %s", instance)
            return True
        return False

    def eligible(self, instances: Iterable[Instance]) -> List[Instance]:
        return [i for i in instances if self.is_eligible(i)]

    def record_failure(self, instance: Instance) -> None:
        rec = self._records.get(instance)
        now = self._clock()
        if rec is None:
            self._records[instance] = HealthRecord(failure_count=1, last_failure_at=now)
            return
        rec.failure_count += 1
        rec.last_failure_at = now
        if rec.failure_count == self._threshold:
            logger.info("Instance %s reached %d failures; cooling down", instance, rec.failure_count)

    def record_success(self, instance: Instance) -> None:
        self._records.pop(instance, None)

    def failures(self, instance: Instance) -> int:
        rec = self._records.get(instance)
        return rec.failure_count if rec else 0

    def get(self, instance: Instance) -> Optional[HealthRecord]:
        return self._records.get(instance)
