"""
Response store contract and the in-memory store used by the service
"""
import logging
import threading
from typing import Iterator, List, Optional, Protocol

from response_analytics.errors import StorageError
from response_analytics.models import ResponseEvent, StatisticsFilter

logger = logging.getLogger(__name__)


class ResponseStore(Protocol):
    def fetch_matching(self, filters: StatisticsFilter) -> Iterator[ResponseEvent]:
        """Yield every stored response matching the filter, once"""
        ...

    def append(self, event: ResponseEvent) -> None:
        """Persist a validated response or raise StorageError"""
        ...


def matches_filter(event: ResponseEvent, filters: StatisticsFilter) -> bool:
    """
    Exact match on session/question, case-insensitive substring on topic,
    inclusive date range on timestamp. Unset fields do not restrict.
    """
    if filters.session_id is not None and event.sessionId != filters.session_id:
        return False

    if filters.question_id is not None and event.questionId != filters.question_id:
        return False

    if filters.topic is not None and filters.topic.lower() not in event.topic.lower():
        return False

    if filters.date_range is not None:
        if not filters.date_range.start <= event.timestamp <= filters.date_range.end:
            return False

    return True


class InMemoryResponseStore:
    """Process-local response store; fetches iterate over a snapshot"""

    def __init__(self, max_responses: Optional[int] = None):
        self._responses: List[ResponseEvent] = []
        self._max_responses = max_responses
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._responses)

    def append(self, event: ResponseEvent) -> None:
        with self._lock:
            if self._max_responses is not None and len(self._responses) >= self._max_responses:
                raise StorageError(f"Response store is full ({self._max_responses} responses)")
            self._responses.append(event)

    def fetch_matching(self, filters: StatisticsFilter) -> Iterator[ResponseEvent]:
        with self._lock:
            snapshot = list(self._responses)
        logger.debug(f"Fetching from snapshot of {len(snapshot)} responses")
        return (event for event in snapshot if matches_filter(event, filters))

    def clear(self) -> None:
        with self._lock:
            self._responses.clear()
