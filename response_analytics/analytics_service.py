import logging
from typing import Any, Iterable, Iterator, List, Mapping, Optional, Union

from response_analytics.config import settings
from response_analytics.errors import StorageError, ValidationError
from response_analytics.models import (
    BatchRecordResult,
    DerivedAnnotations,
    DifficultyBandPerformance,
    IncorrectQuestion,
    RejectedResponse,
    ResponseCandidate,
    ResponseEvent,
    StatisticsFilter,
    StatisticsSummary,
    TopicPerformance,
)
from response_analytics.response_store import ResponseStore
from response_analytics.response_validator import validate_response
from response_analytics import score_calculator, statistics_aggregator

logger = logging.getLogger(__name__)

Candidate = Union[ResponseCandidate, Mapping[str, Any]]


class AnalyticsService:
    """
    Records validated responses into a store and answers statistics queries
    against it. Holds no state besides the store reference.
    """

    def __init__(self, store: ResponseStore):
        self.store = store

    def record_response(self, candidate: Candidate) -> ResponseEvent:
        try:
            event = validate_response(candidate)
        except ValidationError as e:
            logger.warning(f"Rejected response: {e}")
            raise

        try:
            self.store.append(event)
        except StorageError as e:
            logger.error(f"Failed to store response for question {event.questionId}: {e}")
            raise

        logger.info(
            f"Recorded response: session={event.sessionId} question={event.questionId} "
            f"correct={event.correct}"
        )
        return event

    def record_batch(self, candidates: Iterable[Candidate]) -> BatchRecordResult:
        """
        Every candidate is validated before anything is stored; invalid ones are
        reported individually. A storage failure aborts the batch and the raised
        StorageError lists the events appended before it in `accepted`.
        """
        result = BatchRecordResult()
        validated: List[ResponseEvent] = []
        for index, candidate in enumerate(candidates):
            try:
                validated.append(validate_response(candidate))
            except ValidationError as e:
                logger.warning(f"Rejected response {index}: {e}")
                result.rejected.append(RejectedResponse(index=index, error=e.to_detail()))

        for event in validated:
            try:
                self.store.append(event)
            except StorageError as e:
                e.accepted = list(result.accepted)
                logger.error(
                    f"Batch aborted by storage failure after {len(e.accepted)} of "
                    f"{len(validated)} responses: {e}"
                )
                raise
            result.accepted.append(event)

        logger.info(f"Batch recorded: {len(result.accepted)} accepted, {len(result.rejected)} rejected")
        return result

    def annotate(self, event: ResponseEvent) -> DerivedAnnotations:
        return score_calculator.annotate(event)

    def overall_statistics(self, filters: Optional[StatisticsFilter] = None) -> StatisticsSummary:
        return statistics_aggregator.overall_statistics(self._fetch(filters))

    def topic_performance(self, filters: Optional[StatisticsFilter] = None) -> List[TopicPerformance]:
        return statistics_aggregator.topic_performance(self._fetch(filters))

    def difficulty_performance(self, filters: Optional[StatisticsFilter] = None) -> List[DifficultyBandPerformance]:
        return statistics_aggregator.difficulty_performance(self._fetch(filters))

    def incorrect_questions(self, filters: Optional[StatisticsFilter] = None,
                            limit: Optional[int] = None) -> List[IncorrectQuestion]:
        if limit is None:
            limit = settings.INCORRECT_QUESTIONS_LIMIT
        return statistics_aggregator.incorrect_questions(self._fetch(filters), limit)

    def _fetch(self, filters: Optional[StatisticsFilter]) -> Iterator[ResponseEvent]:
        # Stores may fail lazily while the events are being read
        try:
            yield from self.store.fetch_matching(filters or StatisticsFilter())
        except StorageError as e:
            logger.error(f"Failed to fetch responses: {e}")
            raise
