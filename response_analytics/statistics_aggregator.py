"""
Reduce response streams into overall, per-topic and per-difficulty statistics.

Every reducer visits each response exactly once and never mutates its input,
so calls are safe to run concurrently. Empty inputs yield zero-valued
statistics instead of NaN.
"""
import logging
import numpy as np
from typing import Dict, Iterable, List, Optional, Tuple
from datetime import datetime

from response_analytics.models import (
    ResponseEvent,
    StatisticsSummary,
    TopicPerformance,
    DifficultyBandPerformance,
    IncorrectQuestion,
)

logger = logging.getLogger(__name__)

# Lower-inclusive cut points; the last band is closed so 1.0 is included
DIFFICULTY_BOUNDARIES = (0.0, 0.3, 0.7, 1.0)
OTHER_BAND = "Other"

_BANDS: List[Tuple[float, str]] = [
    (low, f"{low}-{high}")
    for low, high in zip(DIFFICULTY_BOUNDARIES[:-1], DIFFICULTY_BOUNDARIES[1:])
]


class _Columns:
    """Per-group values collected in a single pass"""

    def __init__(self):
        self.correct: List[int] = []
        self.times: List[int] = []
        self.difficulties: List[float] = []
        self.abilities: List[float] = []

    def add(self, event: ResponseEvent) -> None:
        self.correct.append(1 if event.correct else 0)
        self.times.append(event.responseTimeMs)
        self.difficulties.append(event.difficulty)
        self.abilities.append(event.studentAbility)

    def __len__(self) -> int:
        return len(self.correct)

    def correct_count(self) -> int:
        return int(np.sum(self.correct))

    def accuracy_rate(self) -> float:
        return float(np.mean(self.correct)) if self.correct else 0.0

    def mean_time(self) -> float:
        return float(np.mean(self.times)) if self.times else 0.0

    def mean_difficulty(self) -> float:
        return float(np.mean(self.difficulties)) if self.difficulties else 0.0

    def mean_ability(self) -> float:
        return float(np.mean(self.abilities)) if self.abilities else 0.0


def overall_statistics(events: Iterable[ResponseEvent]) -> StatisticsSummary:
    """Single summary across all supplied responses"""
    columns = _Columns()
    for event in events:
        columns.add(event)

    logger.info(f"Overall statistics over {len(columns)} responses")

    if not columns:
        return StatisticsSummary()

    return StatisticsSummary(
        total_responses=len(columns),
        correct_responses=columns.correct_count(),
        average_response_time=columns.mean_time(),
        average_difficulty=columns.mean_difficulty(),
        average_student_ability=columns.mean_ability(),
        accuracy_rate=columns.accuracy_rate()
    )


def topic_performance(events: Iterable[ResponseEvent]) -> List[TopicPerformance]:
    """
    One record per exact topic string, best accuracy first.
    Equal accuracy rates are ordered by topic name.
    """
    groups: Dict[str, _Columns] = {}
    for event in events:
        groups.setdefault(event.topic, _Columns()).add(event)

    records = []
    for topic, columns in groups.items():
        accuracy = columns.accuracy_rate()
        records.append(TopicPerformance(
            topic=topic,
            total_responses=len(columns),
            correct_responses=columns.correct_count(),
            average_response_time=columns.mean_time(),
            average_difficulty=columns.mean_difficulty(),
            accuracy_rate=accuracy,
            status=performance_status(accuracy)
        ))

    records.sort(key=lambda r: (-r.accuracy_rate, r.topic))
    logger.info(f"Topic performance: {len(records)} topics")
    return records


def difficulty_band(difficulty: float) -> str:
    """Band label for a difficulty: [0, 0.3), [0.3, 0.7), [0.7, 1.0] or Other"""
    if difficulty == DIFFICULTY_BOUNDARIES[-1]:
        return _BANDS[-1][1]

    index = int(np.searchsorted(DIFFICULTY_BOUNDARIES, difficulty, side="right")) - 1
    if 0 <= index < len(_BANDS):
        return _BANDS[index][1]
    return OTHER_BAND


def difficulty_performance(events: Iterable[ResponseEvent]) -> List[DifficultyBandPerformance]:
    """Non-empty difficulty bands in ascending order, Other last"""
    groups: Dict[str, _Columns] = {}
    for event in events:
        groups.setdefault(difficulty_band(event.difficulty), _Columns()).add(event)

    ordered: List[Tuple[Optional[float], str]] = [*_BANDS, (None, OTHER_BAND)]
    records = []
    for lower_bound, band in ordered:
        columns = groups.get(band)
        if not columns:
            continue
        records.append(DifficultyBandPerformance(
            band=band,
            lower_bound=lower_bound,
            total_responses=len(columns),
            correct_responses=columns.correct_count(),
            average_response_time=columns.mean_time(),
            accuracy_rate=columns.accuracy_rate()
        ))

    logger.info(f"Difficulty performance: {len(records)} bands")
    return records


def incorrect_questions(events: Iterable[ResponseEvent], limit: Optional[int] = None) -> List[IncorrectQuestion]:
    """
    Questions answered wrongly, most-missed first, then most recently missed.
    """
    wrong_counts: Dict[str, int] = {}
    last_attempts: Dict[str, datetime] = {}

    for event in events:
        if event.correct:
            continue
        question_id = event.questionId
        wrong_counts[question_id] = wrong_counts.get(question_id, 0) + 1
        previous = last_attempts.get(question_id)
        if previous is None or event.timestamp > previous:
            last_attempts[question_id] = event.timestamp

    records = [
        IncorrectQuestion(
            question_id=question_id,
            wrong_count=count,
            last_attempt=last_attempts[question_id]
        )
        for question_id, count in wrong_counts.items()
    ]
    records.sort(key=lambda r: (-r.wrong_count, -r.last_attempt.timestamp(), r.question_id))

    if limit is not None:
        records = records[:max(limit, 0)]
    return records


def performance_status(accuracy_rate: float) -> str:
    if accuracy_rate >= 0.8:
        return "excellent"
    elif accuracy_rate >= 0.6:
        return "good"
    elif accuracy_rate >= 0.4:
        return "needs_improvement"
    else:
        return "struggling"
