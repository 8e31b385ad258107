import math
from response_analytics.models import ResponseEvent, DerivedAnnotations
from response_analytics.difficulty_classifier import classify_difficulty

# Full speed credit decays linearly to zero at 30 seconds
TIME_HORIZON_MS = 30000

TIME_WEIGHT = 0.3
CORRECTNESS_WEIGHT = 0.7
DIFFICULTY_BONUS_WEIGHT = 0.2

def calculate_performance_score(event: ResponseEvent) -> float:
    """
    Performance score in [0, 1]
    score = min(1, timeScore * 0.3 + correct * 0.7 + (correct ? difficulty * 0.2 : 0))
    """
    time_score = max(0.0, 1 - event.responseTimeMs / TIME_HORIZON_MS)
    correctness_score = 1.0 if event.correct else 0.0
    difficulty_bonus = event.difficulty * DIFFICULTY_BONUS_WEIGHT if event.correct else 0.0
    
    raw_score = time_score * TIME_WEIGHT + correctness_score * CORRECTNESS_WEIGHT + difficulty_bonus
    # Unclamped maximum is 1.2
    return min(1.0, raw_score)

def response_time_seconds(event: ResponseEvent) -> float:
    """Response time in seconds, rounded half-up to 2 decimals"""
    return math.floor(event.responseTimeMs / 10 + 0.5) / 100

def annotate(event: ResponseEvent) -> DerivedAnnotations:
    """Derived fields, recomputed on every call"""
    return DerivedAnnotations(
        performance_score=calculate_performance_score(event),
        response_time_seconds=response_time_seconds(event),
        difficulty_level=classify_difficulty(event.difficulty)
    )
