import pytest
from response_analytics.models import DifficultyLevel
from response_analytics.score_calculator import (
    calculate_performance_score,
    response_time_seconds,
    annotate,
)
from response_analytics.difficulty_classifier import classify_difficulty

@pytest.mark.parametrize("difficulty", [0.0, 0.25, 0.5, 1.0])
@pytest.mark.parametrize("response_time", [30000, 45000])
def test_slow_correct_answer_scores_correctness_and_bonus(make_event, difficulty, response_time):
    """No speed credit once response time reaches 30 seconds"""
    event = make_event(correct=True, difficulty=difficulty, responseTimeMs=response_time)
    assert calculate_performance_score(event) == pytest.approx(min(1, 0.7 + 0.2 * difficulty))

def test_score_clamped_to_one(make_event):
    """Instant correct answer on hardest question would be 1.2 unclamped"""
    event = make_event(correct=True, difficulty=1.0, responseTimeMs=0)
    assert calculate_performance_score(event) == 1.0

def test_incorrect_answer_only_earns_speed(make_event):
    event = make_event(correct=False, difficulty=0.9, responseTimeMs=15000)
    assert calculate_performance_score(event) == pytest.approx(0.15)

def test_incorrect_slow_answer_scores_zero(make_event):
    event = make_event(correct=False, responseTimeMs=60000)
    assert calculate_performance_score(event) == 0.0

def test_partial_speed_credit(make_event):
    # 0.5 * 0.3 + 0.7 + 0.2 * 0.2
    event = make_event(correct=True, difficulty=0.2, responseTimeMs=15000)
    assert calculate_performance_score(event) == pytest.approx(0.89)

def test_score_always_in_unit_interval(make_event):
    for correct in (True, False):
        for difficulty in (0.0, 0.3, 0.7, 1.0):
            for response_time in (0, 1, 29999, 30000, 120000):
                event = make_event(correct=correct, difficulty=difficulty, responseTimeMs=response_time)
                assert 0.0 <= calculate_performance_score(event) <= 1.0

@pytest.mark.parametrize("difficulty,expected", [
    (0.0, DifficultyLevel.EASY),
    (0.3, DifficultyLevel.EASY),
    (0.30001, DifficultyLevel.MEDIUM),
    (0.7, DifficultyLevel.MEDIUM),
    (0.70001, DifficultyLevel.HARD),
    (1.0, DifficultyLevel.HARD),
])
def test_classify_difficulty(difficulty, expected):
    assert classify_difficulty(difficulty) == expected

def test_difficulty_level_values():
    assert [level.value for level in DifficultyLevel] == ["Easy", "Medium", "Hard"]

@pytest.mark.parametrize("milliseconds,seconds", [
    (0, 0.0),
    (1234, 1.23),
    (1235, 1.24),
    (30000, 30.0),
    (999, 1.0),
])
def test_response_time_seconds(make_event, milliseconds, seconds):
    assert response_time_seconds(make_event(responseTimeMs=milliseconds)) == seconds

def test_annotate(make_event):
    event = make_event(correct=True, difficulty=0.8, responseTimeMs=3000)
    annotations = annotate(event)

    assert annotations.performance_score == 1.0
    assert annotations.response_time_seconds == 3.0
    assert annotations.difficulty_level == DifficultyLevel.HARD
