from response_analytics.models import DifficultyLevel

# Upper bounds are inclusive: ties resolve toward the easier level
EASY_MAX = 0.3
MEDIUM_MAX = 0.7

def classify_difficulty(difficulty: float) -> DifficultyLevel:
    """Convert a [0, 1] difficulty to Easy / Medium / Hard"""
    if difficulty <= EASY_MAX:
        return DifficultyLevel.EASY
    elif difficulty <= MEDIUM_MAX:
        return DifficultyLevel.MEDIUM
    else:
        return DifficultyLevel.HARD
