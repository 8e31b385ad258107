import pytest
import pydantic
from datetime import timezone
from response_analytics.errors import ValidationError
from response_analytics.models import ResponseCandidate, ResponseEvent
from response_analytics.response_validator import validate_response
from factories import response_data

def test_valid_response_accepted():
    """Valid candidate becomes an immutable event"""
    event = validate_response(response_data())

    assert isinstance(event, ResponseEvent)
    assert event.topic == "Algebra"
    with pytest.raises(pydantic.ValidationError):
        event.correct = False

def test_candidate_model_accepted():
    """Candidate objects are validated directly"""
    event = validate_response(ResponseCandidate(**response_data(answerIndex=0)))
    assert event.answerIndex == 0

def test_negative_answer_index_rejected():
    with pytest.raises(ValidationError) as exc_info:
        validate_response(response_data(answerIndex=-1))
    assert exc_info.value.field == "answerIndex"

def test_negative_response_time_rejected():
    with pytest.raises(ValidationError) as exc_info:
        validate_response(response_data(responseTimeMs=-5))
    assert exc_info.value.field == "responseTimeMs"
    assert "responseTimeMs" in str(exc_info.value)

@pytest.mark.parametrize("value", [-0.01, 1.01, float("nan")])
def test_difficulty_out_of_range_rejected(value):
    with pytest.raises(ValidationError) as exc_info:
        validate_response(response_data(difficulty=value))
    assert exc_info.value.field == "difficulty"

def test_ability_out_of_range_rejected():
    with pytest.raises(ValidationError) as exc_info:
        validate_response(response_data(studentAbility=1.5))
    assert exc_info.value.field == "studentAbility"

def test_unit_interval_bounds_accepted():
    """0 and 1 are valid difficulty and ability values"""
    assert validate_response(response_data(difficulty=0.0, studentAbility=1.0)).difficulty == 0.0
    assert validate_response(response_data(difficulty=1.0, studentAbility=0.0)).difficulty == 1.0

@pytest.mark.parametrize("topic", [None, "", "   "])
def test_blank_topic_rejected(topic):
    with pytest.raises(ValidationError) as exc_info:
        validate_response(response_data(topic=topic))
    assert exc_info.value.field == "topic"

def test_topic_is_trimmed():
    assert validate_response(response_data(topic="  Geometry ")).topic == "Geometry"

def test_missing_identifiers_rejected():
    data = response_data()
    del data["sessionId"]
    with pytest.raises(ValidationError) as exc_info:
        validate_response(data)
    assert exc_info.value.field == "sessionId"

    with pytest.raises(ValidationError) as exc_info:
        validate_response(response_data(questionId=" "))
    assert exc_info.value.field == "questionId"

def test_question_number_must_be_positive():
    with pytest.raises(ValidationError) as exc_info:
        validate_response(response_data(questionNumber=0))
    assert exc_info.value.field == "questionNumber"

def test_first_violation_reported():
    """Checks run in order and stop at the first failure"""
    with pytest.raises(ValidationError) as exc_info:
        validate_response(response_data(answerIndex=-1, responseTimeMs=-1, topic=""))
    assert exc_info.value.field == "answerIndex"

def test_missing_required_field_reported():
    data = response_data()
    del data["correct"]
    with pytest.raises(ValidationError) as exc_info:
        validate_response(data)
    assert exc_info.value.field == "correct"
    assert exc_info.value.constraint == "is required"

def test_timestamp_defaults_to_now():
    data = response_data()
    del data["timestamp"]
    event = validate_response(data)
    assert event.timestamp.tzinfo is not None

def test_naive_timestamp_treated_as_utc():
    event = validate_response(response_data(timestamp="2024-03-01T09:00:00"))
    assert event.timestamp.tzinfo == timezone.utc

def test_metadata_passed_through():
    event = validate_response(response_data(metadata={"deviceType": "tablet", "locale": "en-IN"}))
    assert event.metadata.deviceType == "tablet"
    assert event.metadata.model_extra == {"locale": "en-IN"}

def test_non_boolean_correct_rejected():
    """Truthy strings are not accepted as a correctness flag"""
    with pytest.raises(ValidationError) as exc_info:
        validate_response(response_data(correct="yes"))
    assert exc_info.value.field == "correct"

def test_boolean_answer_index_rejected():
    with pytest.raises(ValidationError) as exc_info:
        validate_response(response_data(answerIndex=True))
    assert exc_info.value.field == "answerIndex"

@pytest.mark.parametrize("field", ["responseTimeMs", "questionNumber"])
def test_numeric_strings_rejected(field):
    with pytest.raises(ValidationError) as exc_info:
        validate_response(response_data(**{field: "1500"}))
    assert exc_info.value.field == field

def test_metadata_is_immutable():
    event = validate_response(response_data(metadata={"browser": "firefox"}))
    with pytest.raises(pydantic.ValidationError):
        event.metadata.browser = "x"
    assert event.metadata.browser == "firefox"
