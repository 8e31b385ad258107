from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional
from datetime import datetime, timezone
from enum import Enum


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps are treated as UTC so every comparison is aware-vs-aware
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DifficultyLevel(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class ResponseMetadata(BaseModel):
    """Auxiliary client details, never read by scoring"""
    model_config = ConfigDict(extra="allow", frozen=True)

    deviceType: Optional[str] = None
    browser: Optional[str] = None
    userAgent: Optional[str] = None
    ipAddress: Optional[str] = None


class ResponseCandidate(BaseModel):
    """Response as submitted by the caller, before domain validation"""
    sessionId: Optional[str] = None
    questionId: Optional[str] = None
    answerIndex: int = Field(..., strict=True)
    correct: bool = Field(..., strict=True)
    responseTimeMs: int = Field(..., strict=True)
    timestamp: datetime = Field(default_factory=_utcnow)
    questionNumber: int = Field(..., strict=True)
    difficulty: float
    topic: Optional[str] = None
    studentAbility: float
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)

    @field_validator("timestamp")
    @classmethod
    def _timestamp_utc(cls, value: datetime) -> datetime:
        return _as_utc(value)


class ResponseEvent(BaseModel):
    """Validated response record; immutable once created"""
    model_config = ConfigDict(frozen=True)

    sessionId: str = Field(..., min_length=1)
    questionId: str = Field(..., min_length=1)
    answerIndex: int = Field(..., ge=0)
    correct: bool
    responseTimeMs: int = Field(..., ge=0)
    timestamp: datetime
    questionNumber: int = Field(..., ge=1)
    difficulty: float = Field(..., ge=0, le=1)
    topic: str = Field(..., min_length=1)
    studentAbility: float = Field(..., ge=0, le=1)
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)

    @field_validator("timestamp")
    @classmethod
    def _timestamp_utc(cls, value: datetime) -> datetime:
        return _as_utc(value)


class DerivedAnnotations(BaseModel):
    performance_score: float
    response_time_seconds: float
    difficulty_level: DifficultyLevel


class AnnotatedResponse(BaseModel):
    response: ResponseEvent
    annotations: DerivedAnnotations


class DateRange(BaseModel):
    """Inclusive bounds on response timestamp"""
    start: datetime
    end: datetime

    @field_validator("start", "end")
    @classmethod
    def _bounds_utc(cls, value: datetime) -> datetime:
        return _as_utc(value)


class StatisticsFilter(BaseModel):
    """Optional constraints narrowing an aggregation; None means no restriction"""
    session_id: Optional[str] = None
    question_id: Optional[str] = None
    topic: Optional[str] = None
    date_range: Optional[DateRange] = None


class StatisticsSummary(BaseModel):
    total_responses: int = 0
    correct_responses: int = 0
    average_response_time: float = 0.0
    average_difficulty: float = 0.0
    average_student_ability: float = 0.0
    accuracy_rate: float = 0.0


class TopicPerformance(BaseModel):
    topic: str
    total_responses: int
    correct_responses: int
    average_response_time: float
    average_difficulty: float
    accuracy_rate: float
    status: str


class DifficultyBandPerformance(BaseModel):
    band: str
    lower_bound: Optional[float] = None
    total_responses: int
    correct_responses: int
    average_response_time: float
    accuracy_rate: float


class IncorrectQuestion(BaseModel):
    question_id: str
    wrong_count: int
    last_attempt: datetime


class ErrorDetail(BaseModel):
    message: str
    code: str
    field: Optional[str] = None
    accepted_count: Optional[int] = None


class RejectedResponse(BaseModel):
    index: int
    error: ErrorDetail


class BatchRecordResult(BaseModel):
    accepted: List[ResponseEvent] = []
    rejected: List[RejectedResponse] = []
