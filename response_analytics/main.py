from fastapi import Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from typing import Any, Dict, List, Optional
from datetime import datetime
from response_analytics.models import (
    AnnotatedResponse,
    BatchRecordResult,
    DateRange,
    DifficultyBandPerformance,
    IncorrectQuestion,
    StatisticsFilter,
    StatisticsSummary,
    TopicPerformance,
)
from response_analytics.errors import StorageError, ValidationError
from response_analytics.response_store import InMemoryResponseStore, ResponseStore
from response_analytics.analytics_service import AnalyticsService
from response_analytics.config import settings
import logging

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format='[%(asctime)s] %(levelname)s: %(message)s'
)
logger = logging.getLogger(__name__)

# Initialize FastAPI
app = FastAPI(
    title="Response Analytics Service",
    description="Response scoring and assessment statistics",
    version="1.0.0"
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_store = InMemoryResponseStore(max_responses=settings.STORE_MAX_RESPONSES)

def get_store() -> ResponseStore:
    return _store

def get_service(store: ResponseStore = Depends(get_store)) -> AnalyticsService:
    return AnalyticsService(store)

def get_filters(
    session_id: Optional[str] = None,
    question_id: Optional[str] = None,
    topic: Optional[str] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> StatisticsFilter:
    if (start is None) != (end is None):
        raise ValidationError("dateRange", "start and end must be given together")

    date_range = DateRange(start=start, end=end) if start is not None else None
    return StatisticsFilter(
        session_id=session_id,
        question_id=question_id,
        topic=topic,
        date_range=date_range
    )

@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"error": exc.to_detail().model_dump(exclude_none=True)})

@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    logger.error(f"Storage error on {request.url.path}: {exc}")
    return JSONResponse(status_code=503, content={"error": exc.to_detail().model_dump(exclude_none=True)})

@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"error": {"message": "Server Error", "code": "INTERNAL_SERVER_ERROR"}}
    )

@app.get("/")
async def root():
    return {
        "service": "Response Analytics API",
        "version": "1.0.0",
        "status": "running"
    }

@app.get("/health")
async def health():
    return {"status": "healthy"}

@app.post("/responses", response_model=AnnotatedResponse, status_code=201)
def record_response(candidate: Dict[str, Any], service: AnalyticsService = Depends(get_service)):
    """
    Validate and store a single response
    """
    # Raw body so type problems are reported as VALIDATION_ERROR like range violations
    event = service.record_response(candidate)
    return AnnotatedResponse(response=event, annotations=service.annotate(event))

@app.post("/responses/batch", response_model=BatchRecordResult)
def record_batch(candidates: List[Dict[str, Any]], service: AnalyticsService = Depends(get_service)):
    """
    Store every valid response; invalid ones are listed with their index
    """
    return service.record_batch(candidates)

@app.get("/statistics", response_model=StatisticsSummary)
def overall_statistics(filters: StatisticsFilter = Depends(get_filters),
                       service: AnalyticsService = Depends(get_service)):
    return service.overall_statistics(filters)

@app.get("/statistics/topics", response_model=List[TopicPerformance])
def topic_performance(filters: StatisticsFilter = Depends(get_filters),
                      service: AnalyticsService = Depends(get_service)):
    return service.topic_performance(filters)

@app.get("/statistics/difficulty", response_model=List[DifficultyBandPerformance])
def difficulty_performance(filters: StatisticsFilter = Depends(get_filters),
                           service: AnalyticsService = Depends(get_service)):
    return service.difficulty_performance(filters)

@app.get("/statistics/incorrect-questions", response_model=List[IncorrectQuestion])
def incorrect_questions(filters: StatisticsFilter = Depends(get_filters),
                        limit: Optional[int] = Query(default=None, ge=1),
                        service: AnalyticsService = Depends(get_service)):
    return service.incorrect_questions(filters, limit)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "response_analytics.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD,
        log_level=settings.LOG_LEVEL
    )
