from fastapi import FastAPI, HTTPException, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.requests import Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging
import random
import time
from collections import deque, defaultdict
from pathlib import Path
from typing import Optional
from asset_triage.models.schemas import (
    ClassificationRequest,
    ClassificationResponse,
    ErrorResponse,
    Escalation,
    HealthResponse,
    HistoryClassificationRequest,
    ModelStatus,
    SeverityLevel,
)
from asset_triage.models.classifier import IssueClassifier, ClassificationResult
from asset_triage.models.escalation import advise_escalation
from asset_triage.models.naive_bayes import EmptyTrainingSetError
from asset_triage.worklogs import load_work_logs
from asset_triage.config import settings
from asset_triage.logging_utils import configure_logging, RequestIDMiddleware, MaxBodySizeMiddleware, get_request_id

# Configure structured logging
configure_logging()
logger = logging.getLogger(__name__)

classifier: Optional[IssueClassifier] = None
technician_rng = random.Random(settings.TECHNICIAN_SEED) if settings.TECHNICIAN_SEED is not None else None


def _train_from_history(path: str) -> Optional[IssueClassifier]:
    p = Path(path)
    if not p.exists():
        logger.warning("Work log history %s not found; classifier not trained", p)
        return None
    records = load_work_logs(p)
    try:
        trained = IssueClassifier(records, rng=technician_rng, prior_floor=settings.PRIOR_FLOOR)
    except EmptyTrainingSetError:
        logger.warning("Work log history %s is empty; classifier not trained", p)
        return None
    logger.info(
        "Classifier trained on %d work logs (%d categories)",
        trained.model.total_records, len(trained.categories),
        extra={"training_records": trained.model.total_records},
    )
    return trained


@asynccontextmanager
async def lifespan(app: FastAPI):
    global classifier
    logger.info("Lifespan startup: training classifier from %s", settings.WORK_LOG_PATH)
    try:
        classifier = _train_from_history(settings.WORK_LOG_PATH)
    except (OSError, ValueError) as e:
        logger.error("Failed to load work log history: %s", e)
        classifier = None
    yield
    logger.info("Lifespan shutdown complete")


app = FastAPI(
    title="ICT Asset Issue Classifier",
    description="Classify ICT asset issues by category, severity, resolution time and technician",
    version=settings.APP_VERSION,
    lifespan=lifespan
)

app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_credentials=True, allow_methods=["*"], allow_headers=["*"])
app.add_middleware(RequestIDMiddleware)
app.add_middleware(MaxBodySizeMiddleware, max_bytes=settings.MAX_BODY_BYTES)

# Simple in-memory rate limiting (best-effort, single-process only)
_rate_buckets: dict[str, deque] = defaultdict(deque)

def _rate_limit_exceeded(key: str) -> bool:
    now = time.time()
    window_start = now - settings.RATE_LIMIT_WINDOW_SEC
    bucket = _rate_buckets[key]
    while bucket and bucket[0] < window_start:
        bucket.popleft()
    if len(bucket) >= settings.RATE_LIMIT_REQUESTS:
        return True
    bucket.append(now)
    return False

@app.middleware("http")
async def rate_limit_middleware(request: Request, call_next):
    client_ip = request.client.host if request.client else "unknown"
    if _rate_limit_exceeded(f"ip:{client_ip}"):
        return JSONResponse(
            status_code=429,
            content=ErrorResponse(detail="Rate limit exceeded", code="HTTP_429", request_id=get_request_id()).model_dump(),
        )
    return await call_next(request)


def get_classifier() -> IssueClassifier:
    """Dependency to get the classifier trained on the startup history"""
    if classifier is None:
        raise HTTPException(status_code=503, detail="Classifier not trained: no work log history loaded")
    return classifier


def _to_response(result: ClassificationResult) -> ClassificationResponse:
    advice = advise_escalation(result)
    logger.info(
        "Issue classified",
        extra={"category": result.category, "severity": result.severity.value, "confidence": result.confidence},
    )
    return ClassificationResponse(
        category=result.category,
        confidence=result.confidence,
        severity=SeverityLevel(result.severity.value),
        estimated_resolution_time=result.estimated_resolution_time,
        suggested_technician=result.suggested_technician,
        priority=result.priority,
        escalation=Escalation(
            should_escalate=advice.should_escalate,
            recommended_technician=advice.recommended_technician,
            escalation_reason=advice.reason,
        ),
    )


@app.get("/version")
async def version():
    return {
        "api_version": settings.APP_VERSION,
        "model_loaded": classifier is not None,
        "training_records": classifier.model.total_records if classifier else 0,
    }


@app.get("/", response_model=HealthResponse)
async def root():
    return HealthResponse(status="healthy", message="ICT Asset Issue Classifier API is running")


@app.get("/health/live", response_model=HealthResponse, tags=["health"])
async def liveness():
    return HealthResponse(status="alive", message="Service process responsive")

@app.get("/health/ready", response_model=HealthResponse, tags=["health"])
async def readiness(classifier: IssueClassifier = Depends(get_classifier)):
    return HealthResponse(status="ready", message=f"Classifier trained on {classifier.model.total_records} work logs")


@app.post("/classify", response_model=ClassificationResponse, response_model_by_alias=True,
          responses={429: {"model": ErrorResponse}, 503: {"model": ErrorResponse}}, tags=["inference"])
async def classify_issue(
    request: ClassificationRequest,
    classifier: IssueClassifier = Depends(get_classifier)
):
    """Classify an issue against the work log history loaded at startup"""
    return _to_response(classifier.classify(request.issue_description, request.item_type))


@app.post("/classify/with-history", response_model=ClassificationResponse, response_model_by_alias=True,
          responses={422: {"model": ErrorResponse}, 429: {"model": ErrorResponse}}, tags=["inference"])
async def classify_with_history(request: HistoryClassificationRequest):
    """Train on the supplied work logs, then classify the issue"""
    adhoc = IssueClassifier(request.work_logs, rng=technician_rng, prior_floor=settings.PRIOR_FLOOR)
    return _to_response(adhoc.classify(request.issue_description, request.item_type))


@app.get("/model/status", response_model=ModelStatus, response_model_by_alias=True)
async def model_status():
    """Get model training status"""
    if classifier is None:
        return ModelStatus(is_trained=False)
    return ModelStatus(
        is_trained=True,
        categories=list(classifier.categories),
        vocabulary_size=classifier.model.vocabulary_size,
        training_records=classifier.model.total_records,
    )


@app.exception_handler(EmptyTrainingSetError)
async def empty_training_set_handler(request: Request, exc: EmptyTrainingSetError):
    return JSONResponse(
        status_code=422,
        content=ErrorResponse(detail=str(exc), code="EMPTY_TRAINING_SET", request_id=get_request_id()).model_dump()
    )

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content=ErrorResponse(detail=str(exc.errors()), code="VALIDATION_ERROR", request_id=get_request_id()).model_dump()
    )

@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            detail=exc.detail if isinstance(exc.detail, str) else str(exc.detail),
            code=f"HTTP_{exc.status_code}",
            request_id=get_request_id()
        ).model_dump()
    )

@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception")
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            detail="Internal server error",
            code="INTERNAL_ERROR",
            request_id=get_request_id()
        ).model_dump()
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
