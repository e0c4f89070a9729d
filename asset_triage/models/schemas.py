from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional
from enum import Enum

class SeverityLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"

class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class WorkLogRecord(CamelModel):
    status: Optional[str] = None
    issue_summary: Optional[str] = None
    item_type: Optional[str] = None

class ClassificationRequest(CamelModel):
    issue_description: str
    item_type: str = ""

class HistoryClassificationRequest(ClassificationRequest):
    work_logs: List[WorkLogRecord] = Field(default_factory=list)

class Escalation(CamelModel):
    should_escalate: bool
    recommended_technician: str
    escalation_reason: str

class ClassificationResponse(CamelModel):
    category: str
    confidence: float
    severity: SeverityLevel
    estimated_resolution_time: float
    suggested_technician: str
    priority: float
    escalation: Escalation

class ModelStatus(CamelModel):
    is_trained: bool
    categories: List[str] = Field(default_factory=list)
    vocabulary_size: int = 0
    training_records: int = 0

class HealthResponse(BaseModel):
    status: str
    message: str

class ErrorResponse(BaseModel):
    detail: str
    code: str | None = None
    request_id: str | None = None
