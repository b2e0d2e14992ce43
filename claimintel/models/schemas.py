from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from datetime import datetime

from claimintel.models.base import utcnow
from claimintel.models.claim import (
    Claim, ClaimSummary, FraudAssessment, ExtractedField, ConsistencyReport
)
from claimintel.models.notification import AppNotification
from claimintel.core.constants import ClaimStatus, RiskLevel


# ----------------------------
# Claims
# ----------------------------
class ClaimSubmitResponse(BaseModel):
    success: bool
    message: str
    claim: Optional[Claim] = None


class ClaimListResponse(BaseModel):
    total: int
    skip: int
    limit: int
    claims: List[ClaimSummary]


class ClaimStatusUpdateRequest(BaseModel):
    status: ClaimStatus
    notes: Optional[str] = None


# ----------------------------
# Document Q&A
# ----------------------------
class QuestionRequest(BaseModel):
    question: str = Field(default="", max_length=1000)


class QuestionResponse(BaseModel):
    claim_id: str
    question: str
    answer: str


# ----------------------------
# Notifications
# ----------------------------
class NotificationListResponse(BaseModel):
    total: int
    unread: int
    notifications: List[AppNotification]


# ----------------------------
# Dashboard
# ----------------------------
class DashboardStats(BaseModel):
    total_claims: int = 0
    approved_claims: int = 0
    pending_claims: int = 0
    high_risk_claims: int = 0
    average_risk_score: float = 0.0
    by_status: Dict[str, int] = Field(default_factory=dict)
    unread_notifications: int = 0


class RecentClaimsResponse(BaseModel):
    claims: List[ClaimSummary]


class AdminReportItem(BaseModel):
    claim_id: str
    claimant_name: str
    status: ClaimStatus
    risk_level: RiskLevel
    fraud_assessment: Optional[FraudAssessment] = None
    extracted_info: Optional[Dict[str, ExtractedField]] = None
    consistency_report: Optional[ConsistencyReport] = None


class AdminReportResponse(BaseModel):
    total: int
    reports: List[AdminReportItem]


# ----------------------------
# Health Check
# ----------------------------
class HealthResponse(BaseModel):
    status: str
    version: str
    environment: str
    llm_provider: str
    details: Optional[Dict[str, Any]] = None
    timestamp: datetime = Field(default_factory=utcnow)
