# claimintel/services/dashboard_service.py
"""Aggregates for the dashboard and the admin AI report view."""

from typing import Any, Dict, List, Optional

from claimintel.models.claim import Claim
from claimintel.services.claim_service import ClaimService
from claimintel.services.notification_service import NotificationService
from claimintel.core.constants import ClaimStatus, RiskLevel, RECENT_CLAIMS_LIMIT
from claimintel.core.config import settings


def risk_level(risk_score: Optional[float]) -> RiskLevel:
    """Band a fraud risk score."""
    if risk_score is None:
        return RiskLevel.NOT_AVAILABLE
    if risk_score >= settings.HIGH_RISK_THRESHOLD:
        return RiskLevel.HIGH
    if risk_score >= settings.MEDIUM_RISK_THRESHOLD:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


class DashboardService:

    def __init__(self, claims: ClaimService, notifications: NotificationService):
        self.claims = claims
        self.notifications = notifications

    def get_statistics(self) -> Dict[str, Any]:
        all_claims = self.claims.list_claims()

        by_status = {status.value: 0 for status in ClaimStatus}
        for claim in all_claims:
            by_status[claim.status.value] += 1

        scores = [c.risk_score for c in all_claims if c.risk_score is not None]

        return {
            "total_claims": len(all_claims),
            "approved_claims": by_status[ClaimStatus.APPROVED.value],
            "pending_claims": sum(by_status[s.value] for s in ClaimStatus.open_statuses()),
            "high_risk_claims": sum(1 for s in scores if risk_level(s) == RiskLevel.HIGH),
            "average_risk_score": round(sum(scores) / len(scores), 2) if scores else 0.0,
            "by_status": by_status,
            "unread_notifications": self.notifications.unread_count(),
        }

    def recent_claims(self, limit: int = RECENT_CLAIMS_LIMIT) -> List[Claim]:
        return self.claims.list_claims()[:limit]

    def admin_reports(self) -> List[Dict[str, Any]]:
        """Per-claim AI output for review."""
        reports = []
        for claim in self.claims.list_claims():
            reports.append({
                "claim_id": claim.id,
                "claimant_name": claim.claimant_name,
                "status": claim.status,
                "risk_level": risk_level(claim.risk_score),
                "fraud_assessment": claim.fraud_assessment,
                "extracted_info": claim.extracted_info,
                "consistency_report": claim.consistency_report,
            })
        return reports
