# claimintel/core/dependencies.py
from typing import Optional

from fastapi import Request

from claimintel.core.config import settings
from claimintel.core.logging import get_logger

logger = get_logger(__name__)

# ===================
# Service Container
# ===================

class Services:
    """Every long-lived service, built once per application."""

    def __init__(
        self,
        data_dir: Optional[str] = None,
        llm=None,
        extractor=None,
        fraud_assessor=None,
        document_qa=None,
        consistency_checker=None
    ):
        from claimintel.ai.llm import LLMService
        from claimintel.ai.document_extraction import DocumentExtractor
        from claimintel.ai.fraud_assessment import FraudAssessor
        from claimintel.ai.document_qa import DocumentQA
        from claimintel.ai.intake import ClaimIntakeWorkflow
        from claimintel.services.consistency import SimulatedConsistencyChecker
        from claimintel.services.claim_service import ClaimService
        from claimintel.services.notification_service import NotificationService
        from claimintel.services.dashboard_service import DashboardService
        from claimintel.storage.claim_store import ClaimStore
        from claimintel.storage.notification_store import NotificationStore

        data_dir = data_dir or settings.DATA_DIR

        if llm is None and None in (extractor, fraud_assessor, document_qa):
            llm = LLMService()

        self.llm = llm
        self.notifications = NotificationService(NotificationStore(data_dir))
        self.intake = ClaimIntakeWorkflow(
            extractor=extractor or DocumentExtractor(llm),
            fraud_assessor=fraud_assessor or FraudAssessor(llm),
            consistency_checker=consistency_checker or SimulatedConsistencyChecker(),
            notifications=self.notifications
        )
        self.claims = ClaimService(
            store=ClaimStore(data_dir),
            notifications=self.notifications,
            intake=self.intake,
            document_qa=document_qa or DocumentQA(llm)
        )
        self.dashboard = DashboardService(self.claims, self.notifications)
        logger.info("Services initialized", data_dir=data_dir)

# ===================
# Request Dependencies
# ===================

def get_services(request: Request) -> Services:
    return request.app.state.services


def get_claim_service(request: Request):
    """Claim service for the current application."""
    return get_services(request).claims


def get_notification_service(request: Request):
    """Notification service for the current application."""
    return get_services(request).notifications


def get_dashboard_service(request: Request):
    """Dashboard service for the current application."""
    return get_services(request).dashboard
