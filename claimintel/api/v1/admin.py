# claimintel/api/v1/admin.py
from fastapi import APIRouter, Depends

from claimintel.models.schemas import AdminReportItem, AdminReportResponse, HealthResponse
from claimintel.services.dashboard_service import DashboardService
from claimintel.core.config import settings
from claimintel.core.dependencies import Services, get_services, get_dashboard_service
from claimintel.core.logging import get_logger

logger = get_logger(__name__)
router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(services: Services = Depends(get_services)):
    """Detailed health check."""
    return HealthResponse(
        status="healthy",
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        llm_provider=settings.LLM_PROVIDER,
        details={
            "debug_mode": settings.DEBUG,
            "claims_count": len(services.claims.list_claims()),
            "notifications_count": len(services.notifications.list_notifications()),
        }
    )


@router.get("/reports", response_model=AdminReportResponse)
async def get_ai_reports(service: DashboardService = Depends(get_dashboard_service)):
    """Per-claim AI output: extraction, fraud assessment and consistency."""
    reports = [AdminReportItem(**item) for item in service.admin_reports()]
    logger.debug(f"Built {len(reports)} admin reports")
    return AdminReportResponse(total=len(reports), reports=reports)
