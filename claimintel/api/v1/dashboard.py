# claimintel/api/v1/dashboard.py
from fastapi import APIRouter, Query, Depends

from claimintel.models.claim import ClaimSummary
from claimintel.models.schemas import DashboardStats, RecentClaimsResponse
from claimintel.services.dashboard_service import DashboardService
from claimintel.core.constants import RECENT_CLAIMS_LIMIT
from claimintel.core.dependencies import get_dashboard_service

router = APIRouter()

# ===================
# Endpoints
# ===================

@router.get("/stats", response_model=DashboardStats)
async def get_dashboard_stats(
    service: DashboardService = Depends(get_dashboard_service)
):
    """
    Get dashboard statistics.
    Returns claim counts by status, high-risk count and average risk score.
    """
    return DashboardStats(**service.get_statistics())


@router.get("/recent-claims", response_model=RecentClaimsResponse)
async def get_recent_claims(
    limit: int = Query(RECENT_CLAIMS_LIMIT, ge=1, le=20, description="Number of claims to return"),
    service: DashboardService = Depends(get_dashboard_service)
):
    """
    Get list of recent claims for dashboard display.
    """
    claims = service.recent_claims(limit)
    return RecentClaimsResponse(claims=[ClaimSummary.from_claim(c) for c in claims])
