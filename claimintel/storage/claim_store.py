# claimintel/storage/claim_store.py
"""Claim storage implementation."""

from typing import Dict, Any, Optional, List

from claimintel.storage.base import BaseStore
from claimintel.models.claim import Claim
from claimintel.core.constants import ClaimStatus
from claimintel.core.config import settings
from claimintel.core.logging import get_logger

logger = get_logger(__name__)


class ClaimStore(BaseStore[Claim]):
    """Storage for the `claims` collection."""

    timestamp_fields = ("submission_date", "last_updated_date")

    def __init__(self, data_dir: Optional[str] = None):
        super().__init__(
            data_dir=data_dir or settings.DATA_DIR,
            collection="claims"
        )

    def _get_id(self, entity: Claim) -> str:
        return entity.id

    def _serialize(self, entity: Claim) -> Dict[str, Any]:
        """Serialize Claim to dict."""
        return entity.model_dump(mode='json')

    def _deserialize(self, data: Dict[str, Any]) -> Claim:
        """Deserialize dict to Claim."""
        return Claim.model_validate(data)

    # Custom query methods
    def find_by_id(self, claim_id: str) -> Optional[Claim]:
        """Find a claim by id; None when unknown."""
        return self.get(claim_id)

    def list_by_submission_date(self, limit: Optional[int] = None) -> List[Claim]:
        """Claims ordered newest submission first."""
        return self.list_ordered("submission_date", descending=True, limit=limit)

    def search(
        self,
        status: Optional[ClaimStatus] = None,
        policy_number: Optional[str] = None,
        skip: int = 0,
        limit: int = 10
    ) -> tuple[List[Claim], int]:
        """Search claims with optional filters and pagination."""
        results = self.list_by_submission_date()

        if status:
            results = [c for c in results if c.status == status]

        if policy_number:
            results = [c for c in results if c.policy_number == policy_number]

        total = len(results)
        return results[skip:skip + limit], total
