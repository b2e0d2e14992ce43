# claimintel/services/consistency.py
"""Placeholder cross-document consistency check.

No real comparison is performed: the outcome is a coin flip over one
randomly chosen field. The random source is injectable so tests can pin it.
"""

import random
from typing import Optional

from claimintel.models.claim import (
    ClaimCreate, ConsistencyDetail, ConsistencyReport
)
from claimintel.core.constants import (
    ConsistencyStatus, ConsistencyFinding, CONSISTENCY_FIELDS
)
from claimintel.core.logging import get_logger

logger = get_logger(__name__)

CLAIM_FORM_LABEL = "Claim Form"


class SimulatedConsistencyChecker:
    """Fabricate a consistency report for a submitted claim."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    @staticmethod
    def _form_value(form: ClaimCreate, field: str) -> str:
        return {
            "Incident Date": form.incident_date,
            "Policy Number": form.policy_number,
            "Claimant Name": form.claimant_name,
        }[field]

    def _mismatch(self, value: str) -> str:
        suffix = self.rng.randint(1, 9)
        return f"{value}-{suffix}" if value else f"unknown-{suffix}"

    def run(self, form: ClaimCreate) -> ConsistencyReport:
        consistent = self.rng.random() > 0.4
        field = self.rng.choice(CONSISTENCY_FIELDS)
        value_a = self._form_value(form, field)
        value_b = value_a if consistent else self._mismatch(value_a)
        document_b = form.document_name or "Supporting Document"

        if consistent:
            status = ConsistencyStatus.CONSISTENT
            summary = f"{field} matches between the claim form and {document_b}."
        else:
            status = ConsistencyStatus.INCONSISTENT
            summary = f"{field} differs between the claim form and {document_b}."

        logger.debug(f"Simulated consistency check: {status.value}", field=field)
        return ConsistencyReport(
            status=status,
            summary=summary,
            details=[ConsistencyDetail(
                document_a=CLAIM_FORM_LABEL,
                document_b=document_b,
                field=field,
                value_a=value_a,
                value_b=value_b,
                finding=ConsistencyFinding.MATCH if consistent else ConsistencyFinding.MISMATCH
            )]
        )
