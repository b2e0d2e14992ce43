# claimintel/core/constants.py
"""Application constants and enums."""

from enum import Enum
from typing import List


# ===================
# Claim Constants
# ===================

class ClaimStatus(str, Enum):
    PENDING = "Pending"
    UNDER_REVIEW = "Under Review"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    INFORMATION_REQUESTED = "Information Requested"

    @classmethod
    def values(cls) -> List[str]:
        return [e.value for e in cls]

    @classmethod
    def open_statuses(cls) -> List["ClaimStatus"]:
        """Statuses counted as pending on the dashboard."""
        return [cls.PENDING, cls.UNDER_REVIEW]


class ConsistencyStatus(str, Enum):
    NOT_RUN = "Not Run"
    CONSISTENT = "Consistent"
    INCONSISTENT = "Inconsistent"
    PARTIAL = "Partial"


class ConsistencyFinding(str, Enum):
    MATCH = "Match"
    MISMATCH = "Mismatch"
    MISSING_IN_A = "Missing in A"
    MISSING_IN_B = "Missing in B"
    NOT_COMPARED = "Not Compared"


class RiskLevel(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    NOT_AVAILABLE = "N/A"


# ===================
# Notification Constants
# ===================

class NotificationType(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


# ===================
# Document Constants
# ===================

class DocumentType(str, Enum):
    PDF = "PDF Document"
    IMAGE = "Image"
    ZIP = "ZIP Archive"
    GENERAL = "General Document"


IMAGE_EXTENSIONS = (".jpeg", ".jpg", ".png", ".gif", ".webp")

# Sentinel key stored in extracted_info when the model output is not valid JSON
PARSING_ERROR_KEY = "parsingError"
PARSING_ERROR_MESSAGE = "Failed to parse AI response for extracted information."

# ===================
# Intake Validation
# ===================

MIN_CLAIMANT_NAME_LENGTH = 2
MIN_POLICY_NUMBER_LENGTH = 5
MIN_DESCRIPTION_LENGTH = 10

# Fields the simulated consistency check may compare
CONSISTENCY_FIELDS = ["Incident Date", "Policy Number", "Claimant Name"]

RECENT_CLAIMS_LIMIT = 5
