# claimintel/core/exceptions.py
"""Custom exceptions for ClaimIntel application."""

from typing import Optional, Dict, Any


class ClaimIntelException(Exception):
    """Base exception for all ClaimIntel errors."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        error_code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }


# ===================
# Claim Exceptions
# ===================

class ClaimException(ClaimIntelException):
    """Base exception for claim-related errors."""
    pass


class ClaimNotFoundError(ClaimException):
    """Claim not found in storage."""

    status_code = 404

    def __init__(self, claim_id: str):
        super().__init__(
            message=f"Claim not found: {claim_id}",
            error_code="CLAIM_NOT_FOUND",
            details={"claim_id": claim_id}
        )


class ClaimValidationError(ClaimException):
    """Submitted claim data failed validation."""

    status_code = 422

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message=f"Claim validation failed: {message}",
            error_code="CLAIM_VALIDATION_ERROR",
            details={"field": field} if field else {}
        )


class AttachmentTooLargeError(ClaimException):
    """Attachment exceeds the configured size limit."""

    status_code = 413

    def __init__(self, filename: str, limit_mb: int):
        super().__init__(
            message=f"Attachment too large: {filename} (max {limit_mb}MB)",
            error_code="ATTACHMENT_TOO_LARGE",
            details={"filename": filename, "limit_mb": limit_mb}
        )


# ===================
# Notification Exceptions
# ===================

class NotificationNotFoundError(ClaimIntelException):
    """Notification not found."""

    status_code = 404

    def __init__(self, notification_id: str):
        super().__init__(
            message=f"Notification not found: {notification_id}",
            error_code="NOTIFICATION_NOT_FOUND",
            details={"notification_id": notification_id}
        )


# ===================
# AI/LLM Exceptions
# ===================

class AIException(ClaimIntelException):
    """Base exception for AI-related errors."""

    status_code = 502


class LLMConnectionError(AIException):
    """Cannot connect to LLM provider."""

    def __init__(self, provider: str, message: str):
        super().__init__(
            message=f"LLM connection failed ({provider}): {message}",
            error_code="LLM_CONNECTION_ERROR",
            details={"provider": provider}
        )


class ExtractionError(AIException):
    """Error during document extraction."""

    def __init__(self, message: str, document_name: Optional[str] = None):
        super().__init__(
            message=f"Extraction failed: {message}",
            error_code="EXTRACTION_ERROR",
            details={"document_name": document_name} if document_name else {}
        )


class FraudAssessmentError(AIException):
    """Error during fraud risk assessment."""

    def __init__(self, message: str):
        super().__init__(
            message=f"Fraud assessment failed: {message}",
            error_code="FRAUD_ASSESSMENT_ERROR"
        )


class DocumentQuestionError(AIException):
    """Error while answering a question about a document."""

    def __init__(self, message: str):
        super().__init__(
            message=f"Document Q&A failed: {message}",
            error_code="DOCUMENT_QA_ERROR"
        )


# ===================
# Storage Exceptions
# ===================

class StorageException(ClaimIntelException):
    """Base exception for storage-related errors."""
    pass


class PersistenceError(StorageException):
    """Cannot write to the document store."""

    def __init__(self, collection: str, message: str):
        super().__init__(
            message=f"Failed to persist to {collection}: {message}",
            error_code="PERSISTENCE_ERROR",
            details={"collection": collection}
        )
