# claimintel/models/claim.py
from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator
from typing import Optional, List, Dict, Any, Union
from datetime import date, datetime

from claimintel.models.base import TimestampMixin
from claimintel.core.constants import (
    ClaimStatus, ConsistencyStatus, ConsistencyFinding,
    MIN_CLAIMANT_NAME_LENGTH, MIN_POLICY_NUMBER_LENGTH, MIN_DESCRIPTION_LENGTH
)

# ===================
# AI-Derived Models
# ===================

class BoundingBox(BaseModel):
    """Location of an extracted value, normalized to the page size."""
    x: float = Field(ge=0, le=1)
    y: float = Field(ge=0, le=1)
    width: float = Field(ge=0, le=1)
    height: float = Field(ge=0, le=1)
    page: int = Field(default=1, ge=1)


class ExtractedField(BaseModel):
    """Single extracted value with an optional bounding box."""
    value: Union[str, Dict[str, Any]]
    bounding_box: Optional[BoundingBox] = Field(
        default=None,
        validation_alias=AliasChoices("bounding_box", "boundingBox")
    )


class FraudAssessment(BaseModel):
    """Fraud risk assessment returned by the model."""
    risk_score: float = Field(ge=0, le=1, validation_alias=AliasChoices("risk_score", "riskScore"))
    fraud_indicators: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("fraud_indicators", "fraudIndicators")
    )
    summary: str = ""

    @field_validator("risk_score", mode="before")
    @classmethod
    def clamp_risk_score(cls, value):
        try:
            score = float(value)
        except TypeError:
            raise ValueError("risk_score must be a number")
        return min(max(score, 0.0), 1.0)


class ConsistencyDetail(BaseModel):
    """One field compared between two documents."""
    document_a: str
    document_b: str
    field: str
    value_a: str
    value_b: str
    finding: ConsistencyFinding


class ConsistencyReport(BaseModel):
    """Cross-document consistency summary."""
    status: ConsistencyStatus = ConsistencyStatus.NOT_RUN
    summary: str = ""
    details: Optional[List[ConsistencyDetail]] = None

# ===================
# Main Claim Models
# ===================

class ClaimBase(BaseModel):
    """Descriptive claim information supplied by the submitter."""
    claimant_name: str
    policy_number: str
    incident_date: str
    incident_description: str


class ClaimAttachments(BaseModel):
    """Inline data-URI attachments."""
    document_name: Optional[str] = None
    document_uri: Optional[str] = None
    image_names: Optional[List[str]] = None
    image_uris: Optional[List[str]] = None
    video_name: Optional[str] = None
    video_uri: Optional[str] = None


class ClaimCreate(ClaimBase, ClaimAttachments):
    """Data collected by the intake form."""

    @field_validator("claimant_name")
    @classmethod
    def check_claimant_name(cls, value: str) -> str:
        value = value.strip()
        if len(value) < MIN_CLAIMANT_NAME_LENGTH:
            raise ValueError(
                f"Claimant name must be at least {MIN_CLAIMANT_NAME_LENGTH} characters."
            )
        return value

    @field_validator("policy_number")
    @classmethod
    def check_policy_number(cls, value: str) -> str:
        value = value.strip()
        if len(value) < MIN_POLICY_NUMBER_LENGTH:
            raise ValueError(
                f"Policy number must be at least {MIN_POLICY_NUMBER_LENGTH} characters."
            )
        return value

    @field_validator("incident_date")
    @classmethod
    def check_incident_date(cls, value: str) -> str:
        value = value.strip()
        try:
            date.fromisoformat(value)
        except ValueError:
            try:
                datetime.fromisoformat(value[:-1] + "+00:00" if value.endswith("Z") else value)
            except ValueError:
                raise ValueError("Invalid date format.")
        return value

    @field_validator("incident_description")
    @classmethod
    def check_description(cls, value: str) -> str:
        if len(value.strip()) < MIN_DESCRIPTION_LENGTH:
            raise ValueError(
                f"Description must be at least {MIN_DESCRIPTION_LENGTH} characters."
            )
        return value

    @model_validator(mode="after")
    def check_image_names(self):
        if self.image_uris and self.image_names and len(self.image_names) != len(self.image_uris):
            raise ValueError("image_names and image_uris must have the same length.")
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "claimant_name": "Jane Doe",
                "policy_number": "POL-12345",
                "incident_date": "2024-03-02",
                "incident_description": "Rear-ended at a traffic light, bumper and tail light damaged.",
                "document_name": "police_report.pdf",
                "document_uri": "data:application/pdf;base64,JVBERi0xLjQK..."
            }
        }


class Claim(TimestampMixin, ClaimAttachments, ClaimBase):
    """Complete claim with AI-derived assessments."""
    id: str
    status: ClaimStatus = ClaimStatus.PENDING
    notes: Optional[str] = None

    extracted_info: Optional[Dict[str, ExtractedField]] = None
    fraud_assessment: Optional[FraudAssessment] = None
    consistency_report: Optional[ConsistencyReport] = None

    @property
    def risk_score(self) -> Optional[float]:
        return self.fraud_assessment.risk_score if self.fraud_assessment else None


class ClaimSummary(BaseModel):
    """Brief claim summary for listings."""
    id: str
    claimant_name: str
    policy_number: str
    incident_date: str
    status: ClaimStatus
    submission_date: datetime
    risk_score: Optional[float] = None

    @classmethod
    def from_claim(cls, claim: Claim) -> "ClaimSummary":
        return cls(
            id=claim.id,
            claimant_name=claim.claimant_name,
            policy_number=claim.policy_number,
            incident_date=claim.incident_date,
            status=claim.status,
            submission_date=claim.submission_date,
            risk_score=claim.risk_score
        )
