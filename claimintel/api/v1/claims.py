# claimintel/api/v1/claims.py
from fastapi import APIRouter, HTTPException, Query, Depends, UploadFile, File, Form
from typing import List, Optional
from pydantic import ValidationError

from claimintel.models.claim import Claim, ClaimCreate, ClaimSummary
from claimintel.models.schemas import (
    ClaimSubmitResponse, ClaimListResponse, ClaimStatusUpdateRequest,
    QuestionRequest, QuestionResponse
)
from claimintel.services.claim_service import ClaimService
from claimintel.core.constants import ClaimStatus
from claimintel.core.config import settings
from claimintel.core.dependencies import get_claim_service
from claimintel.core.exceptions import (
    ClaimNotFoundError, ClaimValidationError, AttachmentTooLargeError
)
from claimintel.utils.data_uri import payload_size, to_data_uri
from claimintel.core.logging import get_logger

logger = get_logger(__name__)
router = APIRouter()

# ===================
# Helpers
# ===================

def check_attachment_limits(form: ClaimCreate):
    """Apply the intake form's size and count limits."""
    if form.document_uri and payload_size(form.document_uri) > settings.max_document_size_bytes:
        raise AttachmentTooLargeError(form.document_name or "document", settings.MAX_DOCUMENT_SIZE_MB)

    image_uris = form.image_uris or []
    if len(image_uris) > settings.MAX_IMAGES:
        raise ClaimValidationError(
            f"You can upload a maximum of {settings.MAX_IMAGES} images.", field="image_uris"
        )
    names = form.image_names or []
    for index, uri in enumerate(image_uris):
        if payload_size(uri) > settings.max_image_size_bytes:
            name = names[index] if index < len(names) else f"image {index + 1}"
            raise AttachmentTooLargeError(name, settings.MAX_IMAGE_SIZE_MB)

    if form.video_uri and payload_size(form.video_uri) > settings.max_video_size_bytes:
        raise AttachmentTooLargeError(form.video_name or "video", settings.MAX_VIDEO_SIZE_MB)


async def read_upload(upload: UploadFile, limit_bytes: int, limit_mb: int) -> str:
    content = await upload.read()
    if len(content) > limit_bytes:
        raise AttachmentTooLargeError(upload.filename or "upload", limit_mb)
    return to_data_uri(content, upload.content_type, upload.filename)


async def _submit(form: ClaimCreate, service: ClaimService) -> ClaimSubmitResponse:
    check_attachment_limits(form)
    claim = await service.submit_claim(form)
    if claim is None:
        raise HTTPException(status_code=500, detail="There was an error submitting the claim.")
    return ClaimSubmitResponse(success=True, message="Claim submitted successfully", claim=claim)

# ===================
# Endpoints
# ===================

@router.post("/", response_model=ClaimSubmitResponse)
async def submit_claim(
    form: ClaimCreate,
    service: ClaimService = Depends(get_claim_service)
):
    """Submit a new claim with inline data-URI attachments."""
    return await _submit(form, service)


@router.post("/upload", response_model=ClaimSubmitResponse)
async def submit_claim_upload(
    claimant_name: str = Form(...),
    policy_number: str = Form(...),
    incident_date: str = Form(...),
    incident_description: str = Form(...),
    document: Optional[UploadFile] = File(None),
    images: Optional[List[UploadFile]] = File(None),
    video: Optional[UploadFile] = File(None),
    service: ClaimService = Depends(get_claim_service)
):
    """Submit a new claim as multipart form data; files become data URIs."""
    if images and len(images) > settings.MAX_IMAGES:
        raise ClaimValidationError(
            f"You can upload a maximum of {settings.MAX_IMAGES} images.", field="images"
        )

    fields = {
        "claimant_name": claimant_name,
        "policy_number": policy_number,
        "incident_date": incident_date,
        "incident_description": incident_description,
    }
    if document is not None and document.filename:
        fields["document_name"] = document.filename
        fields["document_uri"] = await read_upload(
            document, settings.max_document_size_bytes, settings.MAX_DOCUMENT_SIZE_MB
        )
    images = [image for image in images or [] if image.filename]
    if images:
        fields["image_names"] = [image.filename for image in images]
        fields["image_uris"] = [
            await read_upload(image, settings.max_image_size_bytes, settings.MAX_IMAGE_SIZE_MB)
            for image in images
        ]
    if video is not None and video.filename:
        fields["video_name"] = video.filename
        fields["video_uri"] = await read_upload(
            video, settings.max_video_size_bytes, settings.MAX_VIDEO_SIZE_MB
        )

    try:
        form = ClaimCreate(**fields)
    except ValidationError as e:
        detail = [{"loc": err["loc"], "msg": err["msg"], "type": err["type"]} for err in e.errors()]
        raise HTTPException(status_code=422, detail=detail)

    return await _submit(form, service)


@router.get("/", response_model=ClaimListResponse)
async def list_claims(
    skip: int = Query(0, ge=0),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[ClaimStatus] = None,
    policy_number: Optional[str] = None,
    service: ClaimService = Depends(get_claim_service)
):
    """List claims, newest first, with optional filtering."""
    claims, total = service.search_claims(
        status=status, policy_number=policy_number, skip=skip, limit=limit
    )
    return ClaimListResponse(
        total=total,
        skip=skip,
        limit=limit,
        claims=[ClaimSummary.from_claim(c) for c in claims]
    )


@router.get("/{claim_id}", response_model=Claim)
async def get_claim(
    claim_id: str,
    service: ClaimService = Depends(get_claim_service)
):
    """Get complete claim details."""
    claim = service.get_claim_by_id(claim_id)
    if claim is None:
        raise ClaimNotFoundError(claim_id)
    return claim


@router.put("/{claim_id}/status", response_model=Claim)
async def update_claim_status(
    claim_id: str,
    request: ClaimStatusUpdateRequest,
    service: ClaimService = Depends(get_claim_service)
):
    """Update claim status (reviewer action)."""
    claim = service.update_claim_status(claim_id, request.status, request.notes)
    if claim is None:
        raise ClaimNotFoundError(claim_id)
    return claim


@router.post("/{claim_id}/questions", response_model=QuestionResponse)
async def ask_question(
    claim_id: str,
    request: QuestionRequest,
    service: ClaimService = Depends(get_claim_service)
):
    """Ask a free-text question about the claim's supporting document."""
    claim = service.get_claim_by_id(claim_id)
    if claim is None:
        raise ClaimNotFoundError(claim_id)

    answer = await service.ask_question_on_document(claim.document_uri, request.question, claim_id)
    return QuestionResponse(claim_id=claim_id, question=request.question, answer=answer)
