# claimintel/models/base.py
"""Base models for all entities."""

from pydantic import BaseModel, Field
from datetime import datetime, timezone
import itertools
import time
import uuid

_id_counter = itertools.count(1)


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def generate_id(prefix: str = "") -> str:
    """Generate a unique ID: epoch millis, a per-process counter and a random suffix."""
    unique_part = f"{int(time.time() * 1000)}_{next(_id_counter)}_{uuid.uuid4().hex[:8]}"
    return f"{prefix}_{unique_part}" if prefix else unique_part


class TimestampMixin(BaseModel):
    """Mixin for submission/update timestamps."""
    submission_date: datetime = Field(default_factory=utcnow)
    last_updated_date: datetime = Field(default_factory=utcnow)
