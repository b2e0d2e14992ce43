# claimintel/core/config.py
from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import List, Optional


class Settings(BaseSettings):
    # ===================================
    # APPLICATION SETTINGS
    # ===================================
    APP_NAME: str = "ClaimIntel - Claims Intake & Review"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    # ===================================
    # API SETTINGS
    # ===================================
    API_PREFIX: str = "/api/v1"
    ALLOWED_ORIGINS: List[str] = ["*"]

    # ===================================
    # LLM PROVIDER SELECTION
    # ===================================
    LLM_PROVIDER: str = "google"  # Options: "google", "groq", "ollama"
    LLM_TEMPERATURE: float = 0.2
    LLM_MAX_TOKENS: int = 4096

    # ===================================
    # GOOGLE (Primary LLM) - multimodal
    # ===================================
    GOOGLE_API_KEY: Optional[str] = None
    GOOGLE_MODEL: str = "gemini-2.0-flash"

    # ===================================
    # GROQ (text + image only)
    # ===================================
    GROQ_API_KEY: Optional[str] = None
    GROQ_MODEL: str = "meta-llama/llama-4-scout-17b-16e-instruct"

    # ===================================
    # OLLAMA (local)
    # ===================================
    OLLAMA_MODEL: str = "llama3.2-vision"

    # ===================================
    # ATTACHMENTS
    # ===================================
    MAX_DOCUMENT_SIZE_MB: int = 5
    MAX_IMAGE_SIZE_MB: int = 2
    MAX_IMAGES: int = 5
    MAX_VIDEO_SIZE_MB: int = 20

    # ===================================
    # NOTIFICATIONS
    # ===================================
    MAX_NOTIFICATIONS: int = 20

    # ===================================
    # FRAUD RISK BANDS
    # ===================================
    HIGH_RISK_THRESHOLD: float = 0.7
    MEDIUM_RISK_THRESHOLD: float = 0.4

    # ===================================
    # FILE STORAGE
    # ===================================
    DATA_DIR: str = "data"

    # ===================================
    # COMPUTED PROPERTIES
    # ===================================
    @property
    def max_document_size_bytes(self) -> int:
        return self.MAX_DOCUMENT_SIZE_MB * 1024 * 1024

    @property
    def max_image_size_bytes(self) -> int:
        return self.MAX_IMAGE_SIZE_MB * 1024 * 1024

    @property
    def max_video_size_bytes(self) -> int:
        return self.MAX_VIDEO_SIZE_MB * 1024 * 1024

    # ===================================
    # PYDANTIC CONFIG
    # ===================================
    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "allow"  # Allow extra fields from .env


# ===================================
# SINGLETON PATTERN
# ===================================
@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
