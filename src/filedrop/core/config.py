"""Configuration management for filedrop."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from filedrop.services.uploader.policy import DEFAULT_ALLOWED_MIME_TYPES, UploadPolicy
from filedrop.storage.base import StoreConfig

REQUIRED_STORE_ENV_VARS = [
    "R2_ACCOUNT_ID",
    "R2_ACCESS_KEY_ID",
    "R2_SECRET_ACCESS_KEY",
    "R2_BUCKET_NAME",
    "R2_CUSTOM_DOMAIN",
]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    ENV: str = "local"
    SERVICE_NAME: str = "filedrop"
    SERVICE_VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"

    # Storage Configuration
    STORAGE_BACKEND: str = "r2"  # "r2" or "memory"
    R2_ACCOUNT_ID: str = ""
    R2_ACCESS_KEY_ID: str = ""
    R2_SECRET_ACCESS_KEY: str = ""
    R2_BUCKET_NAME: str = ""
    R2_CUSTOM_DOMAIN: str = ""
    R2_ENDPOINT_URL: str = ""  # Overrides the R2 endpoint for other S3-compatible stores

    # Upload Constraints
    MAX_UPLOAD_MB: int = 5
    ALLOWED_UPLOAD_MIME_TYPES: str = ",".join(DEFAULT_ALLOWED_MIME_TYPES)

    # Image compression
    IMAGE_QUALITY: int = 70

    # Orchestration
    UPLOAD_CONCURRENCY: int = 4
    UNCONFIGURED_STORE_MODE: str = "metadata_only"  # "metadata_only" or "reject"

    @property
    def allowed_mime_types(self) -> list[str]:
        """Parse ALLOWED_UPLOAD_MIME_TYPES into a list."""
        return [mt.strip() for mt in self.ALLOWED_UPLOAD_MIME_TYPES.split(",") if mt.strip()]

    @property
    def max_upload_bytes(self) -> int:
        """Convert MAX_UPLOAD_MB to bytes."""
        return self.MAX_UPLOAD_MB * 1024 * 1024

    def store_config(self) -> StoreConfig:
        """Snapshot the object store settings as an immutable value."""
        return StoreConfig(
            account_id=self.R2_ACCOUNT_ID or None,
            access_key_id=self.R2_ACCESS_KEY_ID or None,
            secret_access_key=self.R2_SECRET_ACCESS_KEY or None,
            bucket_name=self.R2_BUCKET_NAME or None,
            custom_domain=self.R2_CUSTOM_DOMAIN or None,
            endpoint_url=self.R2_ENDPOINT_URL or None,
        )

    def upload_policy(self) -> UploadPolicy:
        """Build the validation policy from the upload constraints."""
        return UploadPolicy(
            max_file_size_bytes=self.max_upload_bytes,
            allowed_mime_types=frozenset(self.allowed_mime_types),
        )


# Singleton settings instance
settings = Settings()
