from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database settings
    DATABASE_URL: str

    # JWT settings
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 30

    # Blob store settings
    BLOB_STORE_BACKEND: str = "s3"  # s3 (S3-compatible endpoints included)
    S3_BUCKET_NAME: str = "filebox"
    S3_REGION: str = "us-east-1"
    S3_ENDPOINT_URL: str | None = None  # MinIO / localstack etc.
    S3_PUBLIC_BASE_URL: str | None = None  # CDN in front of the bucket
    AWS_ACCESS_KEY_ID: str | None = None
    AWS_SECRET_ACCESS_KEY: str | None = None

    # Upload staging settings
    UPLOAD_STAGING_DIR: str = "uploads"
    MAX_UPLOAD_SIZE_MB: int = 10
    ALLOWED_UPLOAD_CONTENT_TYPES: list[str] = [
        "image/jpeg",
        "image/png",
        "image/gif",
        "application/pdf",
        "text/plain",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ]
    STAGED_FILE_MAX_AGE_MINUTES: int = 60

    # Listing settings
    DEFAULT_PAGE_LIMIT: int = 50
    MAX_PAGE_LIMIT: int = 100

    # "env_file": read variables from .env as well as the process environment
    # "extra": "ignore": unknown keys in .env are skipped
    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
