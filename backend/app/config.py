"""
MindScribe Backend — Application Configuration
================================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a module-level `settings` object.
       `create_app()` stores the instance on `app.state` and every client
       receives it through its constructor.
When:  Loaded once at import; required values are checked during app startup
       by `validate_required()`, which aborts startup when any are missing.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Required at startup: GEMINI_API_KEY, FIREBASE_PROJECT_ID,
    FIREBASE_PRIVATE_KEY, FIREBASE_CLIENT_EMAIL. Everything else has a default.
    """

    # ── Google Gemini ─────────────────────────────────────────────────────
    # Used for transcription and summarization only.
    gemini_api_key: str = Field(default="", description="Google Gemini API key")

    # Inline audio goes to the multimodal model; summaries to the text model.
    gemini_transcribe_model: str = Field(default="gemini-1.5-pro")
    gemini_summarize_model: str = Field(default="gemini-pro")

    # ── Google Cloud Text-to-Speech ───────────────────────────────────────
    # Separate credential: the Gemini key is never sent to this endpoint.
    # Empty disables /api/tts (calls fail with a 503 UpstreamError).
    google_tts_api_key: str = Field(default="", description="Cloud Text-to-Speech API key")
    tts_endpoint: str = Field(default="https://texttospeech.googleapis.com/v1/text:synthesize")

    # ── Firebase ──────────────────────────────────────────────────────────
    firebase_project_id: str = Field(default="")
    # Service-account PEM. Literal "\n" sequences (common in .env files)
    # are unescaped by `firebase_private_key_pem`.
    firebase_private_key: str = Field(default="")
    firebase_client_email: str = Field(default="")
    # Empty means the project's default bucket: <project id>.appspot.com
    firebase_storage_bucket: str = Field(default="")
    notes_collection: str = Field(default="notes")

    # ── Uploads ───────────────────────────────────────────────────────────
    # Directory for per-request temporary audio files.
    upload_dir: str = Field(default="./uploads")

    # 10MB = 10 * 1024 * 1024; valid range 1MB to 50MB
    max_upload_size: int = Field(default=10_485_760, ge=1_048_576, le=52_428_800)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Comma-separated origins; "*" allows any.
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000, ge=1, le=65535)

    # "development" adds stack traces to error responses.
    environment: str = Field(default="production")

    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @field_validator("environment")
    @classmethod
    def normalize_environment(cls, v: str) -> str:
        return v.strip().lower()

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def firebase_private_key_pem(self) -> str:
        return self.firebase_private_key.replace("\\n", "\n")

    @property
    def storage_bucket_name(self) -> str:
        if self.firebase_storage_bucket:
            return self.firebase_storage_bucket
        return f"{self.firebase_project_id}.appspot.com"

    def validate_required(self) -> None:
        """
        Checks that every credential the service cannot run without is set.

        Raises:
            ValueError listing each missing environment variable.
        """
        required = {
            "GEMINI_API_KEY": self.gemini_api_key,
            "FIREBASE_PROJECT_ID": self.firebase_project_id,
            "FIREBASE_PRIVATE_KEY": self.firebase_private_key,
            "FIREBASE_CLIENT_EMAIL": self.firebase_client_email,
        }
        missing = [name for name, value in required.items() if not value]
        if missing:
            raise ValueError(
                "Missing required environment variables: " + ", ".join(missing)
            )


# Process-wide default, read by `create_app()` when no Settings is passed in.
settings = Settings()
