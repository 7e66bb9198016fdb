"""
StudyFlow - Application Configuration

This module provides centralized configuration management using Pydantic Settings
with environment variable support and validation.
"""

from typing import List, Optional

from dotenv import load_dotenv
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..models.enums import Environment, LogLevel, QuestionType

# Nested settings read prefixed variables from the process environment
load_dotenv()


class LLMSettings(BaseSettings):
    """Text-completion service settings."""

    model_config = SettingsConfigDict(env_prefix="LLM_")

    gemini_api_key: Optional[str] = Field(default=None, description="Gemini API key")
    gemini_api_base: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta/models",
        description="Gemini API base URL"
    )
    gemini_model: str = Field(default="gemini-2.0-flash", description="Gemini model name")

    # Timeouts (in seconds)
    request_timeout: float = Field(default=30.0, ge=1.0, le=300.0, description="Primary request timeout")
    short_request_timeout: float = Field(default=25.0, ge=1.0, le=300.0, description="Secondary request timeout")

    @property
    def gemini_api_url(self) -> str:
        """Full generateContent endpoint for the configured model."""
        return f"{self.gemini_api_base.rstrip('/')}/{self.gemini_model}:generateContent"

    @property
    def is_configured(self) -> bool:
        return bool(self.gemini_api_key)


class GenerationSettings(BaseSettings):
    """Question generation configuration settings."""

    model_config = SettingsConfigDict(env_prefix="GENERATION_")

    # Request limits
    default_max_questions: int = Field(default=5, ge=1, le=50, description="Default number of questions")
    max_questions_limit: int = Field(default=50, ge=1, le=200, description="Maximum questions per request")

    # Quality thresholds
    min_educational_value: float = Field(default=5.0, ge=0.0, le=10.0, description="Validation threshold")
    max_issues: int = Field(default=2, ge=0, le=10, description="Maximum issues for a valid question")

    # Prompt construction
    prompt_content_limit: int = Field(default=2000, ge=200, le=20000, description="Characters of content sent to the model")
    default_question_types: List[QuestionType] = Field(
        default=[
            QuestionType.MULTIPLE_CHOICE,
            QuestionType.TRUE_FALSE,
            QuestionType.FILL_IN_BLANK,
            QuestionType.SHORT_ANSWER,
        ],
        description="Question types used when a request does not specify any"
    )

    @model_validator(mode="after")
    def validate_default_max_questions(self) -> "GenerationSettings":
        if self.default_max_questions > self.max_questions_limit:
            raise ValueError("default_max_questions cannot exceed max_questions_limit")
        return self


class SecuritySettings(BaseSettings):
    """HTTP API security settings."""

    model_config = SettingsConfigDict(env_prefix="SECURITY_")

    cors_origins: List[str] = Field(
        default=["http://localhost:3000"],
        description="CORS allowed origins"
    )
    cors_allow_credentials: bool = Field(default=True, description="Allow CORS credentials")
    cors_allow_methods: List[str] = Field(default=["*"], description="CORS allowed methods")
    cors_allow_headers: List[str] = Field(default=["*"], description="CORS allowed headers")


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format string"
    )


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_assignment=True,
        extra="ignore",
    )

    # Application information
    app_name: str = Field(default="StudyFlow Question Engine", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    debug: bool = Field(default=False, description="Debug mode")
    environment: Environment = Field(default=Environment.DEVELOPMENT, description="Application environment")

    # Server configuration
    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=8000, ge=1024, le=65535, description="Server port")

    # Nested settings
    llm: LLMSettings = Field(default_factory=LLMSettings)
    generation: GenerationSettings = Field(default_factory=GenerationSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == Environment.PRODUCTION

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.environment == Environment.TESTING


# Global settings instance
settings = Settings()
