"""
StoryCurator Configuration System
=================================

Configuration management with environment variables and Pydantic models.
Environment variables override Field defaults; nested sections use ``__``
(e.g. ``STORYCURATOR_AI__GROQ_API_KEY``).
"""

from pathlib import Path
from typing import Dict, List, Optional
from enum import Enum

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

from ..models.content import ContentCategory
from ..utils.exceptions import ConfigurationError, ErrorCode


class AIProvider(str, Enum):
    """Available AI providers."""
    GROQ = "groq"
    OPENAI = "openai"


class SourceKind(str, Enum):
    """Source adapter kinds."""
    FEED = "feed"
    LISTING = "listing"


class GatewayKind(str, Enum):
    """Messaging gateways."""
    SLACK = "slack"
    TELEGRAM = "telegram"


class LogLevel(str, Enum):
    """Available log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class SourceConfig(BaseModel):
    """One external content source."""
    kind: SourceKind
    url: str = Field(..., min_length=1)
    mapper: str = Field(default="generic", description="Record mapper for listing sources")

    @field_validator("url")
    @classmethod
    def validate_url(cls, v):
        if not v.startswith(("http://", "https://")):
            raise ValueError("source url must be http(s)")
        return v


def _listing(url: str, mapper: str) -> SourceConfig:
    return SourceConfig(kind=SourceKind.LISTING, url=url, mapper=mapper)


def _feed(url: str) -> SourceConfig:
    return SourceConfig(kind=SourceKind.FEED, url=url)


# Listing (API) sources come before feed (RSS) sources: list order is priority.
DEFAULT_SOURCES: Dict[ContentCategory, List[SourceConfig]] = {
    ContentCategory.TECH_NEWS: [
        _listing("https://dev.to/api/articles?top=7", "dev_to"),
        _feed("https://hnrss.org/frontpage"),
        _feed("https://techcrunch.com/feed/"),
        _feed("https://www.theverge.com/rss/index.xml"),
        _feed("https://feeds.feedburner.com/venturebeat/SZYF"),
    ],
    ContentCategory.JOB_LISTINGS: [
        _listing("https://remoteok.io/api", "remote_ok"),
        _feed("https://weworkremotely.com/categories/remote-programming-jobs.rss"),
    ],
    ContentCategory.LEARNING_RESOURCES: [
        _listing("https://dev.to/api/articles?tag=beginners", "dev_to"),
        _feed("https://www.freecodecamp.org/news/rss/"),
        _feed("https://css-tricks.com/feed/"),
        _feed("https://www.smashingmagazine.com/feed/"),
        _feed("https://medium.com/feed/tag/programming"),
    ],
    ContentCategory.CAREER_ADVICE: [
        _feed("https://www.glassdoor.com/blog/feed/"),
        _feed("https://www.themuse.com/rss"),
    ],
}


class SourcesSettings(BaseModel):
    """Content source configuration."""
    categories: Dict[ContentCategory, List[SourceConfig]] = Field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_SOURCES.items()},
        description="Sources per category in priority order",
    )
    request_timeout: float = Field(default=10.0, gt=0, le=120, description="Per-source timeout in seconds")
    user_agent: str = Field(default="Second-Story-Bot/1.0", description="User-Agent for source requests")


class AISettings(BaseModel):
    """AI provider configuration."""
    provider: AIProvider = Field(default=AIProvider.GROQ, description="Provider used for curation")
    groq_api_key: Optional[str] = Field(default=None, description="Groq API key")
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API key")
    openai_base_url: Optional[str] = Field(default=None, description="Alternate OpenAI-compatible endpoint")
    groq_model: str = Field(default="llama-3.3-70b-versatile", description="Groq curation model")
    openai_model: str = Field(default="gpt-4o-mini", description="OpenAI curation model")
    max_tokens: int = Field(default=2000, ge=100, le=8000, description="Token ceiling for one curation call")
    temperature: float = Field(default=0.2, ge=0.0, le=2.0)
    timeout_seconds: float = Field(default=45.0, gt=0, le=300, description="Bound on one curation call")

    def get_api_key(self, provider: Optional[AIProvider] = None) -> Optional[str]:
        provider = provider or self.provider
        if provider == AIProvider.GROQ:
            return self.groq_api_key
        if provider == AIProvider.OPENAI:
            return self.openai_api_key
        return None

    def get_model(self, provider: Optional[AIProvider] = None) -> str:
        provider = provider or self.provider
        if provider == AIProvider.OPENAI:
            return self.openai_model
        return self.groq_model


class PublishingSettings(BaseModel):
    """Publisher configuration."""
    share_limit: int = Field(default=20, ge=1, le=100, description="Items aggregated for scheduled shares")
    interactive_limit: int = Field(default=15, ge=1, le=100, description="Items aggregated for command answers")
    gateway: GatewayKind = Field(default=GatewayKind.SLACK)
    footer_brand: str = Field(default="Second Story AI")


class SlackSettings(BaseModel):
    """Slack Web API configuration."""
    bot_token: Optional[str] = Field(default=None, description="Slack bot token (xoxb-...)")
    api_base_url: str = Field(default="https://slack.com/api")
    timeout: float = Field(default=10.0, gt=0, le=60)

    @field_validator("bot_token")
    @classmethod
    def validate_bot_token(cls, v):
        if v is not None and not v.startswith("xox"):
            raise ValueError("Invalid Slack bot token format")
        return v


class TelegramSettings(BaseModel):
    """Telegram bot configuration."""
    bot_token: Optional[str] = Field(default=None, description="Telegram bot token")


class LedgerSettings(BaseModel):
    """Posting ledger configuration."""
    enabled: bool = Field(default=True, description="Skip items already shared to a channel")
    path: str = Field(default="data/storycurator.db", description="SQLite database file path")


class LoggingSettings(BaseModel):
    """Logging configuration."""
    level: LogLevel = Field(default=LogLevel.INFO, description="Global log level")
    file_path: Optional[str] = Field(default="logs/storycurator.log", description="Log file path")
    structured_logging: bool = Field(default=False, description="Use structured JSON logging")
    console_logging: bool = Field(default=True, description="Enable console logging")


class StoryCuratorSettings(BaseSettings):
    """Main application settings."""

    sources: SourcesSettings = Field(default_factory=SourcesSettings)
    ai: AISettings = Field(default_factory=AISettings)
    publishing: PublishingSettings = Field(default_factory=PublishingSettings)
    slack: SlackSettings = Field(default_factory=SlackSettings)
    telegram: TelegramSettings = Field(default_factory=TelegramSettings)
    ledger: LedgerSettings = Field(default_factory=LedgerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    app_name: str = Field(default="StoryCurator")
    debug: bool = Field(default=False, description="Enable debug mode")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "env_nested_delimiter": "__",
        "env_prefix": "STORYCURATOR_",
        "extra": "ignore",
    }

    def validate_configuration(self) -> None:
        """Validate cross-section configuration.

        A missing AI key is not an error: curation then always takes the
        deterministic fallback. A missing gateway token is.
        """
        errors = []

        gateway = self.publishing.gateway
        if gateway == GatewayKind.SLACK and not self.slack.bot_token:
            errors.append("Missing Slack bot token for slack gateway")
        if gateway == GatewayKind.TELEGRAM and not self.telegram.bot_token:
            errors.append("Missing Telegram bot token for telegram gateway")

        if self.ledger.enabled:
            try:
                Path(self.ledger.path).parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                errors.append(f"Invalid ledger path: {e}")

        if self.logging.file_path:
            try:
                Path(self.logging.file_path).parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                errors.append(f"Invalid log file path: {e}")

        if errors:
            raise ConfigurationError(
                f"Configuration validation failed: {'; '.join(errors)}",
                error_code=ErrorCode.CONFIG_INVALID,
            )

    def get_effective_log_level(self) -> str:
        if self.debug:
            return "DEBUG"
        return self.logging.level.value


def load_settings(validate: bool = True) -> StoryCuratorSettings:
    """Load settings from environment variables, ``.env`` and defaults.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    from dotenv import load_dotenv
    load_dotenv()

    try:
        settings = StoryCuratorSettings()
        if validate:
            settings.validate_configuration()
        return settings

    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(
            f"Failed to initialize settings: {e}",
            error_code=ErrorCode.CONFIG_INVALID,
        ) from e


_settings: Optional[StoryCuratorSettings] = None


def get_settings(reload: bool = False) -> StoryCuratorSettings:
    """Get the process-wide settings instance.

    Only the CLI and the wiring in ``pipeline.py`` call this; pipeline
    components receive their configuration explicitly.
    """
    global _settings

    if _settings is None or reload:
        _settings = load_settings()

    return _settings
