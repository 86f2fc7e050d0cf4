"""
Settings for the PubChem gateway.

Environment variables (prefix PUBCHEM_):
- PUBCHEM_BASE_URL: PubChem PUG REST base URL
- PUBCHEM_TIMEOUT_SECONDS: Per-call timeout (seconds)
- PUBCHEM_RATE_LIMIT_CALLS: Calls allowed per rate limit window
- PUBCHEM_RATE_LIMIT_PERIOD_SECONDS: Rate limit window length (seconds)
- PUBCHEM_USER_AGENT: User-Agent header sent upstream
- PUBCHEM_XREF_DEFAULT_PAGE_SIZE: Default page size for cross-reference pages
- PUBCHEM_LOG_REQUESTS: Emit a debug event for every outbound request
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GatewaySettings(BaseSettings):
    """Settings for the outbound PubChem gateway."""

    model_config = SettingsConfigDict(
        env_prefix="PUBCHEM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Upstream
    # ==========================================================================

    base_url: str = Field(
        default="https://pubchem.ncbi.nlm.nih.gov/rest/pug",
        description="PubChem PUG REST API base URL",
    )
    user_agent: str = Field(
        default="pubchem-gateway/0.1.0",
        description="User-Agent header sent with every request",
    )
    status_message_header: str = Field(
        default="PUBCHEM-PUG-STATUS-MESSAGE",
        description="Response header carrying PubChem's status message",
    )

    # ==========================================================================
    # HTTP Client Settings
    # ==========================================================================

    timeout_seconds: float = Field(
        default=30.0,
        description="Total timeout for a single upstream call in seconds",
        gt=0,
        le=300,
    )
    error_body_max_chars: int = Field(
        default=500,
        description="Maximum characters of an error body kept for diagnostics",
        ge=0,
    )

    # ==========================================================================
    # Rate Limiting
    # ==========================================================================

    rate_limit_calls: int = Field(
        default=5,
        description="Calls permitted per window (PubChem allows 5 req/sec)",
        ge=1,
    )
    rate_limit_period_seconds: float = Field(
        default=1.0,
        description="Length of the rolling rate limit window in seconds",
        gt=0,
    )

    # ==========================================================================
    # Aggregation
    # ==========================================================================

    xref_default_page_size: int = Field(
        default=50,
        description="Cross-reference groups per page when the caller gives none",
        ge=1,
    )

    # ==========================================================================
    # Logging
    # ==========================================================================

    log_requests: bool = Field(
        default=True,
        description="Emit a debug event before every upstream request",
    )


@lru_cache
def get_settings() -> GatewaySettings:
    """Get cached settings instance."""
    return GatewaySettings()
