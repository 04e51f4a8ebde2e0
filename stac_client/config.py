# ============================================================================
# MODULE CONTEXT - STAC CLIENT CONFIGURATION
# ============================================================================
# STATUS: Configuration - STAC client defaults
# PURPOSE: Environment-based defaults for transport and capability negotiation
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: STACClientConfig, get_client_config
# DEPENDENCIES: pydantic-settings, pydantic
# SOURCE: Environment variables (STAC_CLIENT_*), optional .env file
# PATTERNS: Settings Pattern, Singleton via cached function
# ============================================================================

"""
STAC Client Configuration

Environment Variables:
    Optional:
    - STAC_CLIENT_TIMEOUT: HTTP timeout in seconds (default: 30)
    - STAC_CLIENT_FOLLOW_REDIRECTS: Follow HTTP redirects (default: true)
    - STAC_CLIENT_USER_AGENT: User-Agent header sent by the httpx transport
    - STAC_CLIENT_ITEM_SEARCH_CONFORMANCE: JSON list of URIs accepted as the
      item-search conformance class (default: all known STAC API forms)
    - STAC_CLIENT_DEFAULT_SEARCH_MODE: GET, POST or AUTO (default: AUTO)
    - STAC_CLIENT_DEBUG_LOGGING: Log at DEBUG level (default: false)

The configuration is immutable. A client holds the instance it was built
with for its whole lifetime.

Date: 18 OCT 2026
"""

import logging
from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .conformance import ITEM_SEARCH
from .search import SearchMode

logger = logging.getLogger(__name__)


class STACClientConfig(BaseSettings):
    """
    STAC client configuration loaded from environment variables.

    Attributes:
        timeout: Request timeout in seconds for the httpx transport
        follow_redirects: Whether the httpx transport follows redirects
        user_agent: User-Agent header value
        item_search_conformance: URIs accepted as proof of item search support
        default_search_mode: Mode used when search() is called without one
        debug_logging: Switch the stac_client loggers to DEBUG (process-wide)
    """
    model_config = SettingsConfigDict(
        env_prefix="STAC_CLIENT_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    timeout: float = Field(default=30.0, gt=0, description="HTTP timeout in seconds")
    follow_redirects: bool = Field(default=True, description="Follow HTTP redirects")
    user_agent: str = Field(default="stac-client/1.0.0", description="User-Agent header")

    item_search_conformance: List[str] = Field(
        default_factory=lambda: list(ITEM_SEARCH.uris),
        description="Conformance URIs accepted as the item-search capability"
    )

    default_search_mode: SearchMode = Field(
        default=SearchMode.AUTO,
        description="Search mode used when none is given"
    )

    debug_logging: bool = Field(default=False, description="Log at DEBUG level (process-wide)")

    @field_validator("item_search_conformance")
    @classmethod
    def validate_conformance_uris(cls, v):
        """At least one URI is needed or no server could ever pass the gate."""
        if not v:
            raise ValueError("STAC_CLIENT_ITEM_SEARCH_CONFORMANCE cannot be empty")
        return v

    @field_validator("default_search_mode", mode="before")
    @classmethod
    def parse_search_mode(cls, v):
        if isinstance(v, str):
            return SearchMode(v.upper())
        return v


@lru_cache(maxsize=1)
def get_client_config() -> STACClientConfig:
    """
    Get singleton client configuration instance.

    Returns:
        STACClientConfig: Validated configuration object

    Raises:
        ValidationError: If an environment variable has an invalid value
    """
    config = STACClientConfig()
    logger.debug(
        f"STAC client config loaded: timeout={config.timeout}s, "
        f"default_search_mode={config.default_search_mode.value}"
    )
    return config
