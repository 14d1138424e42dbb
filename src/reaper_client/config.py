"""Configuration for the Reaper client."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ReaperConfig(BaseSettings):
    """Configuration for talking to a Reaper service.

    Can be constructed explicitly or loaded from environment variables
    with the REAPER_CLIENT_ prefix. Instances are frozen and safe to
    share between concurrent requests.
    """

    model_config = SettingsConfigDict(
        env_prefix="REAPER_CLIENT_",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    base_url: str = Field(
        default="http://localhost:8080",
        description="Base URL of the Reaper REST API",
    )
    user_agent: str = Field(
        default="reaper-client",
        description="Value sent in the User-Agent header",
    )
    timeout: float = Field(
        default=30.0,
        gt=0,
        description="Transport timeout in seconds for a single request",
    )
    max_concurrency: int = Field(
        default=5,
        ge=1,
        description="Upper bound on concurrent cluster fetches",
    )
    check_status: bool = Field(
        default=False,
        description="Raise ReaperStatusError on 4xx/5xx responses",
    )
