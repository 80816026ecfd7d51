"""Client configuration loaded from environment variables."""

import os
from dataclasses import dataclass

# Strato HiDrive REST endpoint
HIDRIVE_API_V21 = "https://api.hidrive.strato.com/2.1"


@dataclass(frozen=True)
class ClientConfig:
    """Centralized client configuration.

    The access token has no default and must be supplied; obtaining and
    refreshing it is left to the caller's OAuth2 tooling. The endpoint and
    timeout have sensible defaults but can be overridden.
    """

    # Required, no default
    access_token: str

    # Defaults provided, overridable via env
    api_endpoint: str = HIDRIVE_API_V21
    timeout_seconds: float = 60.0


def load_config() -> ClientConfig:
    """Construct a ClientConfig from environment variables.

    Required environment variables:
        HIDRIVE_ACCESS_TOKEN: OAuth2 access token for the HiDrive API.

    Optional environment variables (with defaults):
        HIDRIVE_API_ENDPOINT: API base URL (default: https://api.hidrive.strato.com/2.1).
        HIDRIVE_TIMEOUT_SECONDS: Socket timeout per request (default: 60).

    Returns:
        Configured ClientConfig instance.
    """
    return ClientConfig(
        access_token=os.environ["HIDRIVE_ACCESS_TOKEN"],
        api_endpoint=os.environ.get("HIDRIVE_API_ENDPOINT", HIDRIVE_API_V21),
        timeout_seconds=float(os.environ.get("HIDRIVE_TIMEOUT_SECONDS", "60")),
    )
