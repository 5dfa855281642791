from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from . import client as _client
from .client import GedcomxClient
from .state import ApplicationState


@dataclass(frozen=True)
class EnvConfig:
    base_url: str = ""
    client_id: str = ""
    client_secret: str = ""
    access_token: str = ""
    timeout_seconds: Optional[float] = None


def load_env_config(*, use_dotenv: bool = True) -> EnvConfig:
    """Load API settings and credentials from environment (optional .env)."""
    if use_dotenv:
        _client.load_dotenv()
    timeout = os.getenv("GEDCOMX_TIMEOUT_SECONDS", "").strip()
    return EnvConfig(
        base_url=os.getenv("GEDCOMX_BASE_URL", "").strip(),
        client_id=os.getenv("GEDCOMX_CLIENT_ID", "").strip(),
        client_secret=os.getenv("GEDCOMX_CLIENT_SECRET", "").strip(),
        access_token=os.getenv("GEDCOMX_ACCESS_TOKEN", "").strip(),
        timeout_seconds=float(timeout) if timeout else None,
    )


def create_client_from_env(**kwargs) -> GedcomxClient:
    """Create a GedcomxClient from environment variables."""
    config = load_env_config()
    if not config.base_url:
        raise ValueError("Missing GEDCOMX_BASE_URL in environment.")
    if config.timeout_seconds is not None:
        kwargs.setdefault("timeout_seconds", config.timeout_seconds)
    return GedcomxClient(base_url=config.base_url, **kwargs)


def authenticate_from_env(
    state: ApplicationState, config: Optional[EnvConfig] = None
) -> ApplicationState:
    """
    Authenticate a state with whatever credentials the environment provides:
    a ready access token first, then client credentials. Without either the
    state is returned unchanged.
    """
    config = config or load_env_config()
    if config.access_token:
        return state.authenticate_with_access_token(config.access_token)
    if config.client_id and config.client_secret:
        return state.authenticate_via_oauth2_client_credentials(
            config.client_id, config.client_secret
        )
    return state


__all__ = [
    "EnvConfig",
    "load_env_config",
    "create_client_from_env",
    "authenticate_from_env",
]
