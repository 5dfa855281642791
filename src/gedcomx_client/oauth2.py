"""
OAuth2 token negotiation against the token endpoint a state advertises.

All three grant flows build a form and converge on negotiate(). Unlike ordinary
transitions, negotiation raises right away: a failed exchange leaves nothing to return.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, Optional

import httpx
from pydantic import ValidationError

from .constants import (
    ACCEPT_HEADER,
    CONTENT_TYPE_HEADER,
    FORM_MEDIA_TYPE,
    JSON_MEDIA_TYPE,
    Rel,
)
from .errors import GedcomxApplicationError, GedcomxConfigurationError
from .models import TokenResponse
from .observability import log_event

if TYPE_CHECKING:
    from .state import ApplicationState

log = logging.getLogger("gedcomx_client.oauth2")


def password_form(
    username: str, password: str, client_id: str, client_secret: Optional[str] = None
) -> Dict[str, str]:
    form = {
        "grant_type": "password",
        "username": username,
        "password": password,
        "client_id": client_id,
    }
    if client_secret is not None:
        form["client_secret"] = client_secret
    return form


def auth_code_form(
    auth_code: str,
    redirect_uri: str,
    client_id: str,
    client_secret: Optional[str] = None,
) -> Dict[str, str]:
    form = {
        "grant_type": "authorization_code",
        "code": auth_code,
        "redirect_uri": redirect_uri,
        "client_id": client_id,
    }
    if client_secret is not None:
        form["client_secret"] = client_secret
    return form


def client_credentials_form(client_id: str, client_secret: str) -> Dict[str, str]:
    return {
        "grant_type": "client_credentials",
        "client_id": client_id,
        "client_secret": client_secret,
    }


def token_endpoint(state: "ApplicationState") -> str:
    link = state.get_link(Rel.OAUTH2_TOKEN)
    if link is None or not link.href:
        raise GedcomxConfigurationError(
            f"No OAuth2 token URI supplied for resource at {state.get_uri()}"
        )
    return state.resolve_href(link.href)


def parse_token_response(response: httpx.Response) -> str:
    """
    Extract the bearer token from a token-endpoint response.
    Falls back to `token` for providers built on an older draft of the protocol.
    """
    illegal = "Illegal access token response: no access_token provided."
    try:
        data = response.json()
    except ValueError:
        raise GedcomxApplicationError(illegal, response) from None

    if not isinstance(data, dict):
        raise GedcomxApplicationError(illegal, response)

    try:
        token = TokenResponse.model_validate(data).bearer
    except ValidationError:
        raise GedcomxApplicationError(illegal, response) from None

    if not token:
        raise GedcomxApplicationError(illegal, response)
    return token


def negotiate(state: "ApplicationState", form: Dict[str, str]) -> "ApplicationState":
    href = token_endpoint(state)
    grant_type = form.get("grant_type")

    request = state.create_request(
        "POST",
        href,
        headers={
            ACCEPT_HEADER: JSON_MEDIA_TYPE,
            CONTENT_TYPE_HEADER: FORM_MEDIA_TYPE,
        },
        data=form,
    )
    response = state.client.send(request)

    if not 200 <= response.status_code < 300:
        log_event(
            "oauth2.token",
            logger=log,
            grant_type=grant_type,
            status=response.status_code,
            outcome="rejected",
        )
        raise GedcomxApplicationError("Unable to obtain an access token.", response)

    access_token = parse_token_response(response)
    log_event(
        "oauth2.token",
        logger=log,
        grant_type=grant_type,
        status=response.status_code,
        outcome="granted",
    )
    return state.authenticate_with_access_token(access_token)


__all__ = [
    "password_form",
    "auth_code_form",
    "client_credentials_form",
    "token_endpoint",
    "parse_token_response",
    "negotiate",
]
