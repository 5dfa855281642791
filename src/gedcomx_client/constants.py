"""Read-only protocol constants shared by every state: media types, headers, rels."""

from __future__ import annotations

GEDCOMX_MEDIA_TYPE = "application/x-gedcomx-v1+json"
ATOM_MEDIA_TYPE = "application/x-gedcomx-atom+json"
JSON_MEDIA_TYPE = "application/json"
FORM_MEDIA_TYPE = "application/x-www-form-urlencoded"

ACCEPT_HEADER = "Accept"
AUTHORIZATION_HEADER = "Authorization"
CONTENT_TYPE_HEADER = "Content-Type"
ETAG_HEADER = "ETag"
LAST_MODIFIED_HEADER = "Last-Modified"
LINK_HEADER = "Link"
LOCATION_HEADER = "Location"
WARNING_HEADER = "Warning"


class Rel:
    """Link relation names the core navigates by."""

    SELF = "self"
    NEXT = "next"
    PREVIOUS = "previous"
    FIRST = "first"
    LAST = "last"
    OAUTH2_TOKEN = "oauth2-token"


__all__ = [
    "GEDCOMX_MEDIA_TYPE",
    "ATOM_MEDIA_TYPE",
    "JSON_MEDIA_TYPE",
    "FORM_MEDIA_TYPE",
    "ACCEPT_HEADER",
    "AUTHORIZATION_HEADER",
    "CONTENT_TYPE_HEADER",
    "ETAG_HEADER",
    "LAST_MODIFIED_HEADER",
    "LINK_HEADER",
    "LOCATION_HEADER",
    "WARNING_HEADER",
    "Rel",
]
