from __future__ import annotations

from typing import Dict, Mapping, Optional, Tuple

import httpx

from .client import GedcomxClient
from .constants import (
    ACCEPT_HEADER,
    ATOM_MEDIA_TYPE,
    AUTHORIZATION_HEADER,
    CONTENT_TYPE_HEADER,
    GEDCOMX_MEDIA_TYPE,
)
from .errors import GedcomxConfigurationError
from .loaders import EntityLoader, FeedEntityLoader, GedcomxEntityLoader, JsonEntityLoader
from .state import DEFAULT_KIND, ApplicationState

GEDCOMX_KIND = DEFAULT_KIND
COLLECTION_KIND = "collection"
PERSON_KIND = "person"
SOURCE_DESCRIPTION_KIND = "source-description"
FEED_KIND = "feed"
JSON_KIND = "json"

DEFAULT_LOADERS: Mapping[str, EntityLoader] = {
    GEDCOMX_KIND: GedcomxEntityLoader(),
    COLLECTION_KIND: GedcomxEntityLoader(scope="collections"),
    PERSON_KIND: GedcomxEntityLoader(scope="persons"),
    SOURCE_DESCRIPTION_KIND: GedcomxEntityLoader(scope="source_descriptions"),
    FEED_KIND: FeedEntityLoader(),
    JSON_KIND: JsonEntityLoader(),
}


class StateFactory:
    """
    Maps resource kinds to entity loaders and builds states of a given kind.
    Successor states keep their predecessor's kind, so the loader lookup here replaces
    any per-resource subclassing. Factories are immutable; register() returns a copy.
    """

    def __init__(self, loaders: Optional[Mapping[str, EntityLoader]] = None):
        self._loaders: Dict[str, EntityLoader] = dict(
            DEFAULT_LOADERS if loaders is None else loaders
        )

    @property
    def kinds(self) -> Tuple[str, ...]:
        return tuple(self._loaders)

    def register(self, kind: str, loader: EntityLoader) -> "StateFactory":
        return StateFactory({**self._loaders, kind: loader})

    def loader_for(self, kind: str) -> EntityLoader:
        try:
            return self._loaders[kind]
        except KeyError:
            raise GedcomxConfigurationError(
                f"No entity loader registered for resource kind {kind!r}"
            ) from None

    def create(
        self,
        kind: str,
        client: GedcomxClient,
        request: httpx.Request,
        response: httpx.Response,
        access_token: Optional[str] = None,
    ) -> ApplicationState:
        return ApplicationState(client, request, response, access_token, self, kind)

    def new_state(
        self,
        uri: str,
        kind: str = GEDCOMX_KIND,
        *,
        client: Optional[GedcomxClient] = None,
        method: str = "GET",
        access_token: Optional[str] = None,
        feed: bool = False,
    ) -> ApplicationState:
        """
        Entry point: read `uri` and wrap the exchange as a state of `kind`.
        Without an explicit client a default GedcomxClient is created; close it through
        `state.client.close()` when done.
        """
        self.loader_for(kind)
        client = client or GedcomxClient()

        if feed:
            headers = {ACCEPT_HEADER: ATOM_MEDIA_TYPE}
        else:
            headers = {
                ACCEPT_HEADER: GEDCOMX_MEDIA_TYPE,
                CONTENT_TYPE_HEADER: GEDCOMX_MEDIA_TYPE,
            }
        if access_token is not None:
            headers[AUTHORIZATION_HEADER] = f"Bearer {access_token}"

        request = client.create_request(method, uri, headers=headers)
        return self.create(kind, client, request, client.send(request), access_token)

    def new_collection_state(self, uri: str, **kwargs) -> ApplicationState:
        return self.new_state(uri, COLLECTION_KIND, **kwargs)


_DEFAULT_FACTORY = StateFactory()


def default_factory() -> StateFactory:
    return _DEFAULT_FACTORY


__all__ = [
    "StateFactory",
    "default_factory",
    "DEFAULT_LOADERS",
    "GEDCOMX_KIND",
    "COLLECTION_KIND",
    "PERSON_KIND",
    "SOURCE_DESCRIPTION_KIND",
    "FEED_KIND",
    "JSON_KIND",
]
