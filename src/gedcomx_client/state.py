from __future__ import annotations

import copy
import json
import logging
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Mapping, Optional, Sequence

import httpx
from pydantic import BaseModel

from . import oauth2
from .client import GedcomxClient
from .constants import (
    ACCEPT_HEADER,
    ATOM_MEDIA_TYPE,
    AUTHORIZATION_HEADER,
    CONTENT_TYPE_HEADER,
    ETAG_HEADER,
    GEDCOMX_MEDIA_TYPE,
    LAST_MODIFIED_HEADER,
    WARNING_HEADER,
    Rel,
)
from .errors import GedcomxApplicationError
from .links import Link, build_link_table
from .observability import log_event
from .options import StateTransitionOption

if TYPE_CHECKING:
    from .factory import StateFactory

DEFAULT_KIND = "gedcomx"

log = logging.getLogger("gedcomx_client.state")


def serialize_entity(entity: Any) -> bytes:
    if isinstance(entity, BaseModel):
        return entity.model_dump_json(by_alias=True, exclude_none=True).encode("utf-8")
    return json.dumps(entity).encode("utf-8")


class ApplicationState:
    """
    An immutable snapshot of one request/response exchange.

    - The entity is decoded only for a non-HEAD request answered with exactly 200
    - Links are merged from Location, Link headers, the entity, then the scope entity
    - Every transition sends one request and returns a *new* state built by the factory
      for this state's resource kind; error responses still produce states
      (call if_successful() to raise)
    """

    def __init__(
        self,
        client: GedcomxClient,
        request: httpx.Request,
        response: httpx.Response,
        access_token: Optional[str] = None,
        factory: Optional["StateFactory"] = None,
        kind: str = DEFAULT_KIND,
    ):
        if factory is None:
            from .factory import default_factory

            factory = default_factory()

        self._client = client
        self._request = request
        self._response = response
        self._access_token = access_token
        self._factory = factory
        self._kind = kind
        self._loader = factory.loader_for(kind)
        self._entity = self._load_entity_conditionally()
        self._links = build_link_table(
            response, self._entity, self._loader.get_scope(self._entity)
        )

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__} kind={self._kind} "
            f"{self._request.method} {self._request.url} ({self._response.status_code})>"
        )

    def _load_entity_conditionally(self) -> Optional[Any]:
        if self._request.method != "HEAD" and self._response.status_code == 200:
            return self._loader.load_entity(self._response)
        return None

    # --- Accessors ------------------------------------------------------------ #

    @property
    def client(self) -> GedcomxClient:
        return self._client

    @property
    def request(self) -> httpx.Request:
        return self._request

    @property
    def response(self) -> httpx.Response:
        return self._response

    @property
    def access_token(self) -> Optional[str]:
        return self._access_token

    @property
    def entity(self) -> Optional[Any]:
        return self._entity

    @property
    def factory(self) -> "StateFactory":
        return self._factory

    @property
    def kind(self) -> str:
        return self._kind

    @property
    def links(self) -> Mapping[str, Link]:
        return MappingProxyType(self._links)

    @property
    def status_code(self) -> int:
        return self._response.status_code

    def is_authenticated(self) -> bool:
        return self._access_token is not None

    def get_uri(self) -> str:
        return str(self._request.url)

    def resolve_href(self, href: str) -> str:
        """Resolve a (possibly relative) href against this state's request URL."""
        return str(self._request.url.join(href))

    def get_self_uri(self) -> str:
        link = self.get_link(Rel.SELF)
        if link is not None and link.href:
            return self.resolve_href(link.href)
        return self.get_uri()

    def get_link(self, rel: str) -> Optional[Link]:
        return self._links.get(rel)

    def get_headers(self) -> httpx.Headers:
        return self._response.headers

    def get_etag(self) -> Optional[str]:
        return self._response.headers.get(ETAG_HEADER)

    def get_last_modified(self) -> Optional[str]:
        return self._response.headers.get(LAST_MODIFIED_HEADER)

    def get_warnings(self) -> List[str]:
        return self._response.headers.get_list(WARNING_HEADER)

    # --- Error classification ------------------------------------------------- #

    def has_client_error(self) -> bool:
        return 400 <= self._response.status_code < 500

    def has_server_error(self) -> bool:
        return 500 <= self._response.status_code < 600

    def has_error(self) -> bool:
        return self.has_client_error() or self.has_server_error()

    def if_successful(self) -> "ApplicationState":
        if self.has_error():
            raise GedcomxApplicationError(self._build_failure_message(), self._response)
        return self

    def _build_failure_message(self) -> str:
        status = str(self._response.status_code)
        if self._response.reason_phrase:
            status = f"{status} {self._response.reason_phrase}"
        message = f"Unsuccessful {self._request.method} to {self.get_uri()} ({status})"
        for warning in self.get_warnings():
            message += f"\nWarning: {warning}"
        return message

    # --- Request construction -------------------------------------------------- #

    def create_request(
        self,
        method: str,
        uri: Optional[str] = None,
        *,
        headers: Optional[Mapping[str, str]] = None,
        content: Optional[bytes] = None,
        data: Optional[Mapping[str, Any]] = None,
    ) -> httpx.Request:
        return self._client.create_request(
            method,
            self.resolve_href(uri) if uri else self.get_self_uri(),
            headers=headers,
            content=content,
            data=data,
        )

    def create_authenticated_request(
        self,
        method: str,
        uri: Optional[str] = None,
        *,
        headers: Optional[Mapping[str, str]] = None,
        content: Optional[bytes] = None,
        data: Optional[Mapping[str, Any]] = None,
    ) -> httpx.Request:
        merged: Dict[str, str] = dict(headers or {})
        if self._access_token is not None:
            merged[AUTHORIZATION_HEADER] = f"Bearer {self._access_token}"
        return self.create_request(
            method, uri, headers=merged, content=content, data=data
        )

    def create_authenticated_feed_request(
        self, method: str, uri: Optional[str] = None
    ) -> httpx.Request:
        return self.create_authenticated_request(
            method, uri, headers={ACCEPT_HEADER: ATOM_MEDIA_TYPE}
        )

    def create_authenticated_gedcomx_request(
        self, method: str, uri: Optional[str] = None
    ) -> httpx.Request:
        return self.create_authenticated_request(
            method,
            uri,
            headers={
                ACCEPT_HEADER: GEDCOMX_MEDIA_TYPE,
                CONTENT_TYPE_HEADER: GEDCOMX_MEDIA_TYPE,
            },
        )

    def _propagated_headers(self, *names: str) -> Dict[str, str]:
        headers: Dict[str, str] = {}
        for name in names:
            value = self._request.headers.get(name)
            if value is not None:
                headers[name] = value
        return headers

    def _invoke(
        self, request: httpx.Request, options: Sequence[StateTransitionOption] = ()
    ) -> httpx.Response:
        for option in options:
            option.apply(request)
        return self._client.send(request)

    def reconstruct(
        self, request: httpx.Request, response: httpx.Response
    ) -> "ApplicationState":
        return self._factory.create(
            self._kind, self._client, request, response, self._access_token
        )

    def _transition(
        self,
        method: str,
        options: Sequence[StateTransitionOption],
        *,
        uri: Optional[str] = None,
        propagate: Sequence[str] = (ACCEPT_HEADER,),
        content: Optional[bytes] = None,
        rel: Optional[str] = None,
    ) -> "ApplicationState":
        request = self.create_authenticated_request(
            method,
            uri,
            headers=self._propagated_headers(*propagate),
            content=content,
        )
        log_event(
            "state.transition",
            logger=log,
            method=method,
            url=str(request.url),
            rel=rel,
            kind=self._kind,
        )
        return self.reconstruct(request, self._invoke(request, options))

    # --- Transitions ------------------------------------------------------------ #

    def head(self, *options: StateTransitionOption) -> "ApplicationState":
        return self._transition("HEAD", options)

    def get(self, *options: StateTransitionOption) -> "ApplicationState":
        return self._transition("GET", options)

    def delete(self, *options: StateTransitionOption) -> "ApplicationState":
        return self._transition("DELETE", options)

    def options(self, *options: StateTransitionOption) -> "ApplicationState":
        return self._transition("OPTIONS", options)

    def put(self, entity: Any, *options: StateTransitionOption) -> "ApplicationState":
        return self._transition(
            "PUT",
            options,
            propagate=(ACCEPT_HEADER, CONTENT_TYPE_HEADER),
            content=serialize_entity(entity),
        )

    # --- Pagination ------------------------------------------------------------- #

    def read_page(
        self, rel: str, *options: StateTransitionOption
    ) -> Optional["ApplicationState"]:
        """
        Follow a page relation advertised by the server.
        Returns None (without any network call) when the relation is absent or has no href.
        """
        link = self.get_link(rel)
        if link is None or not link.href:
            return None
        return self._transition(
            "GET",
            options,
            uri=self.resolve_href(link.href),
            propagate=(ACCEPT_HEADER, CONTENT_TYPE_HEADER),
            rel=rel,
        )

    def read_next_page(
        self, *options: StateTransitionOption
    ) -> Optional["ApplicationState"]:
        return self.read_page(Rel.NEXT, *options)

    def read_previous_page(
        self, *options: StateTransitionOption
    ) -> Optional["ApplicationState"]:
        return self.read_page(Rel.PREVIOUS, *options)

    def read_first_page(
        self, *options: StateTransitionOption
    ) -> Optional["ApplicationState"]:
        return self.read_page(Rel.FIRST, *options)

    def read_last_page(
        self, *options: StateTransitionOption
    ) -> Optional["ApplicationState"]:
        return self.read_page(Rel.LAST, *options)

    def iter_pages(
        self, *options: StateTransitionOption, rel: str = Rel.NEXT
    ) -> Iterator["ApplicationState"]:
        """
        Yield this state, then every page reached by following `rel` until the server
        stops advertising it. Stops early if a page URI repeats.
        """
        seen = set()
        page: Optional[ApplicationState] = self
        while page is not None and page.get_uri() not in seen:
            seen.add(page.get_uri())
            yield page
            page = page.read_page(rel, *options)

    # --- Authentication --------------------------------------------------------- #

    def authenticate_with_access_token(self, access_token: str) -> "ApplicationState":
        """Same exchange, links and entity; only the bearer token differs."""
        authenticated = copy.copy(self)
        authenticated._access_token = access_token
        return authenticated

    def authenticate_via_oauth2_password(
        self,
        username: str,
        password: str,
        client_id: str,
        client_secret: Optional[str] = None,
    ) -> "ApplicationState":
        form = oauth2.password_form(username, password, client_id, client_secret)
        return oauth2.negotiate(self, form)

    def authenticate_via_oauth2_auth_code(
        self,
        auth_code: str,
        redirect_uri: str,
        client_id: str,
        client_secret: Optional[str] = None,
    ) -> "ApplicationState":
        form = oauth2.auth_code_form(auth_code, redirect_uri, client_id, client_secret)
        return oauth2.negotiate(self, form)

    def authenticate_via_oauth2_client_credentials(
        self, client_id: str, client_secret: str
    ) -> "ApplicationState":
        form = oauth2.client_credentials_form(client_id, client_secret)
        return oauth2.negotiate(self, form)


__all__ = ["ApplicationState", "DEFAULT_KIND", "serialize_entity"]
