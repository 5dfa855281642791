"""
Entity loaders: the per-resource capability that turns a response body into an entity
and picks the scope entity whose links are folded into the state's link table.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, Type, runtime_checkable

import httpx
from pydantic import BaseModel, ValidationError

from .errors import GedcomxParseError
from .models import Feed, Gedcomx


@runtime_checkable
class EntityLoader(Protocol):
    def load_entity(self, response: httpx.Response) -> Optional[Any]: ...

    def get_scope(self, entity: Any) -> Optional[Any]: ...


def _origin(response: httpx.Response) -> str:
    try:
        request = response.request
    except RuntimeError:
        return "response"
    return f"{request.method} {request.url}"


def read_json(response: httpx.Response) -> Optional[Any]:
    """Decode a JSON body; None for an empty body (e.g. 204 or a bare 200)."""
    if not response.content:
        return None

    try:
        return response.json()
    except ValueError as exc:
        snippet = (response.text or "")[:500]
        raise GedcomxParseError(
            f"Expected JSON from {_origin(response)}, got non-JSON body snippet: "
            f"{snippet!r}"
        ) from exc


class JsonEntityLoader:
    """Returns the decoded JSON object as-is. No scope."""

    def load_entity(self, response: httpx.Response) -> Optional[Any]:
        data = read_json(response)
        if data is not None and not isinstance(data, dict):
            raise GedcomxParseError(
                f"Expected top-level JSON object from {_origin(response)}, "
                f"got {type(data).__name__}"
            )
        return data

    def get_scope(self, entity: Any) -> Optional[Any]:
        return None


class ModelEntityLoader(JsonEntityLoader):
    """
    Validates the JSON body into a pydantic model.

    `scope` names an attribute of the entity holding the enclosing resource. For list
    attributes (persons, collections, ...) the first element is the scope.
    """

    def __init__(self, model: Type[BaseModel], scope: Optional[str] = None):
        self.model = model
        self.scope = scope

    def __repr__(self) -> str:
        return f"{type(self).__name__}(model={self.model.__name__}, scope={self.scope!r})"

    def load_entity(self, response: httpx.Response) -> Optional[BaseModel]:
        data = super().load_entity(response)
        if data is None:
            return None
        try:
            return self.model.model_validate(data)
        except ValidationError as exc:
            raise GedcomxParseError(
                f"Response did not match model {self.model.__name__}: {exc}"
            ) from exc

    def get_scope(self, entity: Any) -> Optional[Any]:
        if entity is None or self.scope is None:
            return None
        value = getattr(entity, self.scope, None)
        if isinstance(value, (list, tuple)):
            return value[0] if value else None
        return value


class GedcomxEntityLoader(ModelEntityLoader):
    def __init__(self, scope: Optional[str] = None):
        super().__init__(Gedcomx, scope)


class FeedEntityLoader(ModelEntityLoader):
    def __init__(self) -> None:
        super().__init__(Feed)


__all__ = [
    "EntityLoader",
    "JsonEntityLoader",
    "ModelEntityLoader",
    "GedcomxEntityLoader",
    "FeedEntityLoader",
    "read_json",
]
