from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from .constants import LOCATION_HEADER, Rel


class Link(BaseModel):
    """
    A single hypermedia link relation.
    A link with neither href nor template only marks that the relation exists.
    """

    rel: Optional[str] = None
    href: Optional[str] = None
    template: Optional[str] = None
    type: Optional[str] = None
    accept: Optional[str] = None
    allow: Optional[str] = None
    hreflang: Optional[str] = None
    title: Optional[str] = None

    model_config = ConfigDict(frozen=True, extra="ignore")

    @property
    def is_navigable(self) -> bool:
        return bool(self.href)

    @property
    def is_templated(self) -> bool:
        return self.template is not None

    def with_rel(self, rel: str) -> "Link":
        if self.rel == rel:
            return self
        return self.model_copy(update={"rel": rel})


def _link_from(value: Any) -> Optional[Link]:
    if isinstance(value, Link):
        return value
    if isinstance(value, Mapping):
        try:
            return Link.model_validate(value)
        except ValidationError:
            return None
    return None


def _rel_of(item: Any) -> Optional[str]:
    if isinstance(item, Mapping):
        return item.get("rel")
    return getattr(item, "rel", None)


def coerce_links(raw: Any) -> Dict[str, Link]:
    """
    Normalize entity links into a relation -> Link mapping.
    Accepts both JSON shapes: {"rel": {...}} and [{"rel": "...", ...}].
    Entries without a relation name, with a non-object value or with
    mistyped fields are skipped.
    """
    if not raw:
        return {}

    pairs: Iterable[Tuple[Optional[str], Any]]
    if isinstance(raw, Mapping):
        pairs = raw.items()
    elif isinstance(raw, (list, tuple)):
        pairs = ((_rel_of(item), item) for item in raw)
    else:
        return {}

    links: Dict[str, Link] = {}
    for rel, value in pairs:
        if not rel:
            continue
        link = _link_from(value)
        if link is None:
            continue
        links[rel] = link.with_rel(rel)
    return links


def parse_link_headers(response: httpx.Response) -> Dict[str, Link]:
    """
    Parse RFC 8288 `Link:` headers via httpx's header-link parser.
    `rel="next last"` registers the same target under both relations.

    httpx stops reading a link's parameters at the first quoted value that
    contains `=`, so a `rel` placed after such a parameter is lost.
    """
    links: Dict[str, Link] = {}
    for attrs in response.links.values():
        for rel in (attrs.get("rel") or "").split():
            links[rel] = Link.model_validate(
                {**attrs, "rel": rel, "href": attrs.get("url") or None}
            )
    return links


def entity_links(entity: Any) -> Dict[str, Link]:
    if entity is None:
        return {}
    if isinstance(entity, Mapping):
        return coerce_links(entity.get("links"))
    return coerce_links(getattr(entity, "links", None))


def build_link_table(
    response: httpx.Response, entity: Any = None, scope: Any = None
) -> Dict[str, Link]:
    """
    Merge links in precedence order; later sources overwrite earlier ones:
      1. synthetic `self` from the Location header
      2. Link headers
      3. links on the decoded entity
      4. links on the scope entity
    """
    links: Dict[str, Link] = {}

    location = response.headers.get(LOCATION_HEADER)
    if location:
        links[Rel.SELF] = Link(rel=Rel.SELF, href=location)

    links.update(parse_link_headers(response))
    links.update(entity_links(entity))
    links.update(entity_links(scope))
    return links


__all__ = [
    "Link",
    "build_link_table",
    "coerce_links",
    "entity_links",
    "parse_link_headers",
]
