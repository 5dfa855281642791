"""Request options applied to a transition's request just before it is sent."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import httpx


@runtime_checkable
class StateTransitionOption(Protocol):
    def apply(self, request: httpx.Request) -> None: ...


class HeaderParameter:
    """Sets (replace=True) or adds another value for a request header."""

    def __init__(self, name: str, value: str, *, replace: bool = False):
        self.name = name
        self.value = value
        self.replace = replace

    def __repr__(self) -> str:
        return f"HeaderParameter({self.name!r}, {self.value!r}, replace={self.replace})"

    def apply(self, request: httpx.Request) -> None:
        if self.replace or self.name not in request.headers:
            request.headers[self.name] = self.value
        else:
            # httpx.Headers only appends through its raw list
            request.headers = httpx.Headers(
                [*request.headers.raw, (self.name, self.value)]
            )


class QueryParameter:
    """Sets (replace=True) or adds another value for a query parameter."""

    def __init__(self, name: str, value: str, *, replace: bool = False):
        self.name = name
        self.value = value
        self.replace = replace

    def __repr__(self) -> str:
        return f"QueryParameter({self.name!r}, {self.value!r}, replace={self.replace})"

    def apply(self, request: httpx.Request) -> None:
        if self.replace:
            request.url = request.url.copy_set_param(self.name, self.value)
        else:
            request.url = request.url.copy_add_param(self.name, self.value)


__all__ = ["StateTransitionOption", "HeaderParameter", "QueryParameter"]
