import httpx
import pytest
import respx
from gedcomx_client.client import GedcomxClient
from gedcomx_client.errors import GedcomxConfigurationError
from gedcomx_client.factory import (
    COLLECTION_KIND,
    DEFAULT_LOADERS,
    StateFactory,
    default_factory,
)
from gedcomx_client.loaders import JsonEntityLoader
from gedcomx_client.models import Collection, Feed
from httpx import Response

COLLECTIONS = "https://mock-gx.com/platform/collections"
TREE = "https://mock-gx.com/platform/collections/tree"


class EchoLoader(JsonEntityLoader):
    """Uses the `scope` key of the decoded JSON as the scope entity."""

    def get_scope(self, entity):
        return entity.get("scope") if entity else None


@pytest.fixture
def client():
    return GedcomxClient(base_url="https://mock-gx.com")


def test_default_factory_knows_stock_kinds():
    kinds = default_factory().kinds
    assert set(DEFAULT_LOADERS) == set(kinds)
    assert {"gedcomx", "collection", "person", "feed", "json"} <= set(kinds)


def test_unknown_kind_is_configuration_error():
    with pytest.raises(GedcomxConfigurationError) as exc:
        StateFactory().loader_for("nope")
    assert "'nope'" in str(exc.value)


def test_register_returns_new_factory():
    base = StateFactory()
    extended = base.register("echo", EchoLoader())

    assert "echo" in extended.kinds
    assert "echo" not in base.kinds
    with pytest.raises(GedcomxConfigurationError):
        base.loader_for("echo")


@respx.mock(assert_all_called=False)
def test_new_state_fails_fast_for_unknown_kind(client):
    with pytest.raises(GedcomxConfigurationError):
        StateFactory().new_state(TREE, "nope", client=client)
    assert respx.calls.call_count == 0


@respx.mock
def test_new_collection_state_folds_scope_links(client):
    route = respx.get(TREE).mock(
        return_value=Response(
            200,
            json={
                "collections": [
                    {
                        "id": "FSFT",
                        "title": "Family Tree",
                        "links": {
                            "self": {"href": TREE},
                            "oauth2-token": {"href": "/cis-web/oauth2/v3/token"},
                        },
                    }
                ],
                "links": {"self": {"href": "/document-self"}},
            },
        )
    )

    state = StateFactory().new_collection_state(TREE, client=client)

    sent = route.calls[0].request
    assert sent.headers["Accept"] == "application/x-gedcomx-v1+json"
    assert sent.headers["Content-Type"] == "application/x-gedcomx-v1+json"
    assert state.kind == COLLECTION_KIND
    assert isinstance(state.entity.collections[0], Collection)
    # scope (the collection) beats the document for `self`
    assert state.get_link("self").href == TREE
    assert state.get_link("oauth2-token") is not None


@respx.mock
def test_new_state_feed_with_token(client):
    route = respx.get(f"{TREE}/search").mock(
        return_value=Response(200, json={"results": 0, "entries": []})
    )

    state = default_factory().new_state(
        f"{TREE}/search", "feed", client=client, access_token="tok", feed=True
    )

    sent = route.calls[0].request
    assert sent.headers["Accept"] == "application/x-gedcomx-atom+json"
    assert "Content-Type" not in sent.headers
    assert sent.headers["Authorization"] == "Bearer tok"
    assert isinstance(state.entity, Feed)
    assert state.access_token == "tok"


@respx.mock
def test_successors_keep_kind_and_factory(client):
    respx.get(f"{TREE}?page=2").mock(return_value=Response(200, json={}))
    respx.get(TREE).mock(
        return_value=Response(
            200, json={"scope": {"links": {"next": {"href": f"{TREE}?page=2"}}}}
        )
    )
    factory = StateFactory().register("echo", EchoLoader())

    state = factory.new_state(TREE, "echo", client=client)
    assert state.get_link("next").href == f"{TREE}?page=2"

    page = state.read_next_page()
    assert page.kind == "echo"
    assert page.factory is factory
    assert page.entity == {}


def test_create_builds_state_without_network(client):
    request = httpx.Request("POST", COLLECTIONS)
    response = httpx.Response(
        201, headers={"Location": f"{COLLECTIONS}/new"}, request=request
    )

    state = StateFactory().create("collection", client, request, response)

    assert state.get_self_uri() == f"{COLLECTIONS}/new"
    assert state.entity is None
