from gedcomx_client.models import (
    Entry,
    Feed,
    Gedcomx,
    Note,
    ResultConfidence,
    TokenResponse,
)


def test_gedcomx_document_parses_with_aliases_and_links():
    doc = Gedcomx.model_validate(
        {
            "description": "#SD-1",
            "persons": [
                {"id": "P-1", "links": {"self": {"href": "/persons/P-1"}}},
            ],
            "sourceDescriptions": [{"id": "SD-1", "about": "urn:x"}],
            "collections": [{"id": "tree", "title": "Family Tree", "size": 3}],
            "notes": [{"subject": "Birth", "text": "Born at home"}],
            "links": [{"rel": "collection", "href": "/collections/tree"}],
            "unknownField": {"kept": True},
        }
    )

    assert doc.persons[0].link_href("self") == "/persons/P-1"
    assert doc.source_descriptions[0].about == "urn:x"
    assert doc.collections[0].title == "Family Tree"
    assert isinstance(doc.notes[0], Note)
    assert doc.link_href("collection") == "/collections/tree"
    assert doc.get_link("missing") is None


def test_serialization_uses_aliases():
    doc = Gedcomx(source_descriptions=[{"about": "urn:x"}])
    dumped = doc.model_dump(by_alias=True, exclude_none=True)
    assert dumped["sourceDescriptions"] == [{"about": "urn:x", "links": {}}]


def test_feed_entries_and_confidence():
    feed = Feed.model_validate(
        {
            "results": 2,
            "index": 0,
            "links": {"next": {"href": "/search?start=1"}},
            "entries": [
                {"id": "e1", "score": 0.9, "confidence": 5},
                {"id": "e2", "confidence": "3"},
            ],
        }
    )

    assert feed.results == 2
    assert feed.link_href("next") == "/search?start=1"
    assert feed.entries[0].confidence is ResultConfidence.FIVE
    assert feed.entries[1].confidence is ResultConfidence.THREE
    assert Entry().confidence is None


def test_token_response_bearer_prefers_access_token():
    assert TokenResponse(access_token="a", token="b").bearer == "a"
    assert TokenResponse(token="legacy").bearer == "legacy"
    assert TokenResponse().bearer is None
