import pytest

from wiki_index_refs.index.decoder import IndexReferenceDecoder
from wiki_index_refs.model.reference import document_reference
from wiki_index_refs.resolvers import ReferenceResolvers
from wiki_index_refs.store import InMemoryEntityStore


TAG_CLASS = "XWiki.TagClass"


@pytest.fixture
def page():
    return document_reference("xwiki", ["Main"], "Page")


@pytest.fixture
def store(page):
    """A wiki with one fully populated page, a space home and a nested space."""
    store = InMemoryEntityStore()
    store.add_document(
        page,
        translation_locales=["fr", "de"],
        attachments=["a.txt", "b.png", "c.pdf"],
        objects={TAG_CLASS: [["tags"], None, ["tags", "extra"]]},
    )
    store.add_document(document_reference("xwiki", ["Main"], "WebHome"))
    store.add_document(document_reference("xwiki", ["A"], "WebHome"))
    store.add_document(document_reference("xwiki", ["A", "B"], "Page"))
    return store


@pytest.fixture
def resolvers(store):
    return ReferenceResolvers(store)


@pytest.fixture
def decoder():
    return IndexReferenceDecoder()
