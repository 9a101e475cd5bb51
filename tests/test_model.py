"""
Reference Model Tests

Covers reference construction rules, locale parsing and the reference
string codec.
"""

import pytest

from wiki_index_refs.config import Settings
from wiki_index_refs.core.errors import MalformedReferenceError
from wiki_index_refs.model.explicit import ExplicitReferenceResolver
from wiki_index_refs.model.reference import (
    EntityReference,
    EntityType,
    attachment_reference,
    document_reference,
    object_property_reference,
    object_reference,
    parse_locale,
    space_reference,
    split_object_name,
    wiki_reference,
)
from wiki_index_refs.model.serializer import (
    resolve_string,
    serialize_local,
    serialize_reference,
)


class TestEntityReference:
    """Tests for reference construction and navigation."""

    def test_legal_chain(self):
        doc = document_reference("xwiki", ["A", "B"], "Page")

        assert doc.type is EntityType.DOCUMENT
        assert [s.name for s in doc.spaces()] == ["A", "B"]
        assert doc.extract_reference(EntityType.WIKI) == wiki_reference("xwiki")
        assert doc.extract_reference(EntityType.ATTACHMENT) is None

    def test_illegal_parent_rejected(self):
        """An attachment must hang off a document."""
        with pytest.raises(MalformedReferenceError):
            EntityReference.create(
                name="file.txt",
                type=EntityType.ATTACHMENT,
                parent=space_reference("xwiki", ["Main"]),
            )

    def test_locale_only_on_documents(self):
        with pytest.raises(MalformedReferenceError):
            EntityReference.create(
                name="Main",
                type=EntityType.SPACE,
                parent=wiki_reference("xwiki"),
                locale="fr",
            )

    def test_empty_name_rejected(self):
        with pytest.raises(MalformedReferenceError):
            EntityReference.create(name="", type=EntityType.WIKI)

    def test_builders_report_malformed_references(self):
        with pytest.raises(MalformedReferenceError):
            wiki_reference("")
        with pytest.raises(MalformedReferenceError):
            document_reference("xwiki", ["Main"], "Page", locale="fr-FR")

    def test_invalid_locale_rejected(self):
        doc = document_reference("xwiki", ["Main"], "Page")

        with pytest.raises(MalformedReferenceError, match="not a locale"):
            doc.with_locale("not a locale")

    def test_illegal_replacement_parent_rejected(self):
        attachment = attachment_reference(document_reference("xwiki", ["Main"], "Page"), "a.txt")

        with pytest.raises(MalformedReferenceError):
            attachment.replace_parent(wiki_reference("xwiki"))

    def test_root_locale_has_one_representation(self):
        """The empty locale tag and no locale are the same document."""
        doc = document_reference("xwiki", ["Main"], "Page")

        assert doc.with_locale("").locale is None
        assert doc.with_locale("") == doc
        assert hash(doc.with_locale("")) == hash(doc)

    def test_references_are_immutable(self):
        doc = document_reference("xwiki", ["Main"], "Page")
        with pytest.raises(ValueError):
            doc.name = "Other"

    def test_with_locale_keeps_ancestors(self):
        doc = document_reference("xwiki", ["Main"], "Page")
        translated = doc.with_locale("fr")

        assert translated.locale == "fr"
        assert translated.parent == doc.parent
        assert doc.locale is None

    def test_references_are_hashable(self):
        a = document_reference("xwiki", ["Main"], "Page")
        b = document_reference("xwiki", ["Main"], "Page")

        assert {a: 1}[b] == 1

    def test_split_object_name(self):
        assert split_object_name("XWiki.TagClass[12]") == ("XWiki.TagClass", 12)

        with pytest.raises(MalformedReferenceError):
            split_object_name("XWiki.TagClass")


class TestLocales:
    """Tests for locale tag parsing."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("fr", "fr"),
            ("pt_br", "pt_BR"),
            ("EN_us", "en_US"),
            ("de_DE_POSIX", "de_DE_POSIX"),
            ("", ""),
        ],
    )
    def test_parse(self, text, expected):
        assert parse_locale(text) == expected

    @pytest.mark.parametrize("text", ["12x", "fr-FR", "fr_X1", "_"])
    def test_invalid(self, text):
        with pytest.raises(MalformedReferenceError):
            parse_locale(text)


class TestSerializer:
    """Tests for serializing references to strings and resolving them back."""

    def test_serialize_full_chain(self):
        doc = document_reference("xwiki", ["A", "B"], "Page")

        assert serialize_reference(doc) == "xwiki:A.B.Page"
        assert serialize_reference(attachment_reference(doc, "a.txt")) == "xwiki:A.B.Page@a.txt"
        assert serialize_local(doc.parent) == "A.B"

    def test_serialize_object_and_property(self):
        doc = document_reference("xwiki", ["Main"], "Page")
        obj = object_reference(doc, "XWiki.TagClass", 0)

        assert serialize_reference(obj) == "xwiki:Main.Page^XWiki\\.TagClass[0]"
        assert serialize_reference(object_property_reference(obj, "tags")) == (
            "xwiki:Main.Page^XWiki\\.TagClass[0].tags"
        )

    def test_separators_in_names_are_escaped(self):
        space = space_reference("xwiki", ["A.B", "C"])

        text = serialize_reference(space)

        assert text == "xwiki:A\\.B.C"
        assert resolve_string(text, EntityType.SPACE) == space

    def test_resolve_relative_to_parent(self):
        wiki = wiki_reference("mywiki")

        resolved = resolve_string("A.B", EntityType.SPACE, wiki)

        assert resolved == space_reference("mywiki", ["A", "B"])

    def test_resolve_uses_closest_legal_ancestor(self):
        doc = document_reference("mywiki", ["Main"], "Page")

        resolved = resolve_string("Other", EntityType.DOCUMENT, doc)

        assert resolved == document_reference("mywiki", ["Main"], "Other")

    def test_resolve_fills_defaults(self):
        assert resolve_string("Page", EntityType.DOCUMENT) == (
            document_reference("xwiki", ["Main"], "Page")
        )

    def test_resolve_empty_document_is_space_home(self):
        space = space_reference("xwiki", ["A", "B"])

        assert resolve_string("", EntityType.DOCUMENT, space) == (
            document_reference("xwiki", ["A", "B"], "WebHome")
        )

    def test_resolve_attachment(self):
        resolved = resolve_string("xwiki:Main.Page@a.txt", EntityType.ATTACHMENT)

        assert resolved == attachment_reference(
            document_reference("xwiki", ["Main"], "Page"), "a.txt"
        )

    def test_attachment_names_keep_dots(self):
        """Only separators that may follow a segment are escaped in its name."""
        attachment = attachment_reference(
            document_reference("xwiki", ["Main"], "Page"), "report.v2@draft.txt"
        )

        text = serialize_reference(attachment)

        assert text == "xwiki:Main.Page@report.v2@draft.txt"
        assert resolve_string(text, EntityType.ATTACHMENT) == attachment

    def test_resolve_relative_attachment(self):
        doc = document_reference("xwiki", ["Main"], "Page")

        assert resolve_string("a.tar.gz", EntityType.ATTACHMENT, doc) == (
            attachment_reference(doc, "a.tar.gz")
        )

    def test_property_names_keep_dots(self):
        doc = document_reference("xwiki", ["Main"], "Page")
        prop = object_property_reference(object_reference(doc, "XWiki.TagClass", 0), "a.b")

        text = serialize_reference(prop)

        assert text == "xwiki:Main.Page^XWiki\\.TagClass[0].a.b"
        assert resolve_string(text, EntityType.OBJECT_PROPERTY) == prop

    def test_resolve_object(self):
        doc = document_reference("xwiki", ["Main"], "Page")

        resolved = resolve_string("xwiki:Main.Page^XWiki\\.TagClass[0]", EntityType.OBJECT)

        assert resolved == object_reference(doc, "XWiki.TagClass", 0)

    def test_document_names_escape_attachment_separator(self):
        doc = document_reference("xwiki", ["Main"], "me@home")

        text = serialize_reference(doc)

        assert text == "xwiki:Main.me\\@home"
        assert resolve_string(text, EntityType.DOCUMENT) == doc

    def test_defaults_keep_the_parent_wiki(self):
        resolved = resolve_string("Page", EntityType.DOCUMENT, wiki_reference("mywiki"))

        assert resolved == document_reference("mywiki", ["Main"], "Page")

    def test_resolve_with_injected_config(self):
        config = Settings(default_wiki="dev", default_space="Home")

        assert resolve_string("Page", EntityType.DOCUMENT, config=config) == (
            document_reference("dev", ["Home"], "Page")
        )

    @pytest.mark.parametrize("text", ["a@b", "A..B", "A\\"])
    def test_resolve_malformed(self, text):
        with pytest.raises(MalformedReferenceError):
            resolve_string(text, EntityType.SPACE)


class TestExplicitReferenceResolver:
    """Tests for re-resolving complete references to a given kind."""

    def test_extracts_requested_kind(self):
        doc = document_reference("xwiki", ["Main"], "Page")
        attachment = attachment_reference(doc, "a.txt")

        assert ExplicitReferenceResolver().resolve(attachment, EntityType.DOCUMENT) == doc

    def test_missing_kind(self):
        doc = document_reference("xwiki", ["Main"], "Page")

        with pytest.raises(MalformedReferenceError):
            ExplicitReferenceResolver().resolve(doc, EntityType.ATTACHMENT)

    def test_relative_reference_rejected(self):
        relative = EntityReference(name="Main", type=EntityType.SPACE)

        with pytest.raises(MalformedReferenceError):
            ExplicitReferenceResolver().resolve(relative, EntityType.SPACE)
