import pytest

from openapi_publisher.errors import IllegalExtension, IllegalExtensionDetected
from openapi_publisher.parser.base import Document
from openapi_publisher.reconcile.enforcer import PolicyEnforcer
from openapi_publisher.reconcile.policy import Extensions


def _document(schemas: dict) -> Document:
    return Document.model_validate({
        "openapi": "3.0.1",
        "info": {"title": "Test", "version": "1.0.0"},
        "paths": {},
        "components": {"schemas": schemas},
    })


class TestExtensions:
    def test_publish_include_always_stripped(self):
        policy = Extensions(object_extensions=["x-package"])
        assert policy.object_extensions == {"x-package", "x-publish-include"}

    def test_duplicates_collapse(self):
        policy = Extensions(illegal_extensions=["x-a", "x-a", "x-b"])
        assert policy.illegal_extensions == frozenset({"x-a", "x-b"})

    def test_forces_inclusion(self):
        policy = Extensions(force_include_tag_values=["enricher"])
        assert policy.forces_inclusion("true")
        assert policy.forces_inclusion(" mr ,enricher ")
        assert not policy.forces_inclusion("mr")
        assert not policy.forces_inclusion(None)


class TestPrune:
    def test_removes_unreachable(self):
        doc = _document({"A": {}, "B": {}, "C": {}})
        unused = PolicyEnforcer(Extensions()).prune(doc, {"A", "C"})
        assert unused == ["B"]
        assert list(doc.schemas) == ["A", "C"]


class TestIllegalExtensions:
    def test_clean_document_passes(self):
        doc = _document({"A": {"type": "object", "x-package": "p"}})
        PolicyEnforcer(Extensions(illegal_extensions=["x-property-ref"])).detect_illegal_extensions(doc)

    def test_reports_every_violation(self):
        doc = _document({
            "Top": {"type": "object", "x-property-ref": "a"},
            "Prop": {"properties": {"p": {"type": "string", "x-property-ref": "b"}}},
            "Map": {
                "properties": {
                    "m": {
                        "type": "object",
                        "additionalProperties": {"type": "object", "x-property-ref": "c"},
                    },
                },
            },
            "Composed": {"allOf": [{"oneOf": [{"properties": {"q": {"x-internal": True}}}]}]},
            "Clean": {"type": "object"},
        })
        enforcer = PolicyEnforcer(Extensions(illegal_extensions=["x-property-ref", "x-internal"]))
        with pytest.raises(IllegalExtensionDetected) as excinfo:
            enforcer.detect_illegal_extensions(doc)

        assert excinfo.value.violations == [
            IllegalExtension("Top", "x-property-ref"),
            IllegalExtension("Prop", "x-property-ref"),
            IllegalExtension("Map", "x-property-ref"),
            IllegalExtension("Composed", "x-internal"),
        ]
        assert "illegal extension: x-internal in schema Composed" in str(excinfo.value)


class TestRename:
    def test_rename_with_required_and_no_description(self):
        doc = _document({
            "Org": {
                "type": "object",
                "required": ["organisationId", "name"],
                "properties": {
                    "organisationId": {"type": "string", "format": "uuid", "x-basename": "oId"},
                    "name": {"type": "string"},
                },
            },
        })
        PolicyEnforcer(Extensions()).rename_shortened_properties(doc)

        org = doc.schemas["Org"]
        assert set(org.properties) == {"oId", "name"}
        assert org.required == ["name", "oId"]
        renamed = org.properties["oId"]
        assert renamed.description == "organisationId"
        assert "x-basename" not in renamed.extensions
        assert renamed.model_extra == {"format": "uuid"}

    def test_rename_keeps_description(self):
        doc = _document({
            "Org": {"properties": {"organisationId": {"description": "the org", "x-basename": "oId"}}},
        })
        PolicyEnforcer(Extensions()).rename_shortened_properties(doc)
        assert doc.schemas["Org"].properties["oId"].description == "(organisationId) - the org"

    def test_rename_not_required_stays_not_required(self):
        doc = _document({
            "Org": {"required": ["name"], "properties": {"name": {}, "longName": {"x-basename": "ln"}}},
        })
        PolicyEnforcer(Extensions()).rename_shortened_properties(doc)
        assert doc.schemas["Org"].required == ["name"]

    def test_rename_inside_compositions_and_additional_properties(self):
        doc = _document({
            "Org": {
                "allOf": [{"properties": {"longName": {"x-basename": "ln"}}}],
                "additionalProperties": {"properties": {"otherName": {"x-basename": "on"}}},
            },
        })
        PolicyEnforcer(Extensions()).rename_shortened_properties(doc)
        org = doc.schemas["Org"]
        assert list(org.all_of[0].properties) == ["ln"]
        assert list(org.additional_properties.properties) == ["on"]


class TestStrip:
    def test_object_extensions_removed(self):
        doc = _document({"A": {"type": "object", "x-package": "p", "x-publish-include": "true", "x-keep": 1}})
        PolicyEnforcer(Extensions(object_extensions=["x-package"])).strip_extensions(doc)
        assert doc.schemas["A"].extensions == {"x-keep": 1}

    def test_property_extensions_removed_with_recursion(self):
        doc = _document({
            "A": {
                "properties": {"p": {"x-basename": "q", "x-keep": 1}},
                "oneOf": [{"x-package": "p", "properties": {"r": {"x-basename": "s"}}}],
            },
        })
        policy = Extensions(object_extensions=["x-package"], property_extensions=["x-basename"])
        PolicyEnforcer(policy).strip_extensions(doc)

        a = doc.schemas["A"]
        assert a.properties["p"].extensions == {"x-keep": 1}
        assert a.one_of[0].extensions == {}
        assert a.one_of[0].properties["r"].extensions == {}

    def test_no_recursion_without_property_extensions(self):
        doc = _document({"A": {"allOf": [{"x-package": "p"}]}})
        PolicyEnforcer(Extensions(object_extensions=["x-package"])).strip_extensions(doc)
        assert doc.schemas["A"].all_of[0].extensions == {"x-package": "p"}
