"""Tests for the error shape registry and its priority order."""

import dataclasses

import pytest

from errorlens.classification.registry import (
    DEFAULT_REGISTRY,
    GATEWAY_SHAPE,
    GENERIC_SHAPE,
    RAML_SHAPE,
    SAP_SHAPE,
    SF_SHAPE,
    ErrorType,
    ShapeRegistry,
    UNKNOWN_SHAPE,
    require,
)


class TestPriorityOrder:
    """Most specific shapes come first, the loose gateway shape last."""

    def test_default_order(self):
        ids = [s.id for s in DEFAULT_REGISTRY.shapes_in_priority_order()]
        assert ids == ["SAP", "SF", "RAML", "GATEWAY"]

    def test_order_is_stable(self):
        first = DEFAULT_REGISTRY.shapes_in_priority_order()
        second = DEFAULT_REGISTRY.shapes_in_priority_order()
        assert first == second

    def test_generic_is_outside_priority_list(self):
        assert GENERIC_SHAPE not in DEFAULT_REGISTRY.shapes_in_priority_order()
        assert DEFAULT_REGISTRY.generic is GENERIC_SHAPE
        assert DEFAULT_REGISTRY.ids()[-1] == "generic"

    def test_preceding(self):
        assert DEFAULT_REGISTRY.preceding(SAP_SHAPE) == ()
        assert DEFAULT_REGISTRY.preceding(RAML_SHAPE) == (SAP_SHAPE, SF_SHAPE)
        assert DEFAULT_REGISTRY.preceding(GENERIC_SHAPE) == (
            SAP_SHAPE, SF_SHAPE, RAML_SHAPE, GATEWAY_SHAPE,
        )


class TestLookup:
    """Hints resolve by shape id or error type name."""

    @pytest.mark.parametrize(
        "hint,expected",
        [
            ("SAP", SAP_SHAPE),
            ("sap", SAP_SHAPE),
            (" SAP_ERROR ", SAP_SHAPE),
            ("SF_ERROR", SF_SHAPE),
            ("raml", RAML_SHAPE),
            ("GATEWAY_ERROR", GATEWAY_SHAPE),
            ("generic", GENERIC_SHAPE),
        ],
    )
    def test_get_known(self, hint, expected):
        assert DEFAULT_REGISTRY.get(hint) is expected

    @pytest.mark.parametrize("hint", ["ORACLE", "", "auto", None, 7])
    def test_get_unknown(self, hint):
        assert DEFAULT_REGISTRY.get(hint) is None


class TestRegistryConstruction:
    """Shape ids must be unique."""

    def test_duplicate_ids_rejected(self):
        with pytest.raises(ValueError, match="SAP"):
            ShapeRegistry([SAP_SHAPE, SAP_SHAPE])

    def test_reserved_unknown_id_rejected(self):
        with pytest.raises(ValueError, match="unknown"):
            ShapeRegistry([UNKNOWN_SHAPE])

    def test_ids_differing_only_in_case_rejected(self):
        """Hints are case-insensitive, so "sap" would shadow "SAP"."""
        with pytest.raises(ValueError, match="sap"):
            ShapeRegistry([SAP_SHAPE, dataclasses.replace(SAP_SHAPE, id="sap")])

    def test_reserved_id_in_other_case_rejected(self):
        with pytest.raises(ValueError, match="UNKNOWN"):
            ShapeRegistry([dataclasses.replace(UNKNOWN_SHAPE, id="UNKNOWN")])

    def test_preceding_is_case_insensitive(self):
        """A shape is placed by its id regardless of case."""
        renamed = dataclasses.replace(RAML_SHAPE, id="raml")
        assert DEFAULT_REGISTRY.preceding(renamed) == (SAP_SHAPE, SF_SHAPE)

    def test_custom_registry_order(self):
        registry = ShapeRegistry([RAML_SHAPE, SAP_SHAPE])
        assert [s.id for s in registry.shapes_in_priority_order()] == ["RAML", "SAP"]


class TestShapeDefinitions:
    """Each shape carries a type and non-empty fallbacks."""

    def test_error_types(self):
        assert SAP_SHAPE.error_type is ErrorType.SAP
        assert SF_SHAPE.error_type is ErrorType.SF
        assert RAML_SHAPE.error_type is ErrorType.RAML
        assert GATEWAY_SHAPE.error_type is ErrorType.GATEWAY
        assert GENERIC_SHAPE.error_type is ErrorType.UNKNOWN

    def test_fallbacks_never_empty(self):
        for shape in (*DEFAULT_REGISTRY.shapes_in_priority_order(), GENERIC_SHAPE, UNKNOWN_SHAPE):
            for rule in (shape.message, shape.code, shape.details, shape.source):
                assert rule.fallback.strip()

    def test_source_labels(self):
        assert SAP_SHAPE.source_label == "SAP"
        assert SF_SHAPE.source_label == "Salesforce"

    def test_list_requirement(self):
        """A "list" requirement accepts sequences but not strings or mappings."""
        needs_list = require("errorMessage.error", "list")
        assert needs_list.holds({"errorMessage": {"error": [{"message": "x"}]}})
        assert needs_list.holds({"errorMessage": {"error": ()}})
        assert not needs_list.holds({"errorMessage": {"error": "boom"}})
        assert not needs_list.holds({"errorMessage": {"error": {"0": {}}}})
        assert not needs_list.holds({})

    def test_salesforce_requires_error_list(self, sf_payload):
        """The SF shape insists that ``errorMessage.error`` is a list."""
        assert SF_SHAPE.matches(sf_payload)
        keyed = {"errorMessage": {"error": {"0": sf_payload["errorMessage"]["error"][0]}}}
        assert not SF_SHAPE.matches(keyed)

    def test_unknown_requirement_kind_never_holds(self):
        assert not require("message", "number").holds({"message": "x"})

    def test_unknown_shape_never_matches(self):
        assert not UNKNOWN_SHAPE.matches({"anything": "goes"})
        assert not UNKNOWN_SHAPE.matches("text")
