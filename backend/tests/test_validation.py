"""
AssetVault Backend — Validation Layer Unit Tests
==================================================

What:  Tests for the asset/auth schemas as run through the validation service.

What we test:
    ✅ A complete body passes; unknown extra fields are ignored
    ✅ Enum membership (type "Spaceship" rejected)
    ✅ Strict JSON typing (numeric strings and booleans are not numbers)
    ✅ Every violation is reported, with dot-joined field paths
    ✅ PATCH rules: nonempty subset, no nulls, same per-field rules
    ✅ build_update_document output
"""

import pytest

from assetvault.exceptions import ValidationError
from assetvault.models.asset import AssetCategory, AssetType
from assetvault.schemas.auth import RegisterRequest
from assetvault.services.validation import (
    ROOT_FIELD,
    build_update_document,
    collect_violations,
    validate_asset_create,
    validate_asset_update,
    validate_payload,
)


def _fields(violations):
    return {v.field for v in violations}


def _fields_from_dicts(violations):
    return {v["field"] for v in violations}


class TestAssetCreateValidation:

    def test_valid_payload(self, sample_asset_payload):
        data = validate_asset_create(sample_asset_payload)
        assert data.type is AssetType.MODEL_3D
        assert data.category is AssetCategory.UNITY
        assert data.images[0].type is None
        assert data.images[1].type == "png"

    def test_extra_fields_ignored(self, sample_asset_payload):
        sample_asset_payload["id"] = "client-chosen"
        sample_asset_payload["addedAt"] = 1
        data = validate_asset_create(sample_asset_payload)
        assert not hasattr(data, "addedAt")

    def test_unknown_type_rejected(self, sample_asset_payload):
        sample_asset_payload["type"] = "Spaceship"
        with pytest.raises(ValidationError) as exc_info:
            validate_asset_create(sample_asset_payload)
        assert [v["field"] for v in exc_info.value.violations] == ["type"]

    def test_missing_field_reported(self, sample_asset_payload):
        del sample_asset_payload["category"]
        assert _fields(collect_violations(sample_asset_payload)) == {"category"}

    def test_all_violations_reported(self, sample_asset_payload):
        sample_asset_payload["title"] = 42
        sample_asset_payload["category"] = "Godot"
        sample_asset_payload["images"][1]["width"] = "512"
        assert _fields(collect_violations(sample_asset_payload)) == {
            "title",
            "category",
            "images.1.width",
        }

    def test_boolean_is_not_a_number(self, sample_asset_payload):
        sample_asset_payload["images"][0]["height"] = True
        assert _fields(collect_violations(sample_asset_payload)) == {"images.0.height"}

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_is_not_a_number(self, sample_asset_payload, value):
        sample_asset_payload["images"][0]["width"] = value
        violations = collect_violations(sample_asset_payload)
        assert _fields(violations) == {"images.0.width"}
        assert violations[0].reason.endswith("finite number")

    def test_float_dimensions_accepted(self, sample_asset_payload):
        sample_asset_payload["images"][0]["height"] = 720.5
        assert collect_violations(sample_asset_payload) == []

    def test_tag_shape_enforced(self, sample_asset_payload):
        sample_asset_payload["tags"] = [{"name": "nature"}]
        assert _fields(collect_violations(sample_asset_payload)) == {"tags.0.path"}

    def test_non_object_body(self):
        violations = collect_violations(["not", "an", "object"])
        assert _fields(violations) == {ROOT_FIELD}


class TestAssetUpdateValidation:

    def test_single_field(self):
        update = validate_asset_update({"category": "UE4"})
        assert update.model_fields_set == {"category"}

    def test_empty_body_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_asset_update({})
        assert exc_info.value.violations[0]["field"] == ROOT_FIELD

    def test_only_unknown_fields_rejected(self):
        with pytest.raises(ValidationError):
            validate_asset_update({"addedAt": 5})

    def test_null_rejected(self):
        violations = collect_violations({"title": None}, partial=True)
        assert _fields(violations) == {"title"}

    def test_present_fields_keep_their_rules(self):
        violations = collect_violations({"type": "Spaceship", "title": "ok"}, partial=True)
        assert _fields(violations) == {"type"}

    def test_update_document_contains_only_sent_fields(self):
        update = validate_asset_update({
            "category": "UE4",
            "images": [{"url": "u", "height": 1, "width": 2}],
        })
        assert build_update_document(update) == {
            "category": "UE4",
            "images": [{"url": "u", "height": 1, "width": 2}],
        }


class TestRegisterValidation:

    def test_short_password_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_payload(RegisterRequest, {"username": "designer01", "password": "abc123"})
        assert [v["field"] for v in exc_info.value.violations] == ["password"]

    def test_username_bounds(self):
        with pytest.raises(ValidationError):
            validate_payload(RegisterRequest, {"username": "short", "password": "longenough"})
        with pytest.raises(ValidationError):
            validate_payload(RegisterRequest, {"username": "x" * 21, "password": "longenough"})

    def test_violations_in_context(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_payload(RegisterRequest, {})
        assert _fields_from_dicts(exc_info.value.context["violations"]) == {"username", "password"}

