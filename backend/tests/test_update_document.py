"""
AssetVault Backend — Update Document Unit Tests
=================================================

What:  Tests for flatten / expand / apply_update.

What we test:
    ✅ Nested records become dot-joined paths, one per leaf
    ✅ Arrays are leaves (never indexed)
    ✅ flatten ∘ expand round trip for array-free input
    ✅ flatten is idempotent on flat input
    ✅ apply_update touches only the named paths and never mutates its input
"""

import copy

from assetvault.services.update_document import apply_update, expand, flatten


class TestFlatten:

    def test_nested_records_join_with_dots(self):
        result = flatten({"a": {"b": {"c": 1}, "d": "x"}, "e": True})
        assert result == {"a.b.c": 1, "a.d": "x", "e": True}

    def test_array_is_a_single_leaf(self):
        result = flatten({"images": [{"url": "a"}]})
        assert result == {"images": [{"url": "a"}]}
        assert list(result) == ["images"]

    def test_null_is_a_leaf(self):
        assert flatten({"a": {"b": None}}) == {"a.b": None}

    def test_empty_record_contributes_nothing(self):
        assert flatten({"a": {}, "b": 1}) == {"b": 1}
        assert flatten({}) == {}

    def test_prefix_is_applied(self):
        assert flatten({"b": 1}, "a") == {"a.b": 1}

    def test_idempotent_on_flat_input(self):
        nested = {"category": "UE4", "meta": {"author": {"name": "kim"}, "rev": 3}}
        once = flatten(nested)
        assert flatten(once) == once

    def test_input_not_mutated(self):
        nested = {"a": {"b": [1, 2]}, "c": "x"}
        snapshot = copy.deepcopy(nested)
        flatten(nested)
        assert nested == snapshot


class TestExpand:

    def test_round_trip_without_arrays(self):
        nested = {
            "title": "Forest",
            "meta": {"author": {"name": "kim", "id": 7}, "draft": False},
            "category": "Misc",
        }
        assert expand(flatten(nested)) == nested


class TestApplyUpdate:

    def setup_method(self):
        self.document = {
            "title": "Forest",
            "category": "Unity",
            "meta": {"author": "kim", "rev": 1},
            "tags": [{"name": "nature", "path": "/tags/nature"}],
        }

    def test_sets_only_named_paths(self):
        result = apply_update(self.document, {"category": "UE4", "meta.rev": 2})
        assert result == {
            "title": "Forest",
            "category": "UE4",
            "meta": {"author": "kim", "rev": 2},
            "tags": [{"name": "nature", "path": "/tags/nature"}],
        }

    def test_array_replaced_whole(self):
        result = apply_update(self.document, {"tags": []})
        assert result["tags"] == []

    def test_creates_missing_intermediate_records(self):
        result = apply_update(self.document, {"extra.deep.value": 1})
        assert result["extra"] == {"deep": {"value": 1}}

    def test_original_document_untouched(self):
        snapshot = copy.deepcopy(self.document)
        apply_update(self.document, {"meta.author": "lee", "tags": []})
        assert self.document == snapshot
