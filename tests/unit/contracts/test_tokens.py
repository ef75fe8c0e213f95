# tests/unit/contracts/test_tokens.py
"""Tests for tree-node token containers."""

from __future__ import annotations

from jsoncontract.contracts.tokens import JsonArray, JsonObject, JsonValue


class TestJsonObject:
    def test_wraps_plain_values(self) -> None:
        node = JsonObject({"a": 1})

        assert node["a"] == JsonValue(1)
        assert node["a"].parent is node

    def test_keeps_existing_tokens(self) -> None:
        child = JsonArray([1, 2])
        node = JsonObject({"items": child})

        assert node["items"] is child
        assert child.parent is node

    def test_delete_detaches_child(self) -> None:
        node = JsonObject({"a": 1})
        child = node["a"]

        del node["a"]

        assert child.parent is None
        assert len(node) == 0


class TestJsonArray:
    def test_insert_and_index(self) -> None:
        node = JsonArray([1])
        node.insert(0, "first")
        node.append(True)

        assert [token.value for token in node] == ["first", 1, True]  # type: ignore[attr-defined]
        assert all(token.parent is node for token in node)

    def test_slice_assignment_adopts_items(self) -> None:
        node = JsonArray([1, 2, 3])

        node[0:2] = ["a", "b"]

        assert node[0] == JsonValue("a")
        assert node[1].parent is node
