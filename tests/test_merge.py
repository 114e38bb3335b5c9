"""Tests for urlshare.merge - merging new parameters into search and hash parameters."""

import pytest

from urlshare.merge import UpdatedParameters, update_url_parameters
from urlshare.params import ABSENT


class TestUpdateUrlParameters:
    def test_adds_to_search(self):
        result = update_url_parameters({"new": "1"}, False, {"h": "2"}, {"s": "3"})
        assert result == UpdatedParameters(search_parameters={"s": "3", "new": "1"}, hash_parameters={"h": "2"})

    def test_adds_to_hash(self):
        result = update_url_parameters({"new": "1"}, True, {"h": "2"}, {"s": "3"})
        assert result.search_parameters == {"s": "3"}
        assert result.hash_parameters == {"h": "2", "new": "1"}

    def test_replaces_in_place(self):
        result = update_url_parameters({"b": "new"}, False, {}, {"a": "1", "b": ABSENT, "c": "3"})
        assert list(result.search_parameters.items()) == [("a", "1"), ("b", "new"), ("c", "3")]

    def test_new_keys_follow_request_order(self):
        result = update_url_parameters({"z": "1", "a": ABSENT}, True, {"m": "0"}, {})
        assert list(result.hash_parameters.items()) == [("m", "0"), ("z", "1"), ("a", ABSENT)]

    def test_value_can_become_absent(self):
        result = update_url_parameters({"a": ABSENT}, False, {}, {"a": "1"})
        assert result.search_parameters["a"] is ABSENT

    @pytest.mark.parametrize("to_hash", [True, False])
    def test_removes_conflicting_key_from_other_component(self, to_hash):
        hash_parameters = {"h": "1", "conflict": "old"}
        search_parameters = {"s": "1", "conflict": "old"}
        result = update_url_parameters({"conflict": "new"}, to_hash, hash_parameters, search_parameters)

        target, opposing = (
            (result.hash_parameters, result.search_parameters)
            if to_hash
            else (result.search_parameters, result.hash_parameters)
        )
        assert target["conflict"] == "new"
        assert "conflict" not in opposing

    def test_removes_conflict_even_when_absent_from_target(self):
        result = update_url_parameters({"k": "v"}, True, {}, {"a": "1", "k": ABSENT, "b": "2"})
        assert list(result.search_parameters.items()) == [("a", "1"), ("b", "2")]
        assert result.hash_parameters == {"k": "v"}

    def test_no_new_parameters(self):
        result = update_url_parameters({}, False, {"h": "1"}, {"s": "1"})
        assert result == ({"s": "1"}, {"h": "1"})

    def test_inputs_are_not_modified(self):
        new_parameters = {"a": "new"}
        hash_parameters = {"a": "old"}
        search_parameters = {"s": "1"}
        update_url_parameters(new_parameters, False, hash_parameters, search_parameters)
        assert new_parameters == {"a": "new"}
        assert hash_parameters == {"a": "old"}
        assert search_parameters == {"s": "1"}

    def test_results_are_read_only(self):
        result = update_url_parameters({"a": "1"}, False, {}, {})
        with pytest.raises(TypeError):
            result.search_parameters["b"] = "2"  # type: ignore[index]
