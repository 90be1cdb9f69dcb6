"""Tests for key-value request schemas."""

from __future__ import annotations

from pydantic import ValidationError
import pytest

from remote_kv.features.kv.schemas import KeysResponse, OkResponse, SetRequest


@pytest.mark.unit
class TestSetRequest:
    def test_valid_body(self):
        body = SetRequest.model_validate({"key": "a", "value": "1", "user": "alice"})

        assert (body.key, body.value, body.user) == ("a", "1", "alice")

    def test_user_optional(self):
        assert SetRequest.model_validate({"key": "a", "value": "1"}).user is None

    def test_empty_value_allowed(self):
        assert SetRequest.model_validate({"key": "a", "value": ""}).value == ""

    def test_unknown_fields_ignored(self):
        body = SetRequest.model_validate({"key": "a", "value": "1", "ttl": 5})
        assert body.key == "a"

    @pytest.mark.parametrize("value", [1, 1.5, True, None, ["x"], {"x": 1}])
    def test_value_must_be_string(self, value):
        with pytest.raises(ValidationError):
            SetRequest.model_validate({"key": "a", "value": value})

    def test_value_required(self):
        with pytest.raises(ValidationError):
            SetRequest.model_validate({"key": "a"})

    @pytest.mark.parametrize("key", ["", None, 0, False])
    def test_falsy_key_rejected(self, key):
        with pytest.raises(ValidationError):
            SetRequest.model_validate({"key": key, "value": "1"})

    def test_key_required(self):
        with pytest.raises(ValidationError):
            SetRequest.model_validate({"value": "1"})

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (42, "42"),
            (3.0, "3"),
            (2.5, "2.5"),
            (True, "true"),
            (-7, "-7"),
            (1e20, "100000000000000000000"),
            (1e21, "1e+21"),
            (10**21, "1e+21"),
            (1.5e-7, "1.5e-7"),
            (0.000001, "0.000001"),
            (-2.5e-8, "-2.5e-8"),
            (1.2345e30, "1.2345e+30"),
            (0.1, "0.1"),
            (2**53 + 1, "9007199254740992"),
        ],
    )
    def test_scalar_key_coerced_to_text(self, raw, expected):
        assert SetRequest.model_validate({"key": raw, "value": "v"}).key == expected

    @pytest.mark.parametrize("user", ["", None, 0, False])
    def test_falsy_user_is_shared_namespace(self, user):
        assert SetRequest.model_validate({"key": "a", "value": "v", "user": user}).user is None

    def test_numeric_user_coerced(self):
        assert SetRequest.model_validate({"key": "a", "value": "v", "user": 7}).user == "7"

    @pytest.mark.parametrize("number", [float("nan"), float("inf"), 10**400])
    def test_unrepresentable_number_key_rejected(self, number):
        with pytest.raises(ValidationError):
            SetRequest.model_validate({"key": number, "value": "v"})

    @pytest.mark.parametrize("bad", [["a"], {"a": 1}])
    def test_structured_key_or_user_rejected(self, bad):
        with pytest.raises(ValidationError):
            SetRequest.model_validate({"key": bad, "value": "v"})
        with pytest.raises(ValidationError):
            SetRequest.model_validate({"key": "a", "value": "v", "user": bad})


@pytest.mark.unit
def test_response_shapes():
    assert OkResponse().model_dump() == {"ok": True}
    assert KeysResponse().model_dump() == {"keys": []}
