"""Tests for response classification."""

import pytest

from instagram_connector.errors import ApiError, MalformedResponse
from instagram_connector.models import ApiResponse, ErrorEnvelope, SuccessEnvelope, classify


def test_classify_success():
    payload = {"meta": {"code": 200}, "data": [{"id": "1"}], "pagination": {"next_url": "x"}}

    result = classify(payload, rate_limit_remaining=4999)

    assert isinstance(result, ApiResponse)
    assert result.payload is payload
    assert result.data == [{"id": "1"}]
    assert result.pagination == {"next_url": "x"}
    assert result["meta"] == {"code": 200}
    assert result.status.code == 200
    assert result.status.error_type is None
    assert result.status.error_message is None
    assert result.status.rate_limit_remaining == 4999


def test_classify_error_envelope():
    payload = {"code": 400, "error_type": "OAuthException", "error_message": "bad token"}

    with pytest.raises(ApiError) as exc_info:
        classify(payload, rate_limit_remaining=10)

    err = exc_info.value
    assert err.code == 400
    assert err.error_type == "OAuthException"
    assert err.error_message == "bad token"
    assert err.status.code == 400
    assert err.status.rate_limit_remaining == 10


def test_success_wins_over_error_keys():
    result = classify({"meta": {"code": 200}, "code": 400})

    assert result.status.code == 200


@pytest.mark.parametrize("payload", [None, [], "text", {"data": []}, 42])
def test_classify_malformed(payload):
    with pytest.raises(MalformedResponse):
        classify(payload)


def test_meta_must_be_an_object():
    with pytest.raises(MalformedResponse):
        SuccessEnvelope.parse({"meta": "ok"})


def test_error_envelope_with_non_numeric_code():
    with pytest.raises(MalformedResponse):
        ErrorEnvelope.parse({"code": "nope"})


def test_error_envelope_missing_fields():
    envelope = ErrorEnvelope.parse({"code": "429"})

    assert envelope == ErrorEnvelope(code=429, error_type=None, error_message=None)


def test_meta_without_code_is_success():
    result = classify({"meta": {}, "data": {"id": "1"}})

    assert result.data == {"id": "1"}
    assert result.status.code is None
    assert result.status.error_type is None
