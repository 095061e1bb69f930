"""Tests for the API Gateway proxy handler."""

import json

import pytest

from iplookup.exceptions import UpstreamError
from iplookup.lambda_handler import handler

from conftest import FakeProvider


def event(method="GET", ip="8.8.8.8"):
    e = {"httpMethod": method, "path": f"/ip/{ip}", "pathParameters": {"ip": ip}}
    if ip is None:
        e["pathParameters"] = None
        e["path"] = "/ip"
    return e


class TestHandler:
    def test_get(self, provider: FakeProvider):
        resp = handler(event(), None, provider=provider)
        assert resp["statusCode"] == 200
        assert resp["headers"]["Content-Type"] == "application/json"
        assert json.loads(resp["body"])["ip"] == "8.8.8.8"

    @pytest.mark.parametrize("method", ["POST", "DELETE"])
    def test_wrong_method(self, provider: FakeProvider, method: str):
        resp = handler(event(method=method), None, provider=provider)
        assert resp["statusCode"] == 405
        assert resp["headers"]["Allow"] == "GET"
        assert method in json.loads(resp["body"])["message"]
        assert provider.calls == []

    def test_missing_path_parameters(self, provider: FakeProvider):
        resp = handler(event(ip=None), None, provider=provider)
        assert resp["statusCode"] == 400
        assert json.loads(resp["body"])["error"] == "missing_ip"
        assert provider.calls == []

    def test_lookup_miss(self, provider: FakeProvider):
        resp = handler(event(ip="127.0.0.1"), None, provider=provider)
        assert resp["statusCode"] == 200
        body = json.loads(resp["body"])
        assert body["ip"] == "127.0.0.1"
        assert body["city"] is None

    def test_upstream_failure(self):
        resp = handler(event(), None, provider=FakeProvider(error=UpstreamError("down")))
        assert resp["statusCode"] == 502
        assert json.loads(resp["body"])["error"] == "upstream_error"

    def test_unexpected_error_still_answers(self):
        resp = handler(event(), None, provider=FakeProvider(error=RuntimeError("bug")))
        assert resp["statusCode"] == 500
        assert json.loads(resp["body"])["error"] == "internal_error"
