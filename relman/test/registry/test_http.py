"""Tests for relman.registry.http."""

from __future__ import annotations

import pytest

from relman.core.result import Err, Ok
from relman.registry.http import HttpClient, HttpError, MockHttpClient, RealHttpClient


class TestHttpError:
    def test_str_with_status(self) -> None:
        error = HttpError(url="https://hub.example/x", status=503, message="Service Unavailable")
        assert str(error) == "HTTP 503: Service Unavailable (https://hub.example/x)"

    def test_str_without_status(self) -> None:
        error = HttpError(url="https://hub.example/x", status=0, message="Connection refused")
        assert str(error) == "Connection refused (https://hub.example/x)"

    def test_is_frozen(self) -> None:
        error = HttpError(url="u", status=404, message="Not Found")
        with pytest.raises(AttributeError):
            error.status = 500  # type: ignore[misc]


class TestMockHttpClient:
    def test_isinstance_check(self) -> None:
        assert isinstance(MockHttpClient(), HttpClient)

    def test_get_json_success(self) -> None:
        client = MockHttpClient()
        client.set_json("https://hub.example/tags", {"results": []})

        assert client.get_json("https://hub.example/tags") == Ok({"results": []})
        assert client.calls == ["https://hub.example/tags"]

    def test_unknown_url_is_404(self) -> None:
        result = MockHttpClient().get_json("https://hub.example/missing")
        assert isinstance(result, Err)
        assert result.error.status == 404

    def test_configured_error(self) -> None:
        client = MockHttpClient()
        client.set_json("u", HttpError(url="u", status=0, message="down"))

        assert client.get_json("u") == Err(HttpError(url="u", status=0, message="down"))


class TestRealHttpClient:
    def test_isinstance_check(self) -> None:
        assert isinstance(RealHttpClient(), HttpClient)

    def test_default_has_no_timeout(self) -> None:
        assert RealHttpClient().timeout is None

    def test_invalid_url_is_an_error(self) -> None:
        result = RealHttpClient().get_json("not a url")
        assert isinstance(result, Err)
        assert result.error.status == 0
