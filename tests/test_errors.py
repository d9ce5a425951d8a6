"""Tests for wren.errors — exception hierarchy and error messages."""

import pytest

from wren.errors import (
    BadRequest,
    ConfigurationError,
    DuplicateRoute,
    HTTPError,
    InvalidPattern,
    PayloadTooLarge,
    RouteAmbiguity,
    WrenError,
)


class TestHierarchy:
    @pytest.mark.parametrize("cls", [InvalidPattern, DuplicateRoute, RouteAmbiguity])
    def test_registration_errors_are_configuration_errors(self, cls: type) -> None:
        assert issubclass(cls, ConfigurationError)
        assert issubclass(cls, WrenError)

    def test_http_errors(self) -> None:
        assert issubclass(BadRequest, HTTPError)
        assert issubclass(PayloadTooLarge, HTTPError)
        assert issubclass(HTTPError, WrenError)


class TestMessages:
    def test_invalid_pattern(self) -> None:
        exc = InvalidPattern("/a/{}", "bad variable name ''")
        assert exc.pattern == "/a/{}"
        assert str(exc) == "Invalid route pattern '/a/{}': bad variable name ''"

    def test_duplicate_route(self) -> None:
        exc = DuplicateRoute("GET", "/api")
        assert str(exc) == "Route GET '/api' is already registered."

    def test_route_ambiguity(self) -> None:
        exc = RouteAmbiguity("GET", "/users/me", "/users/{id}", "/users/me")
        assert exc.existing == "/users/{id}"
        assert "both match '/users/me'" in str(exc)

    def test_http_error_str(self) -> None:
        assert str(HTTPError(status=418)) == "418"
        assert str(BadRequest("nope")) == "400: nope"

    def test_payload_too_large(self) -> None:
        exc = PayloadTooLarge(1024)
        assert exc.status == 413
        assert "1024" in exc.detail

    def test_http_error_can_be_raised(self) -> None:
        with pytest.raises(HTTPError) as exc_info:
            raise BadRequest("Malformed JSON body.")
        assert exc_info.value.status == 400
