"""Tests for k3singress command line option validation."""

import pytest

from k3singress.errors import InvalidOptionError
from k3singress.options import (
    create_options,
    validate_host,
    validate_path,
    validate_port,
)
from k3singress.types import PathRule, PathType


class TestValidateHost:
    @pytest.mark.parametrize("host", [
        "example.com",
        "foo.example.com",
        "*.example.com",
        "my-app_1.example.co.uk",
        "",
    ])
    def test_valid(self, host):
        assert validate_host(host) == host

    @pytest.mark.parametrize("host", [
        "localhost",
        "foo bar.com",
        "example.c",
        "http://example.com",
    ])
    def test_invalid(self, host):
        with pytest.raises(InvalidOptionError):
            validate_host(host)


class TestValidatePath:
    def test_absolute_path(self):
        assert validate_path("/api/v1") == "/api/v1"

    def test_query_dropped(self):
        assert validate_path("/foo?bar=1") == "/foo"

    def test_full_uri(self):
        assert validate_path("https://example.com/foo") == "/foo"

    @pytest.mark.parametrize("path", ["", "foo", "api/v1"])
    def test_invalid(self, path):
        with pytest.raises(InvalidOptionError):
            validate_path(path)


class TestValidatePort:
    def test_valid(self):
        assert validate_port(80, required=True) == 80
        assert validate_port(65535, required=True) == 65535

    @pytest.mark.parametrize("port", [-1, 65536, 100000])
    def test_out_of_range(self, port):
        with pytest.raises(InvalidOptionError, match="Invalid port"):
            validate_port(port, required=False)

    def test_required(self):
        with pytest.raises(InvalidOptionError, match="No port"):
            validate_port(0, required=True)
        with pytest.raises(InvalidOptionError):
            validate_port(None, required=True)

    def test_optional_zero_is_unset(self):
        assert validate_port(0, required=False) is None
        assert validate_port(None, required=False) is None


class TestCreateOptions:
    def test_set_defaults(self):
        options = create_options("set", "web", service="svcA", port=80)

        assert options.command == "set"
        assert options.host == ""
        assert options.path == "/"
        assert options.path_type == PathType.PREFIX
        assert options.tls_secret is None
        assert options.to_path_rule() == PathRule("/", PathType.PREFIX, "svcA", 80)

    def test_set_full(self):
        options = create_options(
            "SET",
            "web",
            service="svcA",
            port=8080,
            host="*.example.com",
            path="/api",
            path_type="exact",
            tls_secret="wildcard-tls",
            ingress_class="traefik",
        )

        assert options.command == "set"
        assert options.host == "*.example.com"
        assert options.path_type == PathType.EXACT
        assert options.tls_secret == "wildcard-tls"
        assert options.ingress_class == "traefik"

    def test_invalid_path_type(self):
        with pytest.raises(InvalidOptionError, match="path-type"):
            create_options("set", "web", service="svcA", port=80, path_type="regex")

    def test_delete_ignores_set_flags(self):
        options = create_options("delete", "web", service="svcA", host="not a host")

        assert options.port is None
        assert options.host == ""

    def test_delete_with_port(self):
        options = create_options("delete", "web", service="svcA", port=443)
        assert options.port == 443

    def test_unknown_command(self):
        with pytest.raises(InvalidOptionError, match="unknown command"):
            create_options("get", "web", service="svcA")

    def test_missing_service(self):
        with pytest.raises(InvalidOptionError):
            create_options("set", "web", service="", port=80)

    def test_missing_ingress_name(self):
        with pytest.raises(InvalidOptionError):
            create_options("delete", "", service="svcA")

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            create_options("set", "web", service="svcA", port=0)
