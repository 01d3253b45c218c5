"""
Command line option handling for K3s Ingress.

Validates raw flag values and turns them into RuleOptions.
"""

import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlsplit

from .errors import InvalidOptionError
from .types import PathRule, PathType

COMMAND_SET = "set"
COMMAND_DELETE = "delete"

HOST_PATTERN = re.compile(r"^([a-zA-Z0-9-_\*]+\.)*[a-zA-Z0-9][a-zA-Z0-9-_]+\.[a-zA-Z]{2,11}?$")

MAX_PORT = 65535


@dataclass
class RuleOptions:
    """Validated input for one set or delete invocation."""
    command: str
    ingress_name: str
    service: str
    port: Optional[int] = None
    host: str = ""
    path: str = "/"
    path_type: PathType = PathType.PREFIX
    tls_secret: Optional[str] = None
    ingress_class: Optional[str] = None

    def to_path_rule(self) -> PathRule:
        return PathRule(
            path=self.path,
            path_type=self.path_type,
            backend_service=self.service,
            backend_port=self.port or 0,
        )


def validate_host(host: str) -> str:
    """Check a host name; wildcards like '*.example.com' are accepted."""
    if host and not HOST_PATTERN.match(host):
        raise InvalidOptionError(f"Invalid host supplied: {host}")
    return host


def validate_path(path: str) -> str:
    """
    Parse an absolute request path or URI and return its path component.

    Query strings and fragments are dropped ('/foo?a=1' -> '/foo').
    """
    parts = urlsplit(path or "")
    if not (parts.scheme and parts.netloc) and not (path or "").startswith("/"):
        raise InvalidOptionError(f"Invalid path supplied: {path!r}")
    if not parts.path:
        raise InvalidOptionError(f"Invalid path supplied: {path!r}")
    return parts.path


def validate_port(port: Optional[int], required: bool) -> Optional[int]:
    """Check a port number. 0 or None means unset."""
    if port is not None and (port < 0 or port > MAX_PORT):
        raise InvalidOptionError(f"Invalid port supplied: {port}")
    if not port:
        if required:
            raise InvalidOptionError("No port supplied")
        return None
    return port


def validate_path_type(path_type: str) -> PathType:
    try:
        return PathType.parse(path_type)
    except ValueError:
        raise InvalidOptionError(
            f"Invalid path-type supplied: {path_type}; "
            f"accepts: {', '.join(p.value for p in PathType)}"
        ) from None


def create_options(
    command: str,
    ingress_name: str,
    service: str,
    port: Optional[int] = None,
    host: str = "",
    path: str = "/",
    path_type: str = "prefix",
    tls_secret: Optional[str] = None,
    ingress_class: Optional[str] = None,
) -> RuleOptions:
    """
    Validate flags for a command.

    Args:
        command: 'set' or 'delete'
        ingress_name: Name of the target ingress
        service: Backend service name
        port: Backend service port (required for set)
        host: Host for set ('' for any host)
        path: Request path for set
        path_type: prefix, exact or implementationspecific (any case)
        tls_secret: Optional TLS secret for set
        ingress_class: Ingress class used when set creates the ingress

    Returns:
        RuleOptions

    Raises:
        InvalidOptionError: If any value is invalid
    """
    command = (command or "").lower()
    if command not in (COMMAND_SET, COMMAND_DELETE):
        raise InvalidOptionError(
            f'unknown command "{command}"; allowed commands are "{COMMAND_SET}" and "{COMMAND_DELETE}"'
        )
    if not ingress_name:
        raise InvalidOptionError("no ingress name supplied")
    if not service:
        raise InvalidOptionError("No service name supplied")

    if command == COMMAND_DELETE:
        return RuleOptions(
            command=command,
            ingress_name=ingress_name,
            service=service,
            port=validate_port(port, required=False),
        )

    return RuleOptions(
        command=command,
        ingress_name=ingress_name,
        service=service,
        port=validate_port(port, required=True),
        host=validate_host(host or ""),
        path=validate_path(path),
        path_type=validate_path_type(path_type),
        tls_secret=tls_secret or None,
        ingress_class=ingress_class or None,
    )
