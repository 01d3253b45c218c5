"""K3s Ingress exceptions."""

from typing import Optional


class IngressRuleError(Exception):
    """Base exception for ingress rule errors."""

    pass


class RuleAlreadyExistsError(IngressRuleError):
    """Raised when an identical rule (host, path, path type, backend) is already present."""

    def __init__(self, host: str, path: str):
        self.host = host
        self.path = path
        super().__init__("ingress rule already exists")


class TlsConflictError(IngressRuleError):
    """Raised when a host is already bound to a different TLS secret."""

    def __init__(self, host: str, existing_secret: str, requested_secret: str):
        self.host = host
        self.existing_secret = existing_secret
        self.requested_secret = requested_secret
        super().__init__(
            f"tls configuration for hostname already exists: "
            f"{host} uses secret '{existing_secret}', not '{requested_secret}'"
        )


class RuleNotFoundError(IngressRuleError):
    """Raised when a delete matches no rule."""

    def __init__(self, service: str, port: Optional[int] = None):
        self.service = service
        self.port = port
        target = f"{service}:{port}" if port else service
        super().__init__(f"could not find ingress rule for service {target}")


class ResourceNotFoundError(IngressRuleError):
    """Raised when the ingress (or its namespace) does not exist."""

    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        super().__init__(f"{kind} '{name}' not found")


class TransportError(IngressRuleError):
    """Raised when the backing store cannot be read or written."""

    pass


class InvalidOptionError(IngressRuleError, ValueError):
    """Raised when a command line flag fails validation."""

    pass
