"""
Type definitions for K3s Ingress rules.

These dataclasses model the rules and TLS sections of a Kubernetes
networking.k8s.io/v1 Ingress spec.
"""

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class PathType(str, Enum):
    """Ingress path matching type."""
    PREFIX = "Prefix"
    EXACT = "Exact"
    IMPLEMENTATION_SPECIFIC = "ImplementationSpecific"

    @classmethod
    def parse(cls, value: str) -> "PathType":
        """Parse a path type case-insensitively (e.g. 'prefix' -> PREFIX)."""
        for member in cls:
            if member.value.lower() == str(value).lower():
                return member
        raise ValueError(f"Invalid path type: {value}")


class Disposition(str, Enum):
    """Outcome of a rule mutation."""
    CREATED = "created"
    HOST_ADDED = "host-added"
    PATH_ADDED = "path-added"
    UPDATED = "updated"
    RESOURCE_DELETED = "resource-deleted"


@dataclass
class PathRule:
    """A single path routed to a backend service port."""
    path: str
    path_type: PathType
    backend_service: str
    backend_port: int
    # Path as read from the cluster; written back unchanged (keeps named ports, resource backends)
    raw: Optional[Dict[str, Any]] = field(default=None, compare=False, repr=False)

    @property
    def key(self) -> Tuple[str, PathType, str, int]:
        """Identity of the rule: two rules are the same only if all four match."""
        return (self.path, self.path_type, self.backend_service, self.backend_port)

    def matches_backend(self, service: str, port: Optional[int] = None) -> bool:
        """Check if this rule points at service (and port, unless port is unset/0)."""
        if self.backend_service != service:
            return False
        return not port or self.backend_port == port

    @classmethod
    def from_dict(cls, data: Dict) -> "PathRule":
        service = (data.get("backend") or {}).get("service") or {}
        port = service.get("port") or {}
        return cls(
            path=data.get("path", ""),
            path_type=PathType.parse(data.get("pathType") or PathType.IMPLEMENTATION_SPECIFIC.value),
            backend_service=service.get("name", ""),
            backend_port=int(port.get("number") or 0),
            raw=copy.deepcopy(data),
        )

    def to_dict(self) -> Dict[str, Any]:
        if self.raw is not None:
            return copy.deepcopy(self.raw)
        return {
            "path": self.path,
            "pathType": self.path_type.value,
            "backend": {
                "service": {
                    "name": self.backend_service,
                    "port": {"number": self.backend_port},
                },
            },
        }


@dataclass
class HostRules:
    """Path rules attached to one host. An empty host matches any host."""
    host: str = ""
    paths: List[PathRule] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict) -> "HostRules":
        http = data.get("http") or {}
        return cls(
            host=data.get("host") or "",
            paths=[PathRule.from_dict(p) for p in http.get("paths") or []],
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        # Kubernetes omits the host for catch-all rules
        if self.host:
            result["host"] = self.host
        # A rule without paths is written back without an http block
        if self.paths:
            result["http"] = {"paths": [p.to_dict() for p in self.paths]}
        return result


@dataclass
class TlsEntry:
    """A TLS secret and the hosts it terminates."""
    secret_name: str
    hosts: List[str] = field(default_factory=list)

    def __post_init__(self):
        # Keep first occurrence order, drop duplicates
        self.hosts = list(dict.fromkeys(self.hosts))

    @classmethod
    def from_dict(cls, data: Dict) -> "TlsEntry":
        return cls(
            secret_name=data.get("secretName", ""),
            hosts=list(data.get("hosts") or []),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hosts": list(self.hosts),
            "secretName": self.secret_name,
        }


@dataclass
class Snapshot:
    """Complete routing state of one ingress: host rules plus TLS bindings."""
    rules: List[HostRules] = field(default_factory=list)
    tls: List[TlsEntry] = field(default_factory=list)

    @classmethod
    def from_spec(cls, spec: Optional[Dict]) -> "Snapshot":
        """Build a snapshot from an Ingress spec dict (camelCase keys)."""
        if not spec:
            return cls()
        return cls(
            rules=[HostRules.from_dict(r) for r in spec.get("rules") or []],
            tls=[TlsEntry.from_dict(t) for t in spec.get("tls") or []],
        )

    def to_spec(self) -> Dict[str, Any]:
        """Render the rules and tls parts of an Ingress spec."""
        spec: Dict[str, Any] = {"rules": [r.to_dict() for r in self.rules]}
        if self.tls:
            spec["tls"] = [t.to_dict() for t in self.tls]
        return spec

    def copy(self) -> "Snapshot":
        return copy.deepcopy(self)

    @property
    def hosts(self) -> List[str]:
        """Hosts that currently carry at least one path rule."""
        return [r.host for r in self.rules if r.paths]

    def is_empty(self) -> bool:
        return not self.rules


@dataclass
class MergeResult:
    """New snapshot computed by the merge engine and what happened to it."""
    snapshot: Snapshot
    disposition: Disposition
