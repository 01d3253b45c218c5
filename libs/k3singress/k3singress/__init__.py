"""
K3s Ingress - CLI tool to add and remove Kubernetes ingress rules

Keeps one Ingress per name: rules are merged into it on set, pruned on
delete, and the Ingress is removed together with its last rule.
"""

__version__ = "0.1.0"

from .types import (
    PathType,
    Disposition,
    PathRule,
    HostRules,
    TlsEntry,
    Snapshot,
    MergeResult,
)

from .errors import (
    IngressRuleError,
    RuleAlreadyExistsError,
    TlsConflictError,
    RuleNotFoundError,
    ResourceNotFoundError,
    TransportError,
    InvalidOptionError,
)

from .engine import (
    add_rule,
    delete_rule,
)

from .store import (
    IngressClient,
    IngressStore,
)

from .config import (
    K3sIngressConfig,
    load_config,
)

__all__ = [
    # Types
    "PathType",
    "Disposition",
    "PathRule",
    "HostRules",
    "TlsEntry",
    "Snapshot",
    "MergeResult",
    # Errors
    "IngressRuleError",
    "RuleAlreadyExistsError",
    "TlsConflictError",
    "RuleNotFoundError",
    "ResourceNotFoundError",
    "TransportError",
    "InvalidOptionError",
    # Engine
    "add_rule",
    "delete_rule",
    # Store
    "IngressClient",
    "IngressStore",
    # Config
    "K3sIngressConfig",
    "load_config",
]
