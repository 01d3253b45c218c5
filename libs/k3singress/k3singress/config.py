"""
Configuration for K3s Ingress.

Settings come from an optional .k3singress.yaml file, then environment
variables, then command line flags (applied by the CLI).
"""

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

CONFIG_FILENAME = ".k3singress.yaml"

# Environment variable -> config field
ENV_VARS = {
    "K3SINGRESS_NAMESPACE": "namespace",
    "K3SINGRESS_CONTEXT": "context",
    "KUBECONFIG": "kubeconfig",
    "K3SINGRESS_INGRESS_CLASS": "ingress_class",
    "K3SINGRESS_MANIFEST_DIR": "manifest_dir",
}


@dataclass
class K3sIngressConfig:
    """Connection and defaults for one invocation."""
    namespace: str = "default"
    context: Optional[str] = None
    kubeconfig: Optional[str] = None
    ingress_class: Optional[str] = None
    manifest_dir: Optional[str] = None  # Edit YAML manifests instead of a cluster

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> "K3sIngressConfig":
        if not data:
            return cls()
        return cls(
            namespace=data.get("namespace") or "default",
            context=data.get("context"),
            kubeconfig=data.get("kubeconfig"),
            ingress_class=data.get("ingress_class"),
            manifest_dir=data.get("manifest_dir"),
        )

    def merge(self, **overrides: Any) -> "K3sIngressConfig":
        """Return a copy with every non-empty override applied."""
        known = {f.name for f in fields(self)}
        values = {k: v for k, v in overrides.items() if k in known and v}
        return replace(self, **values)


def find_config_file() -> Optional[Path]:
    """
    Find .k3singress.yaml by searching up from current directory.

    Returns:
        Path to the config file or None if not found
    """
    current = Path.cwd()
    for parent in [current] + list(current.parents):
        candidate = parent / CONFIG_FILENAME
        if candidate.exists():
            return candidate
    return None


def load_config(
    path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> K3sIngressConfig:
    """
    Load configuration from file and environment.

    Args:
        path: Optional config file path. Defaults to $K3SINGRESS_CONFIG,
            then .k3singress.yaml searched up from cwd.
        environ: Environment mapping (default: os.environ)

    Returns:
        K3sIngressConfig

    Raises:
        FileNotFoundError: If an explicitly given config file is missing
    """
    if environ is None:
        environ = os.environ

    config_path: Optional[Path] = None
    explicit = path or environ.get("K3SINGRESS_CONFIG")
    if explicit:
        config_path = Path(explicit)
        if not config_path.exists():
            raise FileNotFoundError(f"config file not found at {explicit}")
    else:
        config_path = find_config_file()

    data: Dict[str, Any] = {}
    if config_path:
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{config_path}: expected a mapping")

    cfg = K3sIngressConfig.from_dict(data)
    return cfg.merge(**{field_name: environ.get(var) for var, field_name in ENV_VARS.items()})
