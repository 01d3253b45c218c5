"""
Rule store for K3s Ingress.

Wraps one named Ingress behind a small CRUD client and runs a single
fetch-merge-write cycle per call. There is no retry: two writers racing on
the same ingress can lose an update unless the client rejects stale writes
(the Kubernetes client sends back the fetched resourceVersion, so the API
server answers 409 and a TransportError is raised).
"""

import copy
import logging
from typing import Any, Dict, Optional, Protocol

from .engine import add_rule, delete_rule
from .errors import ResourceNotFoundError
from .types import Disposition, MergeResult, PathRule, Snapshot

logger = logging.getLogger(__name__)

API_VERSION = "networking.k8s.io/v1"


class IngressClient(Protocol):
    """CRUD operations on Ingress manifests within one namespace."""

    namespace: str

    def namespace_exists(self) -> bool: ...

    def get(self, name: str) -> Optional[Dict[str, Any]]:
        """Return the Ingress manifest, or None if it does not exist."""
        ...

    def create(self, manifest: Dict[str, Any]) -> None: ...

    def update(self, manifest: Dict[str, Any]) -> None: ...

    def delete(self, name: str) -> None: ...


class IngressStore:
    """Reads and writes the routing rules of one named Ingress."""

    def __init__(
        self,
        client: IngressClient,
        name: str,
        ingress_class: Optional[str] = None,
    ):
        self.client = client
        self.name = name
        self.ingress_class = ingress_class or None

    @property
    def namespace(self) -> str:
        return self.client.namespace

    def fetch(self) -> Optional[Snapshot]:
        """Get the current snapshot, or None if the ingress does not exist."""
        manifest = self.client.get(self.name)
        if manifest is None:
            return None
        return Snapshot.from_spec(manifest.get("spec"))

    def new_manifest(self, snapshot: Snapshot) -> Dict[str, Any]:
        """Build a complete Ingress manifest for a first create."""
        spec: Dict[str, Any] = {}
        if self.ingress_class:
            spec["ingressClassName"] = self.ingress_class
        spec.update(snapshot.to_spec())

        return {
            "apiVersion": API_VERSION,
            "kind": "Ingress",
            "metadata": {
                "name": self.name,
                "namespace": self.namespace,
            },
            "spec": spec,
        }

    def add_rule(
        self,
        host: str,
        rule: PathRule,
        tls_secret: Optional[str] = None,
    ) -> Disposition:
        """
        Add a rule, creating the ingress if it does not exist yet.

        Returns:
            CREATED for a new ingress, otherwise HOST_ADDED or PATH_ADDED
        """
        manifest = self.client.get(self.name)

        if manifest is None:
            result = add_rule(Snapshot(), host, rule, tls_secret)
            self.client.create(self.new_manifest(result.snapshot))
            logger.info(f"Created ingress {self.namespace}/{self.name}")
            return Disposition.CREATED

        result = add_rule(Snapshot.from_spec(manifest.get("spec")), host, rule, tls_secret)
        self._persist(manifest, result)
        return result.disposition

    def delete_rule(self, service: str, port: Optional[int] = None) -> Disposition:
        """
        Delete the rules pointing at a service (and port, if given).

        Returns:
            UPDATED, or RESOURCE_DELETED when the last rule was removed

        Raises:
            ResourceNotFoundError: If the ingress does not exist
        """
        manifest = self.client.get(self.name)
        if manifest is None:
            raise ResourceNotFoundError("ingress", self.name)

        result = delete_rule(Snapshot.from_spec(manifest.get("spec")), service, port)
        self._persist(manifest, result)
        return result.disposition

    def _persist(self, manifest: Dict[str, Any], result: MergeResult) -> None:
        if result.disposition == Disposition.RESOURCE_DELETED:
            self.client.delete(self.name)
            logger.info(f"Deleted ingress {self.namespace}/{self.name} (no rules left)")
            return

        # Only rules and tls change; metadata, class and defaultBackend are kept
        updated = copy.deepcopy(manifest)
        spec = updated.get("spec") or {}
        updated["spec"] = spec
        spec.pop("tls", None)
        spec.update(result.snapshot.to_spec())

        self.client.update(updated)
        logger.info(f"Updated ingress {self.namespace}/{self.name} ({result.disposition.value})")
