"""
Ingress clients for K3s Ingress.

KubernetesIngressClient talks to a cluster through the official kubernetes
client. ManifestIngressClient edits Ingress manifests stored as YAML files
(<root>/<namespace>/<name>.yaml), e.g. in a GitOps repository.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from kubernetes import client, config
from kubernetes.client.rest import ApiException
from kubernetes.config import ConfigException

from .config import K3sIngressConfig
from .errors import TransportError

logger = logging.getLogger(__name__)


def load_api_client(
    context: Optional[str] = None,
    kubeconfig: Optional[str] = None,
) -> client.ApiClient:
    """
    Build a Kubernetes API client.

    An explicit context or kubeconfig always uses the kubeconfig file.
    Otherwise the in-cluster service account is tried first, falling back
    to the default kubeconfig.

    Raises:
        TransportError: If no usable configuration is found
    """
    try:
        if context or kubeconfig:
            return config.new_client_from_config(config_file=kubeconfig, context=context)

        configuration = client.Configuration()
        try:
            config.load_incluster_config(client_configuration=configuration)
            logger.debug("Loaded in-cluster Kubernetes config")
            return client.ApiClient(configuration)
        except ConfigException:
            logger.debug("Not running in a cluster, loading kubeconfig")
            return config.new_client_from_config()
    except (ConfigException, OSError) as e:
        raise TransportError(f"failed to read kubeconfig: {e}") from e


class KubernetesIngressClient:
    """Ingress CRUD against the networking.k8s.io/v1 API of a cluster."""

    def __init__(
        self,
        namespace: str,
        api_client: Optional[client.ApiClient] = None,
        networking_api: Optional[client.NetworkingV1Api] = None,
        core_api: Optional[client.CoreV1Api] = None,
    ):
        self.namespace = namespace
        self.api_client = api_client or client.ApiClient()
        self.networking_v1 = networking_api or client.NetworkingV1Api(self.api_client)
        self.v1 = core_api or client.CoreV1Api(self.api_client)

    @classmethod
    def from_config(cls, cfg: K3sIngressConfig) -> "KubernetesIngressClient":
        api_client = load_api_client(context=cfg.context, kubeconfig=cfg.kubeconfig)
        return cls(cfg.namespace, api_client=api_client)

    def _ref(self, name: str) -> str:
        return f"{self.namespace}/{name}"

    def namespace_exists(self) -> bool:
        try:
            self.v1.read_namespace(name=self.namespace)
            return True
        except ApiException as e:
            if e.status == 404:
                return False
            raise TransportError(f"failed to read namespace {self.namespace}: {e.reason}") from e

    def get(self, name: str) -> Optional[Dict[str, Any]]:
        try:
            ingress = self.networking_v1.read_namespaced_ingress(name=name, namespace=self.namespace)
        except ApiException as e:
            if e.status == 404:
                logger.debug(f"Ingress {self._ref(name)} does not exist")
                return None
            raise TransportError(f"failed to read ingress {self._ref(name)}: {e.reason}") from e

        logger.debug(f"Fetched Ingress {self._ref(name)}")
        return self.api_client.sanitize_for_serialization(ingress)

    def create(self, manifest: Dict[str, Any]) -> None:
        name = manifest["metadata"]["name"]
        try:
            self.networking_v1.create_namespaced_ingress(namespace=self.namespace, body=manifest)
        except ApiException as e:
            raise TransportError(f"failed to create ingress {self._ref(name)}: {e.reason}") from e
        logger.debug(f"Created Ingress {self._ref(name)}")

    def update(self, manifest: Dict[str, Any]) -> None:
        name = manifest["metadata"]["name"]
        try:
            self.networking_v1.replace_namespaced_ingress(
                name=name,
                namespace=self.namespace,
                body=manifest,
            )
        except ApiException as e:
            raise TransportError(f"failed to update ingress {self._ref(name)}: {e.reason}") from e
        logger.debug(f"Replaced Ingress {self._ref(name)}")

    def delete(self, name: str) -> None:
        try:
            self.networking_v1.delete_namespaced_ingress(name=name, namespace=self.namespace)
        except ApiException as e:
            raise TransportError(f"failed to delete ingress {self._ref(name)}: {e.reason}") from e
        logger.debug(f"Deleted Ingress {self._ref(name)}")


class ManifestIngressClient:
    """Ingress CRUD on YAML manifest files, one file per ingress."""

    def __init__(self, root: str, namespace: str):
        self.root = Path(root)
        self.namespace = namespace

    @classmethod
    def from_config(cls, cfg: K3sIngressConfig) -> "ManifestIngressClient":
        return cls(cfg.manifest_dir, cfg.namespace)

    @property
    def namespace_dir(self) -> Path:
        return self.root / self.namespace

    def path_for(self, name: str) -> Path:
        return self.namespace_dir / f"{name}.yaml"

    def namespace_exists(self) -> bool:
        return self.namespace_dir.is_dir()

    def get(self, name: str) -> Optional[Dict[str, Any]]:
        path = self.path_for(name)
        if not path.exists():
            return None
        try:
            with open(path) as f:
                manifest = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise TransportError(f"failed to read {path}: {e}") from e

        if not isinstance(manifest, dict) or manifest.get("kind") != "Ingress":
            raise TransportError(f"{path} does not contain an Ingress manifest")
        logger.debug(f"Loaded Ingress manifest {path}")
        return manifest

    def _write(self, path: Path, manifest: Dict[str, Any]) -> None:
        try:
            with open(path, "w") as f:
                yaml.dump(manifest, f, default_flow_style=False, sort_keys=False)
        except OSError as e:
            raise TransportError(f"failed to write {path}: {e}") from e

    def create(self, manifest: Dict[str, Any]) -> None:
        path = self.path_for(manifest["metadata"]["name"])
        if path.exists():
            raise TransportError(f"ingress manifest already exists: {path}")
        self._write(path, manifest)
        logger.debug(f"Written: {path}")

    def update(self, manifest: Dict[str, Any]) -> None:
        path = self.path_for(manifest["metadata"]["name"])
        if not path.exists():
            raise TransportError(f"ingress manifest not found: {path}")
        self._write(path, manifest)
        logger.debug(f"Written: {path}")

    def delete(self, name: str) -> None:
        path = self.path_for(name)
        try:
            path.unlink()
        except OSError as e:
            raise TransportError(f"failed to delete {path}: {e}") from e
        logger.debug(f"Removed: {path}")
