"""
Runs one set/delete invocation against a cluster or a manifest directory.
"""

import logging
from typing import Optional

from .clients import KubernetesIngressClient, ManifestIngressClient
from .config import K3sIngressConfig
from .errors import ResourceNotFoundError
from .options import COMMAND_SET, RuleOptions
from .store import IngressClient, IngressStore
from .types import Disposition

logger = logging.getLogger(__name__)


def build_client(cfg: K3sIngressConfig) -> IngressClient:
    """Pick the manifest directory client when configured, else the cluster."""
    if cfg.manifest_dir:
        return ManifestIngressClient.from_config(cfg)
    return KubernetesIngressClient.from_config(cfg)


def status_message(disposition: Disposition, options: RuleOptions) -> str:
    """One human readable line per outcome."""
    if disposition == Disposition.CREATED:
        return f"Created ingress {options.ingress_name} with rule for backend service: {options.service}"
    if disposition in (Disposition.HOST_ADDED, Disposition.PATH_ADDED):
        return f"Added rule for backend service: {options.service}"
    if disposition == Disposition.RESOURCE_DELETED:
        return (
            f"Removed rule for backend service: {options.service}; "
            f"ingress {options.ingress_name} deleted (no rules left)"
        )
    return f"Removed rule for backend service: {options.service}"


def run(
    options: RuleOptions,
    cfg: K3sIngressConfig,
    client: Optional[IngressClient] = None,
) -> Disposition:
    """
    Apply options to the target ingress and print the outcome.

    Args:
        options: Validated command options
        cfg: Configuration (namespace, cluster access, defaults)
        client: Ingress client override (default: built from cfg)

    Returns:
        Disposition of the change

    Raises:
        IngressRuleError: On any rule, lookup or transport failure
    """
    if client is None:
        client = build_client(cfg)

    if not client.namespace_exists():
        raise ResourceNotFoundError("namespace", client.namespace)
    print(f"Using namespace: {client.namespace}")

    store = IngressStore(
        client,
        options.ingress_name,
        ingress_class=options.ingress_class or cfg.ingress_class,
    )

    if options.command == COMMAND_SET:
        logger.debug(
            f"Adding {options.host or '*'}{options.path} ({options.path_type.value}) "
            f"-> {options.service}:{options.port}"
        )
        disposition = store.add_rule(options.host, options.to_path_rule(), options.tls_secret)
    else:
        logger.debug(f"Deleting rules for {options.service}:{options.port or '*'}")
        disposition = store.delete_rule(options.service, options.port)

    print(status_message(disposition, options))
    return disposition
