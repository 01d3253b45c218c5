"""
Rule merge engine for K3s Ingress.

Applies one mutation (add a rule, or delete the rules of a backend) to an
ingress snapshot. Every function here works on a copy of its input: a
failing operation raises before anything is returned, so the caller's
snapshot is never partially modified.
"""

from typing import List, Optional

from .errors import RuleAlreadyExistsError, RuleNotFoundError, TlsConflictError
from .types import Disposition, HostRules, MergeResult, PathRule, Snapshot, TlsEntry


def find_host_rules(snapshot: Snapshot, host: str) -> Optional[HostRules]:
    """
    Find the rules entry for a host.

    Host comparison is exact and case-sensitive; wildcard hosts such as
    '*.example.com' are plain strings here.
    """
    for host_rules in snapshot.rules:
        if host_rules.host == host:
            return host_rules
    return None


def find_tls_entry(snapshot: Snapshot, host: str) -> Optional[TlsEntry]:
    """Find the TLS entry that terminates a host."""
    for entry in snapshot.tls:
        if host in entry.hosts:
            return entry
    return None


def bind_tls_host(snapshot: Snapshot, host: str, secret_name: str) -> None:
    """
    Bind host to secret_name in place.

    Raises:
        TlsConflictError: If the host is already bound to another secret
    """
    existing = find_tls_entry(snapshot, host)
    if existing is not None:
        if existing.secret_name != secret_name:
            raise TlsConflictError(host, existing.secret_name, secret_name)
        return

    for entry in snapshot.tls:
        if entry.secret_name == secret_name:
            entry.hosts.append(host)
            return

    snapshot.tls.append(TlsEntry(secret_name=secret_name, hosts=[host]))


def prune_tls(snapshot: Snapshot) -> None:
    """Drop TLS hosts without rules, then TLS entries without hosts (in place)."""
    live_hosts = set(snapshot.hosts)
    pruned: List[TlsEntry] = []
    for entry in snapshot.tls:
        entry.hosts = [h for h in entry.hosts if h in live_hosts]
        if entry.hosts:
            pruned.append(entry)
    snapshot.tls = pruned


def add_rule(
    snapshot: Snapshot,
    host: str,
    rule: PathRule,
    tls_secret: Optional[str] = None,
) -> MergeResult:
    """
    Add a path rule for a host, optionally binding the host to a TLS secret.

    The rule is appended to the existing entry for the host, or a new host
    entry is appended at the end. TLS is only touched when both the host
    and the secret are non-empty.

    Args:
        snapshot: Current ingress state (not modified)
        host: Host the rule applies to ('' for any host)
        rule: Path rule to add
        tls_secret: Optional TLS secret name for the host

    Returns:
        MergeResult with the new snapshot and HOST_ADDED or PATH_ADDED

    Raises:
        RuleAlreadyExistsError: If an identical rule exists for the host
        TlsConflictError: If the host is TLS-bound to a different secret
    """
    result = snapshot.copy()
    new_rule = PathRule(rule.path, rule.path_type, rule.backend_service, rule.backend_port)

    host_rules = find_host_rules(result, host)
    if host_rules is None:
        result.rules.append(HostRules(host=host, paths=[new_rule]))
        disposition = Disposition.HOST_ADDED
    else:
        if any(p.key == new_rule.key for p in host_rules.paths):
            raise RuleAlreadyExistsError(host, rule.path)
        host_rules.paths.append(new_rule)
        disposition = Disposition.PATH_ADDED

    if tls_secret and host:
        bind_tls_host(result, host, tls_secret)

    return MergeResult(snapshot=result, disposition=disposition)


def delete_rule(
    snapshot: Snapshot,
    service: str,
    port: Optional[int] = None,
) -> MergeResult:
    """
    Delete every path rule that points at a backend service.

    Hosts left without paths are dropped, and so are their TLS bindings.
    When no host is left, the disposition is RESOURCE_DELETED and the
    whole ingress should be removed rather than written back empty.

    Args:
        snapshot: Current ingress state (not modified)
        service: Backend service name
        port: Backend port; None or 0 matches every port

    Returns:
        MergeResult with the new snapshot and UPDATED or RESOURCE_DELETED

    Raises:
        RuleNotFoundError: If no rule matched and rules remain
    """
    result = snapshot.copy()
    changed = False
    remaining: List[HostRules] = []

    for host_rules in result.rules:
        kept = [p for p in host_rules.paths if not p.matches_backend(service, port)]
        if len(kept) != len(host_rules.paths):
            changed = True
        if kept:
            host_rules.paths = kept
            remaining.append(host_rules)

    result.rules = remaining

    if not result.rules:
        result.tls = []
        return MergeResult(snapshot=result, disposition=Disposition.RESOURCE_DELETED)

    if not changed:
        raise RuleNotFoundError(service, port)

    prune_tls(result)
    return MergeResult(snapshot=result, disposition=Disposition.UPDATED)
