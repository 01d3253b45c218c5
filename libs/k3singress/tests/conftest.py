"""Shared fixtures for k3singress tests."""

import copy

import pytest

from k3singress.types import HostRules, PathRule, PathType, Snapshot, TlsEntry


class FakeIngressClient:
    """In-memory ingress client that records every call."""

    def __init__(self, namespace="default", manifests=None, namespaces=("default",)):
        self.namespace = namespace
        self.manifests = copy.deepcopy(manifests or {})
        self.namespaces = set(namespaces)
        self.calls = []

    def namespace_exists(self):
        return self.namespace in self.namespaces

    def get(self, name):
        self.calls.append(("get", name))
        manifest = self.manifests.get(name)
        return copy.deepcopy(manifest) if manifest is not None else None

    def create(self, manifest):
        name = manifest["metadata"]["name"]
        self.calls.append(("create", name))
        self.manifests[name] = copy.deepcopy(manifest)

    def update(self, manifest):
        name = manifest["metadata"]["name"]
        self.calls.append(("update", name))
        self.manifests[name] = copy.deepcopy(manifest)

    def delete(self, name):
        self.calls.append(("delete", name))
        del self.manifests[name]

    @property
    def writes(self):
        return [c for c in self.calls if c[0] != "get"]


def ingress_manifest(name, spec, **metadata):
    """Build an Ingress manifest as returned by the API server."""
    return {
        "apiVersion": "networking.k8s.io/v1",
        "kind": "Ingress",
        "metadata": {"name": name, "namespace": "default", **metadata},
        "spec": spec,
    }


@pytest.fixture
def rule_a():
    return PathRule("/", PathType.PREFIX, "svcA", 80)


@pytest.fixture
def base_snapshot(rule_a):
    """foo.com -> svcA:80 with TLS secret sec1."""
    return Snapshot(
        rules=[HostRules(host="foo.com", paths=[rule_a])],
        tls=[TlsEntry(secret_name="sec1", hosts=["foo.com"])],
    )


@pytest.fixture
def fake_client():
    return FakeIngressClient()
