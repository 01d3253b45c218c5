"""Tests for k3singress configuration loading."""

import pytest
import yaml

from k3singress.config import K3sIngressConfig, load_config


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "k3singress.yaml"
    with open(path, "w") as f:
        yaml.dump({
            "namespace": "apps",
            "context": "dev",
            "ingress_class": "traefik",
        }, f)
    return str(path)


class TestK3sIngressConfig:
    def test_default_values(self):
        cfg = K3sIngressConfig()
        assert cfg.namespace == "default"
        assert cfg.context is None
        assert cfg.manifest_dir is None

    def test_from_dict_empty(self):
        assert K3sIngressConfig.from_dict(None) == K3sIngressConfig()

    def test_merge_skips_empty_values(self):
        cfg = K3sIngressConfig(namespace="apps", context="dev")
        merged = cfg.merge(namespace=None, context="prod", unknown="x")

        assert merged.namespace == "apps"
        assert merged.context == "prod"
        assert cfg.context == "dev"


class TestLoadConfig:
    def test_explicit_file(self, config_file):
        cfg = load_config(config_file, environ={})

        assert cfg.namespace == "apps"
        assert cfg.context == "dev"
        assert cfg.ingress_class == "traefik"

    def test_file_from_environment(self, config_file):
        cfg = load_config(environ={"K3SINGRESS_CONFIG": config_file})
        assert cfg.namespace == "apps"

    def test_environment_overrides_file(self, config_file):
        cfg = load_config(config_file, environ={
            "K3SINGRESS_NAMESPACE": "staging",
            "KUBECONFIG": "/etc/kube/config",
        })

        assert cfg.namespace == "staging"
        assert cfg.kubeconfig == "/etc/kube/config"
        assert cfg.context == "dev"

    def test_explicit_file_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "missing.yaml"), environ={})

    def test_found_by_search(self, tmp_path, monkeypatch):
        (tmp_path / ".k3singress.yaml").write_text("namespace: searched\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)

        assert load_config(environ={}).namespace == "searched"

    def test_no_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        cfg = load_config(environ={})
        assert cfg.namespace == "default"

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ValueError):
            load_config(str(path), environ={})
