"""Tests for config.py: environment settings and end-to-end loading of every source."""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path
from unittest.mock import patch

import pytest

from kube_cluster_config.config import Settings, get_settings, load_cluster_configs, load_cluster_configs_from_env
from kube_cluster_config.errors import NoClusterConfiguredError, OverridesRequireLocalError, ParseError
from kube_cluster_config.models import DEFAULT_CLUSTER_ALIAS, IN_CLUSTER_CONTEXT, AccessDescriptor

WriteFile = Callable[[str, str], Path]

BUILD01 = "ci/api-build01-ci-devcluster-openshift-com:6443"
LOCAL = AccessDescriptor(host="https://10.0.0.1:443", bearer_token="sa-token")


def _no_local() -> AccessDescriptor | None:
    return None


def _local() -> AccessDescriptor | None:
    return LOCAL


class TestSettings:
    def test_defaults(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            settings = get_settings()
        assert settings.kubeconfig == ()
        assert settings.build_cluster_file == ""

    def test_kubeconfig_path_list_from_env(self) -> None:
        value = os.pathsep.join(["/a/config", "", "/b/config"])
        with patch.dict(os.environ, {"KUBECONFIG": value}):
            settings = Settings()
        assert settings.kubeconfig == ("/a/config", "/b/config")

    def test_build_cluster_file_from_env(self) -> None:
        with patch.dict(os.environ, {"BUILD_CLUSTER_FILE": "/etc/build/clusters.yaml"}):
            assert Settings().build_cluster_file == "/etc/build/clusters.yaml"

    def test_settings_are_frozen(self) -> None:
        settings = Settings(kubeconfig=(), build_cluster_file="")
        with pytest.raises(AttributeError):
            settings.build_cluster_file = "other"  # type: ignore[misc]


class TestLoadClusterConfigs:
    def test_kubeconfig_only(self, kubeconfig_path: Path) -> None:
        clusters = load_cluster_configs(str(kubeconfig_path), local_loader=_no_local)
        assert set(clusters) == {IN_CLUSTER_CONTEXT, DEFAULT_CLUSTER_ALIAS, BUILD01}
        assert clusters[IN_CLUSTER_CONTEXT] == clusters[BUILD01]
        assert clusters[DEFAULT_CLUSTER_ALIAS] == clusters[BUILD01]

    def test_local_only(self) -> None:
        assert load_cluster_configs(local_loader=_local) == {IN_CLUSTER_CONTEXT: LOCAL, DEFAULT_CLUSTER_ALIAS: LOCAL}

    def test_local_kubeconfig_and_build_clusters(self, kubeconfig_path: Path, write_file: WriteFile) -> None:
        build = write_file("build.yaml", "default:\n  endpoint: https://build.example.com\n")
        clusters = load_cluster_configs((str(kubeconfig_path),), str(build), local_loader=_local)
        assert clusters[IN_CLUSTER_CONTEXT] == LOCAL
        assert clusters[DEFAULT_CLUSTER_ALIAS].host == "https://build.example.com"
        assert BUILD01 in clusters

    def test_nothing_configured(self) -> None:
        with pytest.raises(NoClusterConfiguredError):
            load_cluster_configs(local_loader=_no_local)

    def test_build_clusters_outside_cluster(self, write_file: WriteFile) -> None:
        build = write_file("build.yaml", "default:\n  endpoint: https://build.example.com\n")
        with pytest.raises(OverridesRequireLocalError):
            load_cluster_configs(build_cluster=str(build), local_loader=_no_local)

    def test_parse_errors_propagate(self, tmp_path: Path) -> None:
        with pytest.raises(ParseError):
            load_cluster_configs(str(tmp_path / "absent"), local_loader=_local)

    def test_from_env(self, kubeconfig_path: Path) -> None:
        with (
            patch.dict(os.environ, {"KUBECONFIG": str(kubeconfig_path), "BUILD_CLUSTER_FILE": ""}),
            patch("kube_cluster_config.config.load_in_cluster_descriptor", return_value=None),
            patch("kube_cluster_config.config.configure_logging") as mock_configure,
        ):
            clusters = load_cluster_configs_from_env()
        assert BUILD01 in clusters
        mock_configure.assert_called_once()
