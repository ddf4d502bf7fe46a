"""Shared test fixtures for all test modules."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

# A kubeconfig with one cluster/user/context triple, as written by `oc login` for a CI service account.
_KUBECONFIG_ONE_CONTEXT = """\
---
apiVersion: v1
clusters:
- cluster:
    insecure-skip-tls-verify: true
    server: https://api.build01.ci.devcluster.openshift.com:6443
  name: api-build01-ci-devcluster-openshift-com:6443
contexts:
- context:
    cluster: api-build01-ci-devcluster-openshift-com:6443
    namespace: ci
    user: system:serviceaccount:ci:plank/api-build01-ci-devcluster-openshift-com:6443
  name: ci/api-build01-ci-devcluster-openshift-com:6443
current-context: ci/api-build01-ci-devcluster-openshift-com:6443
kind: Config
preferences: {}
users:
- name: system:serviceaccount:ci:plank/api-build01-ci-devcluster-openshift-com:6443
  user:
    token: foobar
"""


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, str], Path]:
    """Factory writing text content to a file under the test's temp directory."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_text(content)
        return path

    return _write


@pytest.fixture
def kubeconfig_path(write_file: Callable[[str, str], Path]) -> Path:
    """Path to a single-context kubeconfig file."""
    return write_file("config1", _KUBECONFIG_ONE_CONTEXT)
