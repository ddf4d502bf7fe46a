"""Build-cluster file loader: the explicit alias table that overrides everything else."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import ValidationError

from kube_cluster_config.errors import ParseError
from kube_cluster_config.models import DEFAULT_CLUSTER_ALIAS, AliasMap, BuildCluster

log = structlog.get_logger()


def _is_single_cluster(raw: dict[str, Any]) -> bool:
    # Legacy files hold one bare cluster entry instead of an alias map.
    return isinstance(raw.get("endpoint"), str)


def _validate_entry(path: Path, alias: str, entry: Any) -> BuildCluster:
    if not isinstance(entry, dict):
        msg = f"build cluster {alias!r} must be a mapping, got {type(entry).__name__}"
        raise ParseError(path, msg)
    try:
        return BuildCluster.model_validate(entry)
    except ValidationError as exc:
        msg = f"build cluster {alias!r} is invalid: {exc}"
        raise ParseError(path, msg) from exc


def load_build_clusters(path: str | Path | None) -> AliasMap:
    """Read a build-cluster file into an alias map.

    An empty path means no build-cluster file was configured and yields an empty map.
    A document holding a single cluster entry is bound to the ``default`` alias.

    Raises:
        ParseError: If the file cannot be read or an entry is malformed.
    """
    if not path:
        return {}
    path = Path(path)
    try:
        with path.open(encoding="utf-8") as handle:
            raw = yaml.safe_load(handle)
    except OSError as exc:
        msg = f"cannot read build-cluster file: {exc.strerror}"
        raise ParseError(path, msg) from exc
    except yaml.YAMLError as exc:
        msg = f"invalid YAML: {exc}"
        raise ParseError(path, msg) from exc

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        msg = f"build-cluster file must be a mapping, got {type(raw).__name__}"
        raise ParseError(path, msg)

    if _is_single_cluster(raw):
        log.info("build_cluster_legacy_format", path=str(path), alias=DEFAULT_CLUSTER_ALIAS)
        return {DEFAULT_CLUSTER_ALIAS: _validate_entry(path, DEFAULT_CLUSTER_ALIAS, raw).to_descriptor()}

    clusters: AliasMap = {}
    for alias, entry in raw.items():
        clusters[str(alias)] = _validate_entry(path, str(alias), entry).to_descriptor()
    log.debug("build_clusters_loaded", path=str(path), aliases=sorted(clusters))
    return clusters
