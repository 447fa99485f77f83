"""Utilities for loading and merging rule manifest files."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence

import yaml

from ..errors import RuleManifestError


@dataclass(slots=True)
class RuleManifest:
    """Configuration describing the rule to run for each invocation."""

    name: str | None = None
    evaluator: str | None = None
    parameters: Dict[str, Any] = field(default_factory=dict)
    log_level: str | None = None


class RuleManifestLoader:
    """Load rule manifests and merge them into a single :class:`RuleManifest`."""

    def __init__(self, default_manifests: Sequence[Path | str] | None = None) -> None:
        self._default_manifests: List[Path] = [Path(path) for path in default_manifests or []]

    # ------------------------------------------------------------------
    def load(self, manifests: Sequence[Path | str] | None = None) -> RuleManifest:
        """Return the manifest produced by merging defaults and ``manifests`` in order."""

        manifest_paths = list(self._default_manifests)
        if manifests:
            manifest_paths.extend(Path(path) for path in manifests)

        manifest = RuleManifest()
        for manifest_path in manifest_paths:
            data = self._load_manifest(manifest_path)
            rule_config = data.get("rule") or {}
            if not isinstance(rule_config, Mapping):
                raise RuleManifestError(f"'rule' section must be a mapping: {manifest_path}")

            if rule_config.get("name"):
                manifest.name = str(rule_config["name"])
            if rule_config.get("evaluator"):
                manifest.evaluator = str(rule_config["evaluator"]).strip()
            if rule_config.get("log_level"):
                manifest.log_level = str(rule_config["log_level"]).upper()

            parameters = rule_config.get("parameters")
            if isinstance(parameters, Mapping):
                manifest.parameters.update(parameters)
            elif parameters is not None:
                raise RuleManifestError(f"'parameters' must be a mapping: {manifest_path}")

        return manifest

    # ------------------------------------------------------------------
    def _load_manifest(self, path: Path) -> Dict[str, Any]:
        if not path.exists():
            raise RuleManifestError(f"Rule manifest not found: {path}")

        try:
            content = path.read_text(encoding="utf-8")
        except OSError as exc:  # pragma: no cover - filesystem errors surfaced to caller
            raise RuleManifestError(f"Failed to read rule manifest {path}") from exc

        try:
            data = yaml.safe_load(content) or {}
        except yaml.YAMLError as exc:
            raise RuleManifestError(f"Invalid YAML in rule manifest {path}") from exc

        if not isinstance(data, Mapping):
            raise RuleManifestError(f"Rule manifest must be a mapping: {path}")

        return dict(data)
