"""Rule manifest management utilities."""

from .rule_manifest import RuleManifest, RuleManifestLoader

__all__ = [
    "RuleManifest",
    "RuleManifestLoader",
]
