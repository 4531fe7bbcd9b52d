"""Tag set helpers shared by the resource adapters."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

AWS_TAG_PREFIX = "aws:"


@dataclass(frozen=True)
class IgnoreTagsConfig:
    """Tag keys (exact or by prefix) that are never reported or managed."""

    keys: frozenset[str] = frozenset()
    key_prefixes: tuple[str, ...] = ()

    def ignores(self, key: str) -> bool:
        return key in self.keys or any(key.startswith(p) for p in self.key_prefixes)


def merge(default_tags: dict[str, str] | None, tags: dict[str, str] | None) -> dict[str, str]:
    """Overlay resource tags on provider-wide default tags."""
    merged = dict(default_tags or {})
    merged.update(tags or {})
    return merged


def ignore_aws(tags: dict[str, str]) -> dict[str, str]:
    """Drop system tags (``aws:*``), which can be neither set nor removed."""
    return {k: v for k, v in tags.items() if not k.startswith(AWS_TAG_PREFIX)}


def ignore_config(tags: dict[str, str], config: IgnoreTagsConfig | None) -> dict[str, str]:
    if config is None:
        return dict(tags)
    return {k: v for k, v in tags.items() if not config.ignores(k)}


def remove_default_config(
    tags: dict[str, str], default_tags: dict[str, str] | None
) -> dict[str, str]:
    """Drop tags that only exist because of the default tag configuration."""
    defaults = default_tags or {}
    return {k: v for k, v in tags.items() if defaults.get(k) != v}


def removed(old: dict[str, str], new: dict[str, str]) -> dict[str, str]:
    """Tags present in ``old`` whose keys are gone from ``new``."""
    return {k: v for k, v in old.items() if k not in new}


def updated(old: dict[str, str], new: dict[str, str]) -> dict[str, str]:
    """Tags in ``new`` that are missing from ``old`` or carry a new value."""
    return {k: v for k, v in new.items() if old.get(k) != v}


def from_api(tag_list: list[dict[str, Any]] | None) -> dict[str, str]:
    return {t["Key"]: t.get("Value", "") for t in tag_list or []}


def to_api(tags: dict[str, str]) -> list[dict[str, str]]:
    """Render tags as ``[{"Key": ..., "Value": ...}]``, sorted by key."""
    return [{"Key": k, "Value": v} for k, v in sorted(tags.items())]
