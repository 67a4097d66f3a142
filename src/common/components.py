"""Component kinds managed by a QuayRegistry and helpers to resolve them from labels."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class ComponentKind(str, Enum):
    QUAY = "quay"
    POSTGRES = "postgres"
    CLAIR = "clair"
    REDIS = "redis"
    HPA = "horizontalpodautoscaler"
    OBJECT_STORAGE = "objectstorage"
    ROUTE = "route"
    MIRROR = "mirror"
    MONITORING = "monitoring"
    TLS = "tls"
    CLAIR_POSTGRES = "clairpostgres"
    CONFIG_EDITOR = "config-editor"
    UNKNOWN = "unknown"


def known_component(kind: Any) -> Optional[ComponentKind]:
    """Return the enum member for an exact component kind string, or None."""

    if not isinstance(kind, str):
        return None
    try:
        member = ComponentKind(kind)
    except ValueError:
        return None
    if member is ComponentKind.UNKNOWN:
        return None
    return member


def resolve_component(value: Any) -> ComponentKind:
    """Read a component kind from a label or annotation value.

    Only exact kind strings match; anything else resolves to UNKNOWN, which is
    never managed.
    """

    return known_component(value) or ComponentKind.UNKNOWN


__all__ = ["ComponentKind", "known_component", "resolve_component"]
