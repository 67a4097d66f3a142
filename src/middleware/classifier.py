from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from src.common.components import ComponentKind, resolve_component

from .tables import COMPONENT_LABEL, DEFAULT_TABLES, RuleTables

logger = logging.getLogger(__name__)


class Rule(str, Enum):
    FLATTEN_SECRET = "flatten_secret"
    PATCH_WORKLOAD = "patch_workload"
    GUARD_VOLUME_CLAIM = "guard_volume_claim"
    PATCH_JOB = "patch_job"
    PATCH_ROUTE = "patch_route"
    IDENTITY = "identity"


class Role(str, Enum):
    DATABASE = "database"
    CONFIG_EDITOR = "config_editor"
    APP_ROUTE = "app_route"
    BUILDER_ROUTE = "builder_route"


@dataclass(frozen=True)
class Classification:
    rule: Rule
    component: ComponentKind = ComponentKind.UNKNOWN
    replica_component: Optional[ComponentKind] = None
    role: Optional[Role] = None


IDENTITY = Classification(Rule.IDENTITY)


def classify(obj: Any, tables: RuleTables = DEFAULT_TABLES) -> Classification:
    """Decide which rule applies to a manifest without touching it."""

    if not isinstance(obj, Mapping):
        return IDENTITY
    kind = obj.get("kind")
    metadata = _mapping(obj.get("metadata"))
    name = str(metadata.get("name") or "")
    labels = _mapping(metadata.get("labels"))

    if kind == "Secret":
        if tables.config_secret_marker in name:
            return Classification(Rule.FLATTEN_SECRET)
        return IDENTITY

    if kind == "Deployment":
        result = _classify_workload(name, _mapping(metadata.get("annotations")), tables)
        logger.debug("deployment %s classified as %s", name, result)
        return result

    if kind == "PersistentVolumeClaim":
        source = tables.volume_sources.get(str(labels.get(COMPONENT_LABEL) or ""))
        if source is None:
            return IDENTITY
        return Classification(Rule.GUARD_VOLUME_CLAIM, component=source)

    if kind == "Job":
        return Classification(Rule.PATCH_JOB)

    if kind == "Route":
        label = labels.get(COMPONENT_LABEL)
        if label == tables.app_route_label:
            return Classification(Rule.PATCH_ROUTE, role=Role.APP_ROUTE)
        if label == tables.builder_route_label:
            return Classification(Rule.PATCH_ROUTE, role=Role.BUILDER_ROUTE)
        return IDENTITY

    return IDENTITY


def _classify_workload(name: str, annotations: Mapping[str, Any], tables: RuleTables) -> Classification:
    component = resolve_component(annotations.get(COMPONENT_LABEL))

    replica_component = None
    for candidate, suffix in tables.replica_suffixes:
        if name.endswith(suffix):
            replica_component = candidate
            break

    role = None
    if tables.database_marker in name:
        role = Role.DATABASE
    elif tables.config_editor_marker in name:
        role = Role.CONFIG_EDITOR

    return Classification(
        Rule.PATCH_WORKLOAD,
        component=component,
        replica_component=replica_component,
        role=role,
    )


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


__all__ = ["Classification", "Role", "Rule", "classify"]
