"""Policy applied to Deployments: env overrides, replica defaults, resource trimming, annotations."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from src.common.components import ComponentKind, known_component
from src.intent import DeploymentIntent

from .classifier import Classification, Role
from .errors import DerivationError
from .pods import clear_resources, template_annotations, template_containers, upsert_container_env
from .tables import DEFAULT_TABLES, RuleTables

logger = logging.getLogger(__name__)


def patch_workload(
    intent: DeploymentIntent,
    deployment: Dict[str, Any],
    classification: Classification,
    trim_resources: bool,
    tables: RuleTables = DEFAULT_TABLES,
) -> Dict[str, Any]:
    """Apply every workload rule to ``deployment`` in place and return it."""

    name = (deployment.get("metadata") or {}).get("name")
    containers = template_containers(deployment)

    if intent.is_managed(classification.component):
        for entry in intent.env_overrides(classification.component):
            for container in containers:
                upsert_container_env(container, entry)

    # Replicas are left to the autoscaler when it is managed, and an explicit
    # value (zero during upgrades) is never replaced.
    if classification.replica_component is not None and not intent.is_managed(ComponentKind.HPA):
        spec = deployment.get("spec")
        if not isinstance(spec, dict):
            spec = deployment["spec"] = {}
        if spec.get("replicas") is None:
            desired = intent.replicas_override(classification.replica_component)
            if desired is None:
                desired = tables.default_replicas
            spec["replicas"] = desired
            logger.debug("deployment %s replicas set to %d", name, desired)

    if trim_resources:
        clear_resources(containers)

    if classification.role is Role.DATABASE:
        annotations = template_annotations(deployment)
        if annotations:
            for key in tables.database_annotations:
                annotations.pop(key, None)
        return deployment

    if classification.role is Role.CONFIG_EDITOR:
        groups = field_group_names(intent, tables)
        annotations = template_annotations(deployment, create=True)
        annotations[tables.field_groups_annotation] = ",".join(groups)

    return deployment


def field_group_names(intent: DeploymentIntent, tables: RuleTables = DEFAULT_TABLES) -> List[str]:
    """Config field groups owned by the operator, in component declaration order."""

    names: List[str] = []
    for component in intent:
        if not component.managed:
            continue
        kind = known_component(component.kind)
        if kind is None:
            raise DerivationError(f"unknown component: {component.kind!r}")
        group = tables.field_groups.get(kind)
        if group and group not in names:
            names.append(group)
    return names


__all__ = ["field_group_names", "patch_workload"]
