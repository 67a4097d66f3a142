"""Helpers for the pod template embedded in Deployments and Jobs."""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Mapping


def template_containers(obj: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Return the containers of ``spec.template.spec``. Init containers are left alone."""

    spec = obj.get("spec")
    if not isinstance(spec, dict):
        return []
    template = spec.get("template")
    if not isinstance(template, dict):
        return []
    pod_spec = template.get("spec")
    if not isinstance(pod_spec, dict):
        return []
    containers = pod_spec.get("containers")
    if not isinstance(containers, list):
        return []
    return [container for container in containers if isinstance(container, dict)]


def template_annotations(obj: Dict[str, Any], create: bool = False) -> Dict[str, Any] | None:
    spec = obj.get("spec")
    if not isinstance(spec, dict):
        if not create:
            return None
        spec = obj["spec"] = {}
    template = spec.get("template")
    if not isinstance(template, dict):
        if not create:
            return None
        template = spec["template"] = {}
    metadata = template.get("metadata")
    if not isinstance(metadata, dict):
        if not create:
            return None
        metadata = template["metadata"] = {}
    annotations = metadata.get("annotations")
    if not isinstance(annotations, dict):
        if not create:
            return None
        annotations = metadata["annotations"] = {}
    return annotations


def upsert_container_env(container: Dict[str, Any], entry: Mapping[str, Any]) -> None:
    """Replace the env entry with the same name in place, or append it."""

    env = container.get("env")
    if not isinstance(env, list):
        env = container["env"] = []
    new_entry = copy.deepcopy(dict(entry))
    for idx, existing in enumerate(env):
        if isinstance(existing, dict) and existing.get("name") == new_entry.get("name"):
            env[idx] = new_entry
            return
    env.append(new_entry)


def clear_resources(containers: List[Dict[str, Any]]) -> None:
    for container in containers:
        container["resources"] = {}


__all__ = ["clear_resources", "template_annotations", "template_containers", "upsert_container_env"]
