from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple, Union

import yaml

from src.common.components import ComponentKind
from src.common.quantity import parse_quantity

KindLike = Union[ComponentKind, str]


class IntentError(ValueError):
    """Raised when a deployment-intent descriptor is malformed."""


@dataclass(frozen=True)
class ComponentSpec:
    kind: str
    managed: bool
    env: Tuple[Dict[str, Any], ...] = ()
    replicas: Optional[int] = None
    volume_size: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"kind": self.kind, "managed": self.managed}
        overrides: Dict[str, Any] = {}
        if self.env:
            overrides["env"] = [dict(entry) for entry in self.env]
        if self.replicas is not None:
            overrides["replicas"] = self.replicas
        if self.volume_size is not None:
            overrides["volumeSize"] = self.volume_size
        if overrides:
            data["overrides"] = overrides
        return data


@dataclass(frozen=True)
class DeploymentIntent:
    """Which components are operator managed, plus per-component overrides.

    Built once per reconcile from a ``QuayRegistry`` and never mutated. Lookups
    return the first component declared with the requested kind.
    """

    components: Tuple[ComponentSpec, ...] = ()

    @classmethod
    def from_registry(cls, registry: Mapping[str, Any]) -> "DeploymentIntent":
        if not isinstance(registry, Mapping):
            raise IntentError("intent descriptor must be a mapping")
        spec = registry.get("spec", registry)
        if spec is None:
            return cls()
        if not isinstance(spec, Mapping):
            raise IntentError("intent spec must be a mapping")
        raw_components = spec.get("components") or []
        if not isinstance(raw_components, list):
            raise IntentError("spec.components must be a list")
        return cls(tuple(_parse_component(item, idx) for idx, item in enumerate(raw_components)))

    def __iter__(self) -> Iterator[ComponentSpec]:
        return iter(self.components)

    def component(self, kind: KindLike) -> Optional[ComponentSpec]:
        for component in self.components:
            if component.kind == kind:
                return component
        return None

    def is_managed(self, kind: KindLike) -> bool:
        if kind == ComponentKind.UNKNOWN:
            return False
        component = self.component(kind)
        return component is not None and component.managed

    def env_overrides(self, kind: KindLike) -> Tuple[Dict[str, Any], ...]:
        component = self.component(kind)
        return component.env if component is not None else ()

    def replicas_override(self, kind: KindLike) -> Optional[int]:
        component = self.component(kind)
        return component.replicas if component is not None else None

    def volume_size_override(self, kind: KindLike) -> Optional[str]:
        component = self.component(kind)
        return component.volume_size if component is not None else None

    def to_dict(self) -> Dict[str, Any]:
        return {"components": [component.to_dict() for component in self.components]}


def load_intent(path: Path) -> DeploymentIntent:
    with path.open("r", encoding="utf-8") as handle:
        try:
            documents = [doc for doc in yaml.safe_load_all(handle) if doc is not None]
        except yaml.YAMLError as exc:
            raise IntentError(f"invalid intent YAML in {path}: {exc}") from exc
    if not documents:
        return DeploymentIntent()
    return DeploymentIntent.from_registry(documents[0])


def _parse_component(item: Any, idx: int) -> ComponentSpec:
    if not isinstance(item, Mapping):
        raise IntentError(f"spec.components[{idx}] must be a mapping")
    kind = item.get("kind")
    if not isinstance(kind, str) or not kind.strip():
        raise IntentError(f"spec.components[{idx}].kind must be a non-empty string")
    managed = item.get("managed", False)
    if not isinstance(managed, bool):
        raise IntentError(f"spec.components[{idx}].managed must be a boolean")

    overrides = item.get("overrides") or {}
    if not isinstance(overrides, Mapping):
        raise IntentError(f"spec.components[{idx}].overrides must be a mapping")

    env = []
    for env_idx, entry in enumerate(overrides.get("env") or []):
        if not isinstance(entry, Mapping) or not isinstance(entry.get("name"), str):
            raise IntentError(f"spec.components[{idx}].overrides.env[{env_idx}] needs a string name")
        env.append(dict(entry))

    replicas = overrides.get("replicas")
    if replicas is not None and (isinstance(replicas, bool) or not isinstance(replicas, int) or replicas < 0):
        raise IntentError(f"spec.components[{idx}].overrides.replicas must be a non-negative integer")

    volume_size = overrides.get("volumeSize")
    if volume_size is not None:
        volume_size = str(volume_size)
        try:
            size = parse_quantity(volume_size)
        except ValueError as exc:
            raise IntentError(f"spec.components[{idx}].overrides.volumeSize: {exc}") from exc
        if size < 0:
            raise IntentError(f"spec.components[{idx}].overrides.volumeSize must not be negative")

    return ComponentSpec(
        kind=kind.strip(),
        managed=managed,
        env=tuple(env),
        replicas=replicas,
        volume_size=volume_size,
    )


__all__ = ["ComponentSpec", "DeploymentIntent", "IntentError", "load_intent"]
