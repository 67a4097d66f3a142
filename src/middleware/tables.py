"""Fixed lookup tables consulted by the classifier and the patchers."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Tuple

from src.common.components import ComponentKind

COMPONENT_LABEL = "quay-component"
CONFIG_PAYLOAD_KEY = "config.yaml"


@dataclass(frozen=True)
class RuleTables:
    config_secret_marker: str = "quay-config-secret-"
    config_fragment_marker: str = ".config.yaml"
    stripped_secret_keys: Tuple[str, ...] = ("ssl.cert", "ssl.key", "clair-ssl.key", "clair-ssl.crt")
    stripped_secret_prefixes: Tuple[str, ...] = ("extra_ca_cert_",)
    # Order matters only for readability; the suffixes are mutually exclusive.
    replica_suffixes: Tuple[Tuple[ComponentKind, str], ...] = (
        (ComponentKind.CLAIR, "clair-app"),
        (ComponentKind.MIRROR, "quay-mirror"),
        (ComponentKind.QUAY, "quay-app"),
    )
    default_replicas: int = 2
    database_marker: str = "quay-database"
    database_annotations: Tuple[str, ...] = (
        "quay-registry-hostname",
        "quay-buildmanager-hostname",
        "quay-operator-service-endpoint",
    )
    config_editor_marker: str = "quay-config-editor"
    field_groups_annotation: str = "quay-managed-fieldgroups"
    field_groups: Mapping[ComponentKind, str] = field(
        default_factory=lambda: MappingProxyType(
            {
                ComponentKind.CLAIR: "SecurityScanner",
                ComponentKind.POSTGRES: "Database",
                ComponentKind.REDIS: "Redis",
                ComponentKind.OBJECT_STORAGE: "DistributedStorage",
                ComponentKind.ROUTE: "HostSettings",
                ComponentKind.MIRROR: "RepoMirror",
            }
        )
    )
    volume_sources: Mapping[str, ComponentKind] = field(
        default_factory=lambda: MappingProxyType(
            {
                "postgres": ComponentKind.POSTGRES,
                # The clair component carries the volume size of its database.
                "clair-postgres": ComponentKind.CLAIR,
            }
        )
    )
    app_route_label: str = "quay-app-route"
    builder_route_label: str = "quay-builder-route"
    https_port_name: str = "https"


DEFAULT_TABLES = RuleTables()


__all__ = ["COMPONENT_LABEL", "CONFIG_PAYLOAD_KEY", "DEFAULT_TABLES", "RuleTables"]
