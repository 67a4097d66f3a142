from __future__ import annotations

from typing import Any, Dict

from src.common.components import ComponentKind
from src.intent import DeploymentIntent

from .classifier import Classification, Role
from .tables import DEFAULT_TABLES, RuleTables

TLS_TERMINATION_PASSTHROUGH = "passthrough"
INSECURE_POLICY_REDIRECT = "Redirect"


def patch_route(
    intent: DeploymentIntent,
    route: Dict[str, Any],
    classification: Classification,
    tables: RuleTables = DEFAULT_TABLES,
) -> Dict[str, Any]:
    """Hand TLS termination to the backend when the user brings their own certificate.

    The builder route speaks gRPC, so only the application route is pinned to
    the ``https`` port.
    """

    if intent.is_managed(ComponentKind.TLS):
        return route

    spec = route.get("spec")
    if not isinstance(spec, dict):
        spec = route["spec"] = {}
    spec["tls"] = {
        "termination": TLS_TERMINATION_PASSTHROUGH,
        "insecureEdgeTerminationPolicy": INSECURE_POLICY_REDIRECT,
    }
    if classification.role is Role.APP_ROUTE:
        spec["port"] = {"targetPort": tables.https_port_name}
    return route


__all__ = ["patch_route"]
