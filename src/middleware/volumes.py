from __future__ import annotations

import logging
from typing import Any, Dict

from src.common.quantity import compare_quantities
from src.intent import DeploymentIntent

from .classifier import Classification
from .errors import CapacityError, ParseError

logger = logging.getLogger(__name__)


def guard_volume_claim(
    intent: DeploymentIntent,
    claim: Dict[str, Any],
    classification: Classification,
) -> Dict[str, Any]:
    """Apply the component's volume size override to ``claim``, refusing to shrink it.

    Returns ``claim`` untouched when no override exists. Raises ``CapacityError``
    when the override is smaller than the storage currently requested.
    """

    override = intent.volume_size_override(classification.component)
    if override is None:
        return claim

    spec = claim.get("spec")
    if not isinstance(spec, dict):
        spec = claim["spec"] = {}
    resources = spec.get("resources")
    if not isinstance(resources, dict):
        resources = spec["resources"] = {}
    requests = resources.get("requests")
    current = requests.get("storage") if isinstance(requests, dict) else None

    if current is not None:
        try:
            shrinking = compare_quantities(override, current) < 0
        except ValueError as exc:
            raise ParseError(str(exc)) from exc
        if shrinking:
            raise CapacityError(str(current), override)

    logger.debug("claim %s storage %s -> %s", (claim.get("metadata") or {}).get("name"), current, override)
    resources["requests"] = {"storage": override}
    return claim


__all__ = ["guard_volume_claim"]
