from __future__ import annotations

import copy
import logging
from typing import Any, Dict, Iterable, List

from src.intent import DeploymentIntent

from .classifier import Rule, classify
from .jobs import patch_job
from .routes import patch_route
from .secrets import flatten_secret
from .tables import DEFAULT_TABLES, RuleTables
from .volumes import guard_volume_claim
from .workloads import patch_workload

logger = logging.getLogger(__name__)


def process(
    intent: DeploymentIntent,
    obj: Any,
    trim_resources: bool = False,
    tables: RuleTables = DEFAULT_TABLES,
) -> Any:
    """Apply operator policy to one generated manifest.

    Objects no rule applies to are returned as is. Otherwise the rule works on
    a deep copy, so ``obj`` is never modified; a ``MiddlewareError`` subclass is
    raised when the object cannot be processed.
    """

    classification = classify(obj, tables)
    rule = classification.rule
    if rule is Rule.IDENTITY:
        return obj

    logger.debug("applying %s to %s/%s", rule.value, obj.get("kind"), (obj.get("metadata") or {}).get("name"))

    if rule is Rule.FLATTEN_SECRET:
        return flatten_secret(obj, tables)

    working: Dict[str, Any] = copy.deepcopy(obj)
    if rule is Rule.PATCH_WORKLOAD:
        return patch_workload(intent, working, classification, trim_resources, tables)
    if rule is Rule.GUARD_VOLUME_CLAIM:
        return guard_volume_claim(intent, working, classification)
    if rule is Rule.PATCH_JOB:
        return patch_job(working, trim_resources)
    if rule is Rule.PATCH_ROUTE:
        return patch_route(intent, working, classification, tables)
    raise AssertionError(f"unhandled rule: {rule}")  # pragma: no cover


def process_all(
    intent: DeploymentIntent,
    objects: Iterable[Any],
    trim_resources: bool = False,
    tables: RuleTables = DEFAULT_TABLES,
) -> List[Any]:
    """Process a manifest stream in order, dropping empty documents."""

    return [process(intent, obj, trim_resources, tables) for obj in objects if obj is not None]


__all__ = ["process", "process_all"]
