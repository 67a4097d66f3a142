from __future__ import annotations

from typing import Any, Dict

from .pods import clear_resources, template_containers


def patch_job(job: Dict[str, Any], trim_resources: bool) -> Dict[str, Any]:
    if trim_resources:
        clear_resources(template_containers(job))
    return job


__all__ = ["patch_job"]
