from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import jsonpatch


@dataclass(frozen=True)
class ObjectChange:
    kind: Optional[str]
    name: Optional[str]
    patch: List[Dict[str, Any]]

    @property
    def changed(self) -> bool:
        return bool(self.patch)

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "name": self.name, "patch": self.patch}


def describe_change(before: Any, after: Any) -> ObjectChange:
    """Summarise what processing did to one object as an RFC 6902 patch."""

    source = after if isinstance(after, dict) else before
    metadata = source.get("metadata") if isinstance(source, dict) else None
    name = metadata.get("name") if isinstance(metadata, dict) else None
    kind = source.get("kind") if isinstance(source, dict) else None
    if not isinstance(before, dict) or not isinstance(after, dict):
        ops: List[Dict[str, Any]] = []
    else:
        ops = list(jsonpatch.make_patch(before, after).patch)
    return ObjectChange(kind=kind, name=name, patch=ops)


__all__ = ["ObjectChange", "describe_change"]
