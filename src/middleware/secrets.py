"""Flatten the per-component config fragments of a config bundle secret into ``config.yaml``."""

from __future__ import annotations

import base64
import binascii
import copy
import logging
from typing import Any, Dict, Mapping

import yaml

from .errors import ParseError
from .tables import CONFIG_PAYLOAD_KEY, DEFAULT_TABLES, RuleTables

logger = logging.getLogger(__name__)


def flatten_secret(secret: Mapping[str, Any], tables: RuleTables = DEFAULT_TABLES) -> Dict[str, Any]:
    """Return a copy of ``secret`` whose data holds a single merged ``config.yaml``.

    Fragments (keys containing ``.config.yaml``) are merged over the base
    payload in lexicographic key order, so on a key collision the last fragment
    by name wins. TLS key pairs and extra CA certificates are always dropped.
    """

    flattened = copy.deepcopy(dict(secret))
    data: Dict[str, Any] = dict(flattened.get("data") or {})

    merged = _load_config(data.get(CONFIG_PAYLOAD_KEY), CONFIG_PAYLOAD_KEY)
    origins = {key: CONFIG_PAYLOAD_KEY for key in merged}

    fragments = sorted(
        key for key in data if key != CONFIG_PAYLOAD_KEY and tables.config_fragment_marker in key
    )
    for key in fragments:
        for config_key, config_value in _load_config(data[key], key).items():
            if config_key in origins and origins[config_key] != CONFIG_PAYLOAD_KEY:
                logger.debug("%s overrides %s from %s", key, config_key, origins[config_key])
            merged[config_key] = config_value
            origins[config_key] = key
        del data[key]

    for key in list(data):
        if key in tables.stripped_secret_keys or key.startswith(tables.stripped_secret_prefixes):
            logger.debug("dropping %s from config bundle", key)
            del data[key]

    rendered = yaml.safe_dump(merged, sort_keys=True, default_flow_style=False)
    data[CONFIG_PAYLOAD_KEY] = base64.b64encode(rendered.encode("utf-8")).decode("ascii")
    flattened["data"] = data
    return flattened


def _load_config(payload: Any, key: str) -> Dict[str, Any]:
    if payload is None:
        return {}
    raw = _decode_payload(payload, key)
    try:
        loaded = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ParseError(f"{key} is not valid YAML: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ParseError(f"{key} must contain a mapping, got {type(loaded).__name__}")
    return loaded


def _decode_payload(payload: Any, key: str) -> bytes:
    if isinstance(payload, (bytes, bytearray)):
        return bytes(payload)
    if not isinstance(payload, str):
        raise ParseError(f"{key} must be base64 text")
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ParseError(f"{key} is not valid base64: {exc}") from exc


__all__ = ["flatten_secret"]
