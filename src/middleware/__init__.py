"""Operator middleware applied to generated manifests before they are persisted."""

from .classifier import Classification, Role, Rule, classify
from .dispatcher import process, process_all
from .errors import CapacityError, DerivationError, MiddlewareError, ParseError

__all__ = [
    "CapacityError",
    "Classification",
    "DerivationError",
    "MiddlewareError",
    "ParseError",
    "Role",
    "Rule",
    "classify",
    "process",
    "process_all",
]
