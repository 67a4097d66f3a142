"""Deployment-intent model read from a QuayRegistry resource."""

from .model import ComponentSpec, DeploymentIntent, IntentError, load_intent

__all__ = [
    "ComponentSpec",
    "DeploymentIntent",
    "IntentError",
    "load_intent",
]
