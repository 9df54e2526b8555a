"""
Application layer - Use cases and orchestration.

This layer contains the container and the stores it orchestrates.
It depends only on the Domain layer.
"""

from .container import DIContainer
from .layered_registry import LayeredRegistry
from .lifetime_manager import LifecycleHandle, LifetimeManager
from .resolver import AutoFactoryResolver, FactoryResolver, create_default_resolvers

__all__ = [
    "DIContainer",
    "LayeredRegistry",
    "LifetimeManager",
    "LifecycleHandle",
    "FactoryResolver",
    "AutoFactoryResolver",
    "create_default_resolvers",
]
