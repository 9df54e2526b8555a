"""
layered-di: Name-based Dependency Injection container with hierarchical child containers.

Public API exports for the layered-di package.
"""

# Application exports
from layered_di.application.container import DIContainer
from layered_di.application.lifetime_manager import LifecycleHandle

# Domain exports
from layered_di.domain.enums import Lifetime, ResolverKind
from layered_di.domain.exceptions import (
    CircularDependencyError,
    ContainerDisposedError,
    DIException,
    LifetimeError,
    MalformedDependencyKeyError,
    UnknownDependencyError,
    UnresolvableDependencyKindError,
)
from layered_di.domain.interfaces import IDependencyResolver
from layered_di.domain.models import Blueprint, Constructible, ContainerOptions, DependencyKey

__version__ = "0.1.0"

__all__ = [
    # Container
    "DIContainer",
    "LifecycleHandle",
    "ContainerOptions",
    # Recipes and keys
    "Constructible",
    "Blueprint",
    "DependencyKey",
    "IDependencyResolver",
    # Enums
    "Lifetime",
    "ResolverKind",
    # Exceptions
    "DIException",
    "ContainerDisposedError",
    "UnknownDependencyError",
    "CircularDependencyError",
    "UnresolvableDependencyKindError",
    "MalformedDependencyKeyError",
    "LifetimeError",
]
