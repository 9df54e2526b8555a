"""
Domain layer - Core models and rules.

This layer contains the registrations, recipes, dependency keys and error taxonomy
of the container. It has no dependencies on other layers.
"""

from .enums import Lifetime, ResolverKind
from .exceptions import (
    CircularDependencyError,
    ContainerDisposedError,
    DIException,
    LifetimeError,
    MalformedDependencyKeyError,
    UnknownDependencyError,
    UnresolvableDependencyKindError,
)
from .interfaces import IContainer, IDependencyResolver
from .models import (
    Blueprint,
    Constructible,
    ContainerOptions,
    DependencyKey,
    Recipe,
    Registration,
    ResolutionContext,
    to_recipe,
)

__all__ = [
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
    # Interfaces
    "IContainer",
    "IDependencyResolver",
    # Models
    "Constructible",
    "Blueprint",
    "Recipe",
    "to_recipe",
    "Registration",
    "DependencyKey",
    "ResolutionContext",
    "ContainerOptions",
]
