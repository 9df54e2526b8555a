from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional, Sequence, Union

from layered_di.domain.models import DependencyKey


class IContainer(ABC):
    """Abstract interface for dependency injection container operations."""

    @abstractmethod
    def register(self, name: str, recipe: Any, dependency_list: Optional[Sequence[Any]] = None) -> Any:
        """Register a recipe under a name with singleton lifetime.

        Args:
            name: The name to register.
            recipe: A class, factory function, blueprint object or recipe model.
            dependency_list: Dependency names or structured keys passed to the recipe.

        Returns:
            A lifecycle handle for the new registration.
        """

    @abstractmethod
    def register_instance(self, name: str, instance: Any) -> None:
        """Register an externally owned instance under a name.

        Args:
            name: The name to register.
            instance: The instance returned for every resolution of ``name``.
        """

    @abstractmethod
    def resolve(self, name: str) -> Any:
        """Resolve and return the instance registered under a name.

        Args:
            name: The name to resolve.
        """

    @abstractmethod
    def add_resolver(self, kind: str, plugin: "IDependencyResolver") -> None:
        """Register a resolver plugin for structured dependency keys of a kind."""

    @abstractmethod
    def create_child_container(self) -> "IContainer":
        """Create and return a child container layered over this one."""

    @abstractmethod
    def dispose(self) -> None:
        """Dispose this container, its cached instances and its children."""


class IDependencyResolver(ABC):
    """Abstract interface for resolver plugins."""

    @abstractmethod
    def resolve(self, container: IContainer, dependency_key: Union[DependencyKey, Mapping[str, Any]]) -> Any:
        """Produce the value for a structured dependency key.

        Args:
            container: The container resolving the registration that declared the key.
            dependency_key: The structured key exactly as declared in the
                dependency list, a mapping or a ``DependencyKey``.

        Returns:
            The value passed to the recipe.
        """
