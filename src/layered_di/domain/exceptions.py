from typing import Any, List


class DIException(Exception):
    """Base exception for DI-related errors."""


class ContainerDisposedError(DIException):
    """Raised when a disposed container is asked to register, resolve or create children."""

    def __init__(self, message: str = "Container has been disposed") -> None:
        super().__init__(message)


class UnknownDependencyError(DIException):
    """Raised when no registration is visible for the requested name.

    Attributes:
        name: The name that could not be found.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Nothing registered for dependency [{name}]")


class CircularDependencyError(DIException):
    """Raised when a circular dependency is detected.

    Attributes:
        dependency_chain: List of names involved in the circular dependency.
    """

    def __init__(self, dependency_chain: List[str]) -> None:
        self.dependency_chain = dependency_chain
        message = f"Circular dependency detected: {' -> '.join(dependency_chain)}"
        super().__init__(message)


class UnresolvableDependencyKindError(DIException):
    """Raised when a structured dependency key names a kind without a resolver plugin.

    Attributes:
        name: The registration being resolved.
        kind: The resolver kind that has no plugin.
    """

    def __init__(self, name: str, kind: str) -> None:
        self.name = name
        self.kind = kind
        super().__init__(
            f"Error resolving [{name}]. No resolver plugin registered to resolve dependency key for kind [{kind}]"
        )


class MalformedDependencyKeyError(DIException):
    """Raised when a dependency list entry is neither a name nor a structured key.

    Attributes:
        name: The registration being resolved.
        index: Position of the offending entry in the dependency list.
        dependency_key: The offending entry.
    """

    def __init__(self, name: str, index: int, dependency_key: Any) -> None:
        self.name = name
        self.index = index
        self.dependency_key = dependency_key
        super().__init__(
            f"Error resolving [{name}]. Its dependency at index [{index}] had an unknown resolver kind: "
            f"{dependency_key!r}"
        )


class LifetimeError(DIException):
    """Raised for invalid lifetime changes.

    This occurs when:
    - Changing the lifetime of a registration that has since been replaced.
    - Requesting a lifetime a handle cannot assign.
    """
