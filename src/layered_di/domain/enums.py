from enum import Enum


class Lifetime(str, Enum):
    """Defines the lifetime of a registered dependency.

    Attributes:
        SINGLETON: Single instance for the whole container tree, cached by the container
            that owns the registration.
        SINGLETON_PER_CONTAINER: Single instance per container that resolves it.
        EXTERNAL: Caller-supplied instance, never built or disposed by the container.
    """

    SINGLETON = "singleton"
    SINGLETON_PER_CONTAINER = "singletonPerContainer"
    EXTERNAL = "external"

    def __str__(self) -> str:
        return self.value


class ResolverKind(str, Enum):
    """Kinds of structured dependency keys handled by the built-in resolver plugins."""

    FACTORY = "factory"
    AUTO_FACTORY = "autoFactory"

    def __str__(self) -> str:
        return self.value
