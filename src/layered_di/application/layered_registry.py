"""Application layer - Layered per-container storage."""

from collections import ChainMap
from typing import Dict, Generic, List, Optional, Tuple, TypeVar

T = TypeVar("T")


class LayeredRegistry(Generic[T]):
    """Name-keyed mapping layered over a parent registry.

    Lookups check this registry's own layer first and then fall through to the
    parent chain. Writes always land in the own layer, so a child never mutates
    its parent, while entries the parent adds later stay visible to the child.

    Attributes:
        _parent: The registry this one is layered over, if any.
        _chain: Own layer followed by every ancestor layer.
    """

    def __init__(self, entries: Optional[Dict[str, T]] = None, parent: Optional["LayeredRegistry[T]"] = None) -> None:
        """Initialize the registry.

        Args:
            entries: Initial entries of the own layer.
            parent: Optional registry to delegate lookups to.
        """
        own: Dict[str, T] = dict(entries or {})
        self._parent = parent
        self._chain: ChainMap = parent._chain.new_child(own) if parent is not None else ChainMap(own)

    @property
    def parent(self) -> Optional["LayeredRegistry[T]"]:
        return self._parent

    def create_child(self) -> "LayeredRegistry[T]":
        """Create an empty registry layered over this one."""
        return LayeredRegistry(parent=self)

    def get(self, name: str, default: Optional[T] = None) -> Optional[T]:
        """Return the visible entry for ``name``, own layer first."""
        return self._chain.get(name, default)

    def get_own(self, name: str, default: Optional[T] = None) -> Optional[T]:
        """Return the entry for ``name`` from the own layer only."""
        return self._chain.maps[0].get(name, default)

    def owns(self, name: str) -> bool:
        """Whether ``name`` is defined in the own layer rather than inherited."""
        return name in self._chain.maps[0]

    def layer_of(self, name: str) -> Optional[int]:
        """Depth of the layer that supplies ``name``: 0 for the own layer, 1 for the parent, and so on."""
        for depth, layer in enumerate(self._chain.maps):
            if name in layer:
                return depth
        return None

    def own_items(self) -> List[Tuple[str, T]]:
        """Snapshot of the own layer's entries."""
        return list(self._chain.maps[0].items())

    def clear_own(self) -> None:
        """Remove every entry of the own layer. Ancestors are untouched."""
        self._chain.maps[0].clear()

    def __contains__(self, name: object) -> bool:
        return name in self._chain

    def __getitem__(self, name: str) -> T:
        return self._chain[name]

    def __setitem__(self, name: str, value: T) -> None:
        self._chain[name] = value

    def __len__(self) -> int:
        return len(self._chain)
