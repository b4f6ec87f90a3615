"""Entity registry storing one component pool per component type."""

from __future__ import annotations

import pickle
import struct
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from grovecrawl.sparse_set import ENABLED_MASK, ENTITIES_PER_ROW, SparseSet, is_enabled

_ENTRY = struct.Struct("<QQ")
_TRAILER = struct.Struct("<Q")


def _type_key(component_type: type) -> str:
    return f"{component_type.__module__}.{component_type.__qualname__}"


class ComponentPool:
    """Components of a single type, stored densely alongside their entities."""

    def __init__(self, component_type: type, entities_per_row: int = ENTITIES_PER_ROW) -> None:
        self.component_type = component_type
        self._entities = SparseSet(entities_per_row)
        self._components: list[Any] = []

    @property
    def entities(self) -> tuple[int, ...]:
        return self._entities.packed

    def contains(self, entity: int) -> bool:
        return self._entities.contains(entity)

    def __contains__(self, entity: object) -> bool:
        return entity in self._entities

    def __len__(self) -> int:
        return len(self._components)

    def __iter__(self) -> Iterator[int]:
        return iter(self._entities)

    def items(self) -> list[tuple[int, Any]]:
        """Pairs of entity and component in dense order."""
        return list(zip(self._entities.packed, self._components))

    def emplace(self, entity: int, component: Any) -> Any:
        """Attach ``component`` to ``entity``, replacing any existing one."""
        if not isinstance(component, self.component_type):
            raise TypeError(
                f"expected {self.component_type.__name__}, got {type(component).__name__}"
            )
        index = self._entities.find(entity)
        if index is not None:
            self._components[index] = component
        else:
            self._entities.emplace(entity)
            self._components.append(component)
        return component

    def erase(self, entity: int) -> None:
        """Remove the component of ``entity``; does nothing if it has none."""
        index = self._entities.erase(entity)
        if index is None:
            return
        last = self._components.pop()
        if index < len(self._components):
            self._components[index] = last

    def get(self, entity: int) -> Any:
        index = self._entities.find(entity)
        if index is None:
            raise KeyError(f"entity {entity:#x} has no {self.component_type.__name__}")
        return self._components[index]

    def clear(self) -> None:
        self._components.clear()
        self._entities.clear()

    def shrink_to_fit(self) -> None:
        """Drop the components of disabled entities."""
        kept = self._entities.shrink_to_fit()
        self._components = [self._components[index] for index in kept]

    def serialize(self) -> bytes:
        return pickle.dumps(self.items())

    def deserialize(self, data: bytes) -> None:
        pairs = pickle.loads(data)
        self.clear()
        for entity, component in pairs:
            self.emplace(entity, component)


class Registry:
    """Creates entities and keeps their components."""

    def __init__(self) -> None:
        self._pools: dict[type, ComponentPool] = {}
        self._next_entity = 0

    def create(self) -> int:
        entity = ENABLED_MASK | self._next_entity
        self._next_entity += 1
        return entity

    def destroy(self, entity: int) -> None:
        """Remove every component of ``entity`` if it is enabled."""
        if not is_enabled(entity):
            return
        for pool in self._pools.values():
            pool.erase(entity)

    def _assure(self, component_type: type) -> ComponentPool:
        pool = self._pools.get(component_type)
        if pool is None:
            pool = ComponentPool(component_type)
            self._pools[component_type] = pool
        return pool

    def declare(self, component_type: type) -> None:
        self._assure(component_type)

    def emplace(self, entity: int, component: Any) -> Any:
        return self._assure(type(component)).emplace(entity, component)

    def get_component(self, entity: int, component_type: type) -> Any:
        return self._assure(component_type).get(entity)

    def has_component(self, entity: int, component_type: type) -> bool:
        return self._assure(component_type).contains(entity)

    def has_components(self, entity: int, *args: type) -> bool:
        if not args:
            raise TypeError("has_components needs at least one component type")
        return all(self.has_component(entity, component_type) for component_type in args)

    def erase(self, entity: int, component_type: type) -> None:
        pool = self._pools.get(component_type)
        if pool is not None:
            pool.erase(entity)

    def iterate(self, component_type: type) -> tuple[int, ...]:
        """Entities that have a component of ``component_type``."""
        return self._assure(component_type).entities

    def shrink_to_fit(self, component_type: type) -> None:
        self._assure(component_type).shrink_to_fit()

    def serialize(self, path: str | Path) -> None:
        """Write every non-empty pool to ``path``."""
        body = bytearray()
        metadata = bytearray()
        for component_type, pool in self._pools.items():
            if not len(pool):
                continue
            blob = pool.serialize()
            metadata += _type_key(component_type).encode() + b":"
            metadata += _ENTRY.pack(len(body), len(blob))
            body += blob
        Path(path).write_bytes(bytes(body) + bytes(metadata) + _TRAILER.pack(len(metadata)))

    def deserialize(self, path: str | Path) -> None:
        """Load the declared pools from a file written by ``serialize``."""
        data = Path(path).read_bytes()
        if len(data) < _TRAILER.size:
            raise ValueError("registry file is truncated")
        end = len(data) - _TRAILER.size
        (metadata_length,) = _TRAILER.unpack_from(data, end)
        metadata_start = end - metadata_length
        if metadata_start < 0:
            raise ValueError("registry file has a corrupt trailer")

        entries: dict[str, tuple[int, int]] = {}
        pos = metadata_start
        while pos < end:
            colon = data.find(b":", pos, end)
            if colon < 0 or colon + 1 + _ENTRY.size > end:
                raise ValueError("registry file has corrupt metadata")
            name = data[pos:colon].decode()
            entries[name] = _ENTRY.unpack_from(data, colon + 1)
            pos = colon + 1 + _ENTRY.size

        for component_type, pool in self._pools.items():
            entry = entries.get(_type_key(component_type))
            if entry is None:
                pool.clear()
                continue
            offset, length = entry
            if offset + length > metadata_start:
                raise ValueError("registry file entry points outside the data")
            pool.deserialize(data[offset:offset + length])

    def clear(self) -> None:
        self._pools.clear()