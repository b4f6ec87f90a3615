"""Paged sparse set of entity identifiers.

An entity identifier is a 32-bit value. The low 31 bits hold the id and
the top bit marks the entity as enabled.
"""

from __future__ import annotations

from collections.abc import Iterator

ID_MASK = 0xFFFFFFFF >> 1
ENABLED_MASK = ~ID_MASK & 0xFFFFFFFF
ENTITIES_PER_ROW = 256


def is_enabled(entity: int) -> bool:
    """Return True if the enabled bit of ``entity`` is set."""
    return bool(entity & ENABLED_MASK)


class SparseSet:
    """Set of entities with O(1) lookup, insertion and swap-removal.

    Entities are stored densely in insertion order (modulo swap-removal);
    a paged sparse table maps each entity to its dense index.
    """

    def __init__(self, entities_per_row: int = ENTITIES_PER_ROW) -> None:
        if entities_per_row <= 0 or entities_per_row & (entities_per_row - 1):
            raise ValueError(
                f"entities_per_row must be a positive power of two, got {entities_per_row}"
            )
        self.entities_per_row = entities_per_row
        self._packed: list[int] = []
        self._sparse: list[list[int] | None] = []

    def row(self, entity: int) -> int:
        """Page of the sparse table that holds ``entity``."""
        return (entity & ID_MASK) // self.entities_per_row

    def column(self, entity: int) -> int:
        """Slot of ``entity`` inside its page."""
        return entity & (self.entities_per_row - 1)

    def _page(self, entity: int) -> list[int]:
        row = self.row(entity)
        if row >= len(self._sparse):
            self._sparse.extend([None] * (row + 1 - len(self._sparse)))
        page = self._sparse[row]
        if page is None:
            page = [0] * self.entities_per_row
            self._sparse[row] = page
        return page

    @property
    def packed(self) -> tuple[int, ...]:
        """The stored entities in dense order."""
        return tuple(self._packed)

    def find(self, entity: int) -> int | None:
        """Dense index of ``entity``, or None if it is not in the set."""
        index = self._page(entity)[self.column(entity)]
        if index < len(self._packed) and self._packed[index] == entity:
            return index
        return None

    def contains(self, entity: int) -> bool:
        return self.find(entity) is not None

    def __contains__(self, entity: object) -> bool:
        return isinstance(entity, int) and self.contains(entity)

    def emplace(self, entity: int) -> None:
        """Add ``entity``; adding one that is already present does nothing."""
        if self.contains(entity):
            return
        self._page(entity)[self.column(entity)] = len(self._packed)
        self._packed.append(entity)

    def erase(self, entity: int) -> int | None:
        """Remove ``entity`` by moving the last entity into its slot.

        Returns the dense index that was freed, or None if the entity
        was not present.
        """
        index = self.find(entity)
        if index is None:
            return None
        last = self._packed.pop()
        if index < len(self._packed):
            self._packed[index] = last
            self._page(last)[self.column(last)] = index
        return index

    def clear(self) -> None:
        self._packed.clear()
        self._sparse.clear()

    def shrink_to_fit(self) -> list[int]:
        """Drop every entity without the enabled bit and compact the table.

        Returns the former dense indices of the entities that were kept,
        in their new order.
        """
        kept = [index for index, entity in enumerate(self._packed) if is_enabled(entity)]
        self._packed = [self._packed[index] for index in kept]
        self._sparse = []
        self.recalculate_sparse()
        return kept

    def recalculate_sparse(self) -> None:
        """Rebuild the sparse table from the dense entity list."""
        for index, entity in enumerate(self._packed):
            self._page(entity)[self.column(entity)] = index

    def __len__(self) -> int:
        return len(self._packed)

    def __iter__(self) -> Iterator[int]:
        return iter(tuple(self._packed))