"""Entity handles and the manager that creates them."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Optional

from grovecrawl.components import Tag, Transform
from grovecrawl.geometry import Vec2
from grovecrawl.registry import Registry


class Entity:
    """Handle to an entity in a registry.

    Used as a context manager, the entity is destroyed on exit.
    """

    def __init__(self, registry: Optional[Registry] = None, entity_id: int = 0) -> None:
        self._registry = registry
        self._id = entity_id

    @property
    def id(self) -> int:
        return self._id

    @property
    def registry(self) -> Optional[Registry]:
        return self._registry

    def _bound(self) -> Registry:
        if self._registry is None:
            raise RuntimeError("entity is not bound to a registry")
        return self._registry

    def add_component(self, component: Any) -> Any:
        return self._bound().emplace(self._id, component)

    def get_component(self, component_type: type) -> Any:
        return self._bound().get_component(self._id, component_type)

    def has_component(self, component_type: type) -> bool:
        return self._bound().has_component(self._id, component_type)

    def remove_component(self, component_type: type) -> None:
        self._bound().erase(self._id, component_type)

    def set_parent(self, parent: Entity | int) -> None:
        parent_id = parent.id if isinstance(parent, Entity) else parent
        self.transform().parent_id = parent_id

    def tag(self) -> Tag:
        return self.get_component(Tag)

    def transform(self) -> Transform:
        return self.get_component(Transform)

    def destroy(self) -> None:
        """Remove every component of this entity; unbound handles do nothing."""
        if self._registry is not None:
            self._registry.destroy(self._id)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Entity):
            return self._id == other._id
        if isinstance(other, int):
            return self._id == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return f"Entity({self._id:#x})"

    def __enter__(self) -> Entity:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.destroy()


class EntityManager:
    """Creates entities carrying a Tag and a Transform and manages their components."""

    def __init__(self) -> None:
        self._registry = Registry()

    @property
    def registry(self) -> Registry:
        return self._registry

    def create(
        self,
        pos: Optional[Vec2] = None,
        tag: Tag = Tag.NONE,
        size: Optional[Vec2] = None,
    ) -> Entity:
        return Entity(self._registry, self.registry_create(pos, tag, size))

    def registry_create(
        self,
        pos: Optional[Vec2] = None,
        tag: Tag = Tag.NONE,
        size: Optional[Vec2] = None,
    ) -> int:
        entity = self._registry.create()
        self._registry.emplace(entity, Tag(tag))
        transform = Transform()
        if pos is not None:
            transform.pos = pos.copy()
        if size is not None:
            transform.size = size.copy()
        self._registry.emplace(entity, transform)
        return entity

    def get_component(self, entity: int, component_type: type) -> Any:
        return self._registry.get_component(entity, component_type)

    def has_component(self, entity: int, component_type: type) -> bool:
        return self._registry.has_component(entity, component_type)

    def has_components(self, entity: int, *args: type) -> bool:
        return self._registry.has_components(entity, *args)

    def add_component(self, entity: int, component: Any) -> Any:
        return self._registry.emplace(entity, component)

    def remove_component(self, entity: int, component_type: type) -> None:
        self._registry.erase(entity, component_type)

    def destroy(self, entity: int) -> None:
        self._registry.destroy(entity)

    def iterate(self, component_type: type) -> Iterable[int]:
        return self._registry.iterate(component_type)