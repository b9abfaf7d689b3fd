"""Entity factory interface — the engine's only way to touch the world.

The engine decides *where* walls go; a factory decides *what* they are.
Implementations receive a SpawnRequest and return an opaque handle that
the engine keeps solely so it can pass it back to ``destroy()``.

Contract:
    create(request)  may raise; the engine logs the error and skips that
                     candidate without counting it as placed.
    destroy(handle)  called at most once per handle returned by create().
"""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable

from .models import SpawnRequest, Vec2


class EntityFactory(ABC):
    """Base class every entity factory must extend."""

    @abstractmethod
    def create(self, request: SpawnRequest) -> Any:
        """Create an entity for ``request`` and return its handle."""

    @abstractmethod
    def destroy(self, handle: Any) -> None:
        """Destroy a previously created entity."""


class CallbackEntityFactory(EntityFactory):
    """Adapts a pair of plain callables to the factory interface."""

    def __init__(
        self,
        create: Callable[[SpawnRequest], Any],
        destroy: Callable[[Any], None],
    ) -> None:
        self._create = create
        self._destroy = destroy

    def create(self, request: SpawnRequest) -> Any:
        return self._create(request)

    def destroy(self, handle: Any) -> None:
        self._destroy(handle)


@dataclass
class SpawnedWall:
    """In-memory stand-in for a wall entity."""

    handle_id: int
    name: str
    position: Vec2
    max_health: int | None = None
    current_health: int | None = None
    alive: bool = True

    def to_dict(self) -> dict:
        return {
            "id": self.handle_id,
            "name": self.name,
            "position": list(self.position),
            "health": self.current_health,
        }


@dataclass
class RecordingEntityFactory(EntityFactory):
    """Keeps walls in a dict; used by the CLI and tests.

    When a request carries a health range, a health value is rolled
    uniformly from ``[min, max]`` inclusive, like the original wall prefab.
    """

    rng: random.Random = field(default_factory=random.Random)
    walls: dict[int, SpawnedWall] = field(default_factory=dict)
    created: int = 0
    destroyed: list[int] = field(default_factory=list)

    def create(self, request: SpawnRequest) -> int:
        self.created += 1
        handle = self.created
        health = None
        if request.health_range is not None:
            lo, hi = request.health_range
            health = self.rng.randint(lo, hi)
        self.walls[handle] = SpawnedWall(
            handle_id=handle,
            name=request.name,
            position=request.position,
            max_health=health,
            current_health=health,
        )
        return handle

    def destroy(self, handle: int) -> None:
        wall = self.walls.pop(handle, None)
        if wall is not None:
            wall.alive = False
        self.destroyed.append(handle)

    @property
    def alive_count(self) -> int:
        return len(self.walls)
