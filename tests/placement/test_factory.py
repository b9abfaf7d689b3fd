"""Unit tests for entity factories and the ASCII overlay."""

from __future__ import annotations

import random

import pytest

from gridwall.placement.debug import BLOCKED, OPEN, SAFE, WALL, render_ascii
from gridwall.placement.factory import (
    CallbackEntityFactory,
    EntityFactory,
    RecordingEntityFactory,
)
from gridwall.placement.grid import GridIndex
from gridwall.placement.models import PlacementRecord, SpawnRequest


pytestmark = pytest.mark.unit


def _request(index: int = 0, position=(1.5, 2.5), health=(25, 60)) -> SpawnRequest:
    return SpawnRequest(position=position, sequence_index=index,
                        name=SpawnRequest.make_name(index, position), health_range=health)


class TestRecordingFactory:

    def test_create_returns_unique_handles(self):
        factory = RecordingEntityFactory()
        handles = [factory.create(_request(i)) for i in range(5)]
        assert len(set(handles)) == 5
        assert factory.alive_count == 5

    def test_health_rolled_inside_range(self):
        factory = RecordingEntityFactory(rng=random.Random(0))
        for i in range(50):
            h = factory.create(_request(i, health=(25, 60)))
            wall = factory.walls[h]
            assert 25 <= wall.max_health <= 60
            assert wall.current_health == wall.max_health

    def test_no_health_range_leaves_health_unset(self):
        factory = RecordingEntityFactory()
        h = factory.create(_request(health=None))
        assert factory.walls[h].max_health is None

    def test_destroy_removes_wall(self):
        factory = RecordingEntityFactory()
        h = factory.create(_request())
        factory.destroy(h)
        assert factory.alive_count == 0
        assert factory.destroyed == [h]

    def test_wall_to_dict(self):
        factory = RecordingEntityFactory()
        h = factory.create(_request(3, position=(0.5, -0.5), health=None))
        data = factory.walls[h].to_dict()
        assert data["name"] == "GridWall_003_(0.5,-0.5)"
        assert data["position"] == [0.5, -0.5]


class TestCallbackFactory:

    def test_delegates_to_callables(self):
        created, destroyed = [], []

        def create(req):
            created.append(req.name)
            return req.sequence_index

        factory = CallbackEntityFactory(create, destroyed.append)
        assert isinstance(factory, EntityFactory)
        h = factory.create(_request(4))
        factory.destroy(h)
        assert created == ["GridWall_004_(1.5,2.5)"]
        assert destroyed == [4]

    def test_abstract_base_cannot_instantiate(self):
        with pytest.raises(TypeError):
            EntityFactory()


class TestRenderAscii:

    def test_shape_and_legend(self):
        grid = GridIndex((0.0, 0.0), radius=4, spacing_unit=1.0,
                         safe_radius=1.5, reference=(0.0, 0.0))
        record = PlacementRecord(world_position=grid.grid_to_world((2, 0)), sequence_index=0)
        grid.mark_neighborhood((2, 0))
        text = render_ascii(grid, [record])
        rows = text.split("\n")
        assert len(rows) == grid.size
        assert text.count(WALL) == 1
        assert SAFE in text
        assert BLOCKED in text
        assert OPEN in text

    def test_north_up(self):
        grid = GridIndex((0.0, 0.0), radius=3, spacing_unit=1.0, safe_radius=0.0)
        record = PlacementRecord(world_position=grid.grid_to_world((0, 2)), sequence_index=0)
        rows = render_ascii(grid, [record]).split("\n")
        # y=2 is the second row from the top (y=3 first)
        assert WALL in rows[1]
        assert all(WALL not in r for i, r in enumerate(rows) if i != 1)
