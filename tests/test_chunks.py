"""Tests for chunk streaming around the focus position."""

from forest.config import GameConfig
from forest.world.chunks import ChunkStore
from forest.world.types import Chunk, Position, Tree


def _store(**overrides) -> ChunkStore:
    return ChunkStore(GameConfig().with_overrides(**overrides))


def test_request_around_world_centre_loads_five_by_five_block():
    store = _store(world_width=5000, world_height=5000, chunk_size=500, render_distance=2)
    added = store.request_around(Position(2500, 2500))

    expected = {(x, y) for x in range(3, 8) for y in range(3, 8)}
    assert {chunk.key for chunk in store.get_all_loaded()} == expected
    assert len(store) == 25

    assert len(added) == len(store.index)
    for element in added:
        assert store.chunk_coords(element.x, element.y) in expected


def test_second_request_returns_nothing_new():
    store = _store()
    store.request_around(Position(2500, 2500))
    assert len(store.request_around(Position(2510, 2490))) == 0
    assert len(store) == 25


def test_moving_one_chunk_adds_only_the_new_column():
    store = _store()
    store.request_around(Position(2500, 2500))
    added = store.request_around(Position(3000, 2500))

    assert len(store) == 30
    new_keys = {(8, y) for y in range(3, 8)}
    for element in added:
        assert store.chunk_coords(element.x, element.y) in new_keys


def test_out_of_bounds_chunks_are_skipped():
    store = _store()
    store.request_around(Position(0, 0))
    assert {chunk.key for chunk in store.get_all_loaded()} == {(x, y) for x in range(3) for y in range(3)}

    store.request_around(Position(4999, 4999))
    assert (10, 10) not in store
    assert (9, 9) in store
    assert all(store.in_bounds(chunk.key) for chunk in store.get_all_loaded())


def test_chunk_coords_floor_negative_values():
    store = _store()
    assert store.chunk_coords(-1, 499.9) == (-1, 0)
    assert store.in_bounds((-1, 0)) is False


def test_insert_never_replaces_resident_chunk():
    store = _store()
    first = Chunk(1, 1, trees=(Tree(id=1, x=510, y=510, size=80),))
    second = Chunk(1, 1)

    assert store.insert(first) is True
    assert store.insert(second, source="server") is False
    assert store.get((1, 1)) is first
    assert len(store.index) == 1


def test_ensure_chunk_loaded():
    store = _store()
    assert store.ensure_chunk_loaded(Position(700, 20)) is True
    assert (1, 0) in store
    assert store.ensure_chunk_loaded(Position(-5, 20)) is False
    assert len(store) == 1


def test_diagnostics_snapshot_counts_sources():
    store = _store(render_distance=0)
    store.request_around(Position(2500, 2500))
    store.insert(Chunk(0, 0), source="server")

    snapshot = store.diagnostics_snapshot()
    assert snapshot["loaded_chunks"] == 2
    assert snapshot["generated_chunks"] == 1
    assert snapshot["received_chunks"] == 1
    assert (snapshot["center_chunk_x"], snapshot["center_chunk_y"]) == (5, 5)
