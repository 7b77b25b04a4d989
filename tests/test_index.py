"""Tests for the flattened world element index."""

import pytest

from forest.world.index import WorldElementIndex
from forest.world.types import Bush, Chunk, ElementBatch, Flower, Hitbox, Tree


def test_add_keeps_elements_sharing_an_id():
    index = WorldElementIndex()
    tree = Tree(id=1, x=0, y=0, size=80)
    assert index.add(Chunk(0, 0, trees=(tree,))) == 1
    # Another source may number its elements from the same base.
    other = Tree(id=1, x=600, y=0, size=90)
    assert index.add(ElementBatch(trees=[other], bushes=[Bush(id=1, x=0, y=0, size=40)])) == 2
    assert len(index) == 3
    assert index.trees == [tree, other]


def test_visibility_includes_padding_margin():
    index = WorldElementIndex()
    index.add(
        ElementBatch(
            trees=[Tree(id=1, x=1099, y=0, size=50), Tree(id=2, x=1100, y=0, size=50)],
            bushes=[Bush(id=3, x=-139, y=500, size=40), Bush(id=4, x=-140, y=500, size=40)],
            flowers=[Flower(id=5, x=1050, y=500), Flower(id=6, x=500, y=1101)],
        )
    )
    visible = index.visible_within(Hitbox.from_rect(0, 0, 1000, 1000))

    assert [t.id for t in visible.trees] == [1]
    assert [b.id for b in visible.bushes] == [3]
    assert [f.id for f in visible.flowers] == [5]


def test_within_without_padding():
    index = WorldElementIndex()
    index.add(ElementBatch(trees=[Tree(id=1, x=1000, y=0, size=50)]))
    assert len(index.within(Hitbox.from_rect(0, 0, 1000, 1000))) == 0
    assert len(index.within(Hitbox.from_rect(0, 0, 1000, 1000), padding=1)) == 1


def test_minimap_points_are_scaled_and_centred():
    index = WorldElementIndex()
    index.add(ElementBatch(trees=[Tree(id=1, x=2500, y=2500, size=80)], bushes=[Bush(id=2, x=0, y=0, size=40)]))
    points = index.minimap_points(5000, 5000)

    assert set(points) == {"trees", "bushes"}
    assert points["trees"][0] == pytest.approx((88.0, 88.0))
    assert points["bushes"][0] == pytest.approx((-1.5, -1.5))
