"""
Tests for the stack-based flood fill and the solid object mask.
"""

import numpy as np
import pytest

from sprite_splitter import SplitOptions, segment_image
from sprite_splitter.flood_fill import FloodFill, fill_background
from sprite_splitter.morphology import close_gaps


def _solid(foreground: np.ndarray) -> np.ndarray:
    return fill_background(close_gaps(foreground), foreground)


def test_fill_is_four_connected():
    grid = np.array([
        [0, 0, 1, 0],
        [0, 1, 0, 0],
        [0, 0, 1, 1],
    ], dtype=np.int32)
    filler = FloodFill(4, 3)

    count = filler.fill(0, 0, grid, 0, 7)

    assert count == 5
    assert grid.tolist() == [
        [7, 7, 1, 0],
        [7, 1, 0, 0],
        [7, 7, 1, 1],
    ]
    assert sorted(filler.filled[:count].tolist()) == [0, 1, 4, 8, 9]


def test_fill_respects_condition():
    grid = np.zeros((3, 5), dtype=np.int32)
    allowed = np.zeros((3, 5), dtype=np.uint8)
    allowed[1, :] = 1
    flat = allowed.reshape(-1)

    count = FloodFill(5, 3).fill(2, 1, grid, 0, 1, lambda idx: flat[idx] == 1)

    assert count == 5
    assert grid[1].tolist() == [1, 1, 1, 1, 1]
    assert grid[0].sum() == 0 and grid[2].sum() == 0


def test_fill_from_non_matching_seed_does_nothing():
    grid = np.ones((3, 3), dtype=np.int32)

    assert FloodFill(3, 3).fill(1, 1, grid, 0, 2) == 0
    assert (grid == 1).all()


def test_fill_covers_large_image_without_recursion():
    grid = np.zeros((400, 500), dtype=np.int32)

    count = FloodFill(500, 400).fill(250, 200, grid, 0, 1)

    assert count == 400 * 500
    assert (grid == 1).all()


def test_fill_rejects_mismatched_map():
    with pytest.raises(ValueError, match="shape"):
        FloodFill(4, 4).fill(0, 0, np.zeros((3, 4), dtype=np.int32), 0, 1)


def test_solid_mask_of_plain_square_is_the_square():
    """The halo added by the light closer does not end up in the solid mask."""
    fg = np.zeros((40, 40), dtype=np.uint8)
    fg[10:20, 10:20] = 1

    solid = _solid(fg)

    assert np.array_equal(solid, fg)


def test_enclosed_hole_is_filled():
    fg = np.zeros((40, 40), dtype=np.uint8)
    fg[5:30, 5:30] = 1
    fg[10:25, 10:25] = 0

    solid = _solid(fg)

    assert solid[5:30, 5:30].all(), "Cavity should be part of the solid mask"
    assert solid.sum() == 25 * 25


def test_hairline_break_does_not_leak():
    """A one-pixel break in an outline is bridged, so the interior stays solid."""
    fg = np.zeros((40, 40), dtype=np.uint8)
    fg[10, 10:30] = 1
    fg[29, 10:30] = 1
    fg[10:30, 10] = 1
    fg[10:30, 29] = 1
    fg[20, 29] = 0

    solid = _solid(fg)

    assert solid[10:30, 10:30].all()
    assert solid.sum() == 400


def test_wide_opening_lets_background_in():
    fg = np.zeros((40, 40), dtype=np.uint8)
    fg[10, 10:30] = 1
    fg[29, 10:30] = 1
    fg[10:30, 10] = 1
    fg[10:30, 29] = 1
    fg[15:25, 29] = 0

    solid = _solid(fg)

    assert solid[20, 20] == 0


def test_object_touching_border():
    fg = np.zeros((20, 20), dtype=np.uint8)
    fg[0:8, 0:8] = 1

    assert np.array_equal(_solid(fg), fg)


def test_halo_on_image_edge_is_removed():
    """A square one pixel from the edge gets the same solid footprint as one further in."""
    fg = np.zeros((60, 60), dtype=np.uint8)
    fg[10:30, 1:21] = 1

    assert np.array_equal(_solid(fg), fg)


def test_square_near_edge_matches_square_inside(make_sheet):
    options = SplitOptions(gap_fill=0, padding=0)
    near_edge = segment_image(make_sheet(60, 60, [(1, 10, 20, 29)]), options)
    inside = segment_image(make_sheet(60, 60, [(20, 10, 39, 29)]), options)

    edge_region = next(iter(near_edge.regions.values()))
    inner_region = next(iter(inside.regions.values()))
    assert (edge_region.min_x, edge_region.max_x) == (1, 20)
    assert edge_region.area == inner_region.area == 400
    assert (edge_region.width, edge_region.height) == (inner_region.width, inner_region.height)


def test_mask_condition_matches_callable_condition():
    rng = np.random.default_rng(11)
    allowed = (rng.random((30, 40)) > 0.35).astype(np.uint8)
    allowed[15, 20] = 1
    flat = allowed.reshape(-1)
    filler = FloodFill(40, 30)

    by_mask = np.zeros((30, 40), dtype=np.int32)
    by_callable = np.zeros((30, 40), dtype=np.int32)
    count_mask = filler.fill(20, 15, by_mask, 0, 3, allowed)
    count_callable = filler.fill(20, 15, by_callable, 0, 3, lambda idx: flat[idx] != 0)

    assert count_mask == count_callable > 0
    assert np.array_equal(by_mask, by_callable)
    assert (by_mask[allowed == 0] == 0).all()


def test_mask_condition_shape_is_checked():
    with pytest.raises(ValueError, match="condition shape"):
        FloodFill(4, 4).fill(0, 0, np.zeros((4, 4), dtype=np.int32), 0, 1,
                             np.ones((4, 5), dtype=np.uint8))


def test_inputs_are_not_modified():
    fg = np.zeros((20, 20), dtype=np.uint8)
    fg[5:10, 5:10] = 1
    closed = close_gaps(fg)
    fg_before, closed_before = fg.copy(), closed.copy()

    fill_background(closed, fg)

    assert np.array_equal(fg, fg_before)
    assert np.array_equal(closed, closed_before)
