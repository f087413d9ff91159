"""
Stack-based flood fill and the border-seeded background fill built on it.

The fill never recurses: pending cells live in an index stack allocated once
at the size of the image, so even a fill covering every pixel cannot overflow.
"""

from __future__ import annotations

from typing import Callable, Union

import cv2
import numpy as np

# Either a per-index predicate or a (height, width) array whose nonzero cells may be filled
FillCondition = Union[Callable[[int], bool], np.ndarray]


class FloodFill:
    """
    Reusable 4-connected flood fill over flat pixel indices.

    Attributes:
        width: Image width in pixels
        height: Image height in pixels
        stack: Pending cell indices, sized to width * height
        filled: Indices changed by the most recent fill, in fill order
    """

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.stack = np.empty(width * height, dtype=np.int32)
        self.filled = np.empty(width * height, dtype=np.int32)

    def fill(
        self,
        start_x: int,
        start_y: int,
        target_map: np.ndarray,
        target_value: int,
        fill_value: int,
        condition: FillCondition | None = None,
    ) -> int:
        """
        Replace target_value with fill_value in the region connected to the start cell.

        A cell joins the region if it holds target_value and passes the condition.
        The condition is either a callable on the flat index or a mask array of
        the image's shape, where nonzero cells pass. The mask form is checked
        inline and is much faster on large images. The start cell is tested the same way.

        Args:
            start_x: Column of the seed cell
            start_y: Row of the seed cell
            target_map: C-contiguous (height, width) array, modified in place
            target_value: Value of cells that can be filled
            fill_value: Value written to filled cells; must differ from target_value
            condition: Optional extra per-cell test

        Returns:
            Number of filled cells; their indices are self.filled[:count]
        """
        shape = (self.height, self.width)
        if target_map.shape != shape:
            raise ValueError(f"target_map shape {target_map.shape} does not match {shape}")
        if not target_map.flags.c_contiguous:
            raise ValueError("target_map must be C-contiguous")
        if fill_value == target_value:
            raise ValueError("fill_value must differ from target_value")

        allowed = None
        check = None
        if isinstance(condition, np.ndarray):
            if condition.shape != shape:
                raise ValueError(f"condition shape {condition.shape} does not match {shape}")
            allowed = memoryview(np.ascontiguousarray(condition).reshape(-1))
        elif condition is not None:
            check = condition

        # memoryviews index to plain ints, far cheaper than numpy scalars in a Python loop
        cells = memoryview(target_map.reshape(-1))
        stack = memoryview(self.stack)
        filled = memoryview(self.filled)
        width = self.width
        last_row = (self.height - 1) * width

        start_idx = start_y * width + start_x
        if cells[start_idx] != target_value:
            return 0
        if allowed is not None and not allowed[start_idx]:
            return 0
        if check is not None and not check(start_idx):
            return 0

        cells[start_idx] = fill_value
        stack[0] = start_idx
        filled[0] = start_idx
        stack_ptr = 1
        count = 1

        while stack_ptr > 0:
            stack_ptr -= 1
            idx = stack[stack_ptr]
            cx = idx % width

            # Right
            n_idx = idx + 1
            if (cx + 1 < width and cells[n_idx] == target_value
                    and (allowed is None or allowed[n_idx])
                    and (check is None or check(n_idx))):
                cells[n_idx] = fill_value
                stack[stack_ptr] = filled[count] = n_idx
                stack_ptr += 1
                count += 1
            # Left
            n_idx = idx - 1
            if (cx > 0 and cells[n_idx] == target_value
                    and (allowed is None or allowed[n_idx])
                    and (check is None or check(n_idx))):
                cells[n_idx] = fill_value
                stack[stack_ptr] = filled[count] = n_idx
                stack_ptr += 1
                count += 1
            # Down
            n_idx = idx + width
            if (idx < last_row and cells[n_idx] == target_value
                    and (allowed is None or allowed[n_idx])
                    and (check is None or check(n_idx))):
                cells[n_idx] = fill_value
                stack[stack_ptr] = filled[count] = n_idx
                stack_ptr += 1
                count += 1
            # Up
            n_idx = idx - width
            if (idx >= width and cells[n_idx] == target_value
                    and (allowed is None or allowed[n_idx])
                    and (check is None or check(n_idx))):
                cells[n_idx] = fill_value
                stack[stack_ptr] = filled[count] = n_idx
                stack_ptr += 1
                count += 1

        return count


def fill_background(light_closed: np.ndarray, foreground: np.ndarray) -> np.ndarray:
    """
    Build the solid object mask by flooding the exterior background from the image border.

    The fill crosses only cells that are 0 in the light-closed mask. Cells it
    reaches are confirmed background. Confirmation then extends one step (8-connected)
    into cells that were never foreground, which removes the halo the light
    closer added around every object. Space outside the image counts as
    background for that step, so halos on the image edge are removed too.
    Bridged hairline gaps and enclosed cavities are not next to the exterior,
    so they remain part of the object.

    Args:
        light_closed: Foreground mask after the light gap closer (uint8, 0/1)
        foreground: Foreground mask before the light gap closer (uint8, 0/1)

    Returns:
        Solid object mask: 1 for sprite pixels and enclosed holes, 0 for exterior background
    """
    height, width = light_closed.shape
    background = np.zeros((height, width), dtype=np.int32)
    filler = FloodFill(width, height)
    is_open = (light_closed == 0).astype(np.uint8)

    for x in range(width):
        filler.fill(x, 0, background, 0, 1, is_open)
        filler.fill(x, height - 1, background, 0, 1, is_open)
    for y in range(height):
        filler.fill(0, y, background, 0, 1, is_open)
        filler.fill(width - 1, y, background, 0, 1, is_open)

    reached = (background == 1).astype(np.uint8)
    near_exterior = cv2.dilate(reached, np.ones((3, 3), np.uint8), iterations=1,
                               borderType=cv2.BORDER_CONSTANT, borderValue=1)
    background[(near_exterior == 1) & (foreground == 0)] = 1

    return (background == 0).astype(np.uint8)
