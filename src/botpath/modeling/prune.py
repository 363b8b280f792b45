from __future__ import annotations

import heapq
import math
from typing import Sequence

import numpy as np

from botpath.validation import require_points, require_tolerance


def _dedupe_indices(pts: np.ndarray) -> list[int]:
    kept: list[int] = []
    for idx in range(pts.shape[0]):
        if kept and np.array_equal(pts[idx], pts[kept[-1]]):
            continue
        kept.append(idx)
    return kept


def _direction(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    delta = b - a
    return delta / np.linalg.norm(delta)


def prune_indices(points: Sequence[Sequence[float]] | np.ndarray, angle_tolerance: float) -> list[int]:
    """Return the indices of the vertices that survive pruning.

    Exact repeats of the previous point are dropped first. Then the interior
    vertex whose adjacent segments are most nearly collinear is removed while
    that collinearity (the cosine of the bend) is at least
    ``cos(angle_tolerance)``. Equal scores resolve to the vertex nearest the
    start of the path. Only the two neighbours of a removed vertex are
    rescored.
    """

    pts = require_points(points)
    tolerance = require_tolerance(angle_tolerance)
    kept = _dedupe_indices(pts)
    if len(kept) <= 2:
        return kept

    threshold = math.cos(tolerance)
    count = len(kept)
    prev = list(range(-1, count - 1))
    nxt = list(range(1, count + 1))
    nxt[-1] = -1
    alive = [True] * count
    version = [0] * count

    def score(slot: int) -> float:
        a = pts[kept[prev[slot]]]
        b = pts[kept[slot]]
        c = pts[kept[nxt[slot]]]
        return float(np.dot(_direction(a, b), _direction(b, c)))

    # Slots are in path order, so the smallest slot among equal scores is the leftmost.
    heap: list[tuple[float, int, int]] = [(-score(slot), slot, 0) for slot in range(1, count - 1)]
    heapq.heapify(heap)

    remaining = count
    while heap and remaining > 2:
        neg_score, slot, stamp = heapq.heappop(heap)
        if not alive[slot] or stamp != version[slot]:
            continue
        if -neg_score < threshold:
            break

        before, after = prev[slot], nxt[slot]
        alive[slot] = False
        nxt[before] = after
        prev[after] = before
        remaining -= 1

        for neighbour in (before, after):
            if prev[neighbour] == -1 or nxt[neighbour] == -1:
                continue
            version[neighbour] += 1
            heapq.heappush(heap, (-score(neighbour), neighbour, version[neighbour]))

    return [kept[slot] for slot in range(count) if alive[slot]]


def prune_vertices(points: Sequence[Sequence[float]] | np.ndarray, angle_tolerance: float) -> np.ndarray:
    """Collapse near-collinear vertices of a polyline."""

    pts = require_points(points)
    return pts[prune_indices(pts, angle_tolerance)].copy()


__all__ = ["prune_indices", "prune_vertices"]
