"""Scene views and geometric helpers over the cameras of a scene."""

from __future__ import annotations

import math
from enum import Enum
from typing import Sequence

import numpy as np

__all__ = [
    "ViewType",
    "ViewImageType",
    "camera_distance_penalty",
    "find_two_smallest",
    "nearest_view",
    "adjusted_bounds",
    "estimate_extent",
]


class ViewType(Enum):
    """Which split of the dataset a view belongs to."""

    TRAIN = "train"
    EVAL = "eval"
    TEST = "test"


class ViewImageType(Enum):
    """How the alpha channel of a view's image is interpreted."""

    ALPHA = "alpha"
    MASKED = "masked"


_OFFSETS = np.array(
    [(x, y, 1.0) for x in (-1.0, 0.0, 1.0) for y in (-1.0, 0.0, 1.0)],
    dtype=np.float64,
)


def _as_affine(matrix) -> np.ndarray:
    m = np.asarray(matrix, dtype=np.float64)
    if m.shape not in ((3, 4), (4, 4)):
        raise ValueError(f"expected a 3x4 or 4x4 affine matrix, got shape {m.shape}")
    return m


def _transform_points(matrix: np.ndarray, points: np.ndarray) -> np.ndarray:
    return points @ matrix[:3, :3].T + matrix[:3, 3]


def camera_distance_penalty(cam_local_to_world, reference) -> float:
    """Sum of distances between nine probe points placed in front of both cameras."""
    cam = _transform_points(_as_affine(cam_local_to_world), _OFFSETS)
    ref = _transform_points(_as_affine(reference), _OFFSETS)
    return float(np.linalg.norm(cam - ref, axis=1).sum())


def find_two_smallest(v: Sequence[float]) -> tuple[float, float]:
    """Return the two smallest components, in ascending order."""
    values = [float(x) for x in v]
    if len(values) < 2:
        raise ValueError("need at least two values")
    if any(math.isnan(x) for x in values):
        raise ValueError("NaN")
    values.sort()
    return values[0], values[1]


def nearest_view(local_to_worlds: Sequence, reference) -> int | None:
    """Index of the camera closest to ``reference``, or None when there are none."""
    ref = _as_affine(reference)
    penalties = [camera_distance_penalty(m, ref) for m in local_to_worlds]
    if not penalties:
        return None
    return min(range(len(penalties)), key=penalties.__getitem__)


def _forward_axes(rotations: np.ndarray) -> np.ndarray:
    """Rotate the +Z axis by each (x, y, z, w) quaternion."""
    x, y, z, w = rotations.T
    return np.stack(
        [2.0 * (x * z + w * y), 2.0 * (y * z - w * x), 1.0 - 2.0 * (x * x + y * y)],
        axis=1,
    )


def adjusted_bounds(
    positions, rotations, cam_near: float = 0.0, cam_far: float = 0.0
) -> tuple[np.ndarray, np.ndarray]:
    """Bounding box (min, max) of camera positions pushed to their near and far planes.

    ``positions`` holds one xyz row per camera, ``rotations`` one (x, y, z, w)
    quaternion per camera.
    """
    pos = np.asarray(positions, dtype=np.float64).reshape(-1, 3)
    rot = np.asarray(rotations, dtype=np.float64).reshape(-1, 4)
    if len(pos) != len(rot):
        raise ValueError("positions and rotations must have the same length")
    forward = _forward_axes(rot)
    points = np.concatenate([pos + forward * cam_near, pos + forward * cam_far])
    lo = np.min(points, axis=0, initial=np.inf)
    hi = np.max(points, axis=0, initial=-np.inf)
    return lo, hi


def estimate_extent(positions, rotations) -> float | None:
    """Rough size of the scene from its cameras; None with fewer than five views."""
    pos = np.asarray(positions, dtype=np.float64).reshape(-1, 3)
    if len(pos) < 5:
        return None
    lo, hi = adjusted_bounds(pos, rotations, 0.0, 0.0)
    smallest = find_two_smallest(hi - lo)
    return math.hypot(*smallest)