"""Per-splat statistics gathered during training and used for refinement."""

from __future__ import annotations

import numpy as np

__all__ = ["RefineRecord"]


def _count(num_visible) -> int:
    value = np.asarray(num_visible).reshape(-1)
    if value.size == 0:
        raise ValueError("num_visible must hold a value")
    count = int(value[0])
    if count < 0:
        raise ValueError("num_visible must not be negative")
    return count


class RefineRecord:
    """Accumulates screen-space gradient norms, visibility counts and radii per splat."""

    def __init__(self, num_points: int) -> None:
        if num_points < 0:
            raise ValueError("number of points must not be negative")
        self.refine_weight_norm = np.zeros(num_points, dtype=np.float32)
        self.visible_counts = np.zeros(num_points, dtype=np.uint32)
        self.max_radii = np.zeros(num_points, dtype=np.float32)

    @property
    def num_points(self) -> int:
        return self.refine_weight_norm.shape[0]

    def gather_stats(
        self,
        global_from_compact_gid,
        num_visible,
        radii,
        refine_weight,
        width: int,
        height: int,
    ) -> None:
        """Fold one render's statistics for the visible splats into the record.

        ``refine_weight`` holds one (x, y) gradient per visible splat in compact
        order; it is scaled to pixels by half the image size before taking its
        norm. Radii are normalised by the larger image side.
        """
        if width <= 0 or height <= 0:
            raise ValueError("image size must be positive")
        count = _count(num_visible)
        gs_ids = np.asarray(global_from_compact_gid, dtype=np.int64).reshape(-1)
        radii = np.asarray(radii, dtype=np.float32).reshape(-1)
        weights = np.asarray(refine_weight, dtype=np.float32).reshape(-1, 2)

        if count > gs_ids.shape[0]:
            raise ValueError("more visible splats than ids")
        if count > weights.shape[0]:
            raise ValueError("more visible splats than refine weights")

        ids = gs_ids[:count]
        if ids.size and (ids.min() < 0 or ids.max() >= self.num_points):
            raise IndexError("splat id out of range")
        if ids.size and ids.max() >= radii.shape[0]:
            raise IndexError("splat id out of range of radii")

        scale = np.array([width / 2.0, height / 2.0], dtype=np.float32)
        grads = weights[:count] * scale
        norms = np.sqrt(grads[:, 0] * grads[:, 0] + grads[:, 1] * grads[:, 1])

        np.add.at(self.refine_weight_norm, ids, norms.astype(np.float32))
        np.add.at(self.visible_counts, ids, np.uint32(1))

        radii_norm = radii[ids] / np.float32(max(width, height))
        np.maximum.at(self.max_radii, ids, radii_norm.astype(np.float32))