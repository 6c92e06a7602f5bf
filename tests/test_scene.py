import math

import numpy as np
import pytest

from splatforge.scene import (
    adjusted_bounds,
    camera_distance_penalty,
    estimate_extent,
    find_two_smallest,
    nearest_view,
)

IDENTITY_Q = (0.0, 0.0, 0.0, 1.0)


def _translation(x, y, z):
    m = np.eye(4)
    m[:3, 3] = (x, y, z)
    return m


def test_penalty_zero_for_identical_cameras():
    assert camera_distance_penalty(np.eye(4), np.eye(4)) == 0.0


def test_penalty_pure_translation():
    assert camera_distance_penalty(_translation(0, 0, 2), np.eye(4)) == pytest.approx(18.0)


def test_penalty_is_symmetric():
    a = _translation(1, -2, 0.5)
    b = _translation(-3, 0, 1)
    assert camera_distance_penalty(a, b) == pytest.approx(camera_distance_penalty(b, a))


def test_penalty_accepts_3x4():
    m = _translation(1, 2, 3)
    assert camera_distance_penalty(m[:3], np.eye(4)) == pytest.approx(
        camera_distance_penalty(m, np.eye(4))
    )


def test_penalty_bad_shape_raises():
    with pytest.raises(ValueError):
        camera_distance_penalty(np.eye(3), np.eye(4))


def test_find_two_smallest():
    assert find_two_smallest((3.0, 1.0, 2.0)) == (1.0, 2.0)


def test_find_two_smallest_nan_raises():
    with pytest.raises(ValueError):
        find_two_smallest((1.0, float("nan"), 2.0))


def test_nearest_view_picks_closest():
    views = [_translation(5, 0, 0), _translation(0.1, 0, 0), _translation(-3, 0, 0)]
    assert nearest_view(views, np.eye(4)) == 1


def test_nearest_view_first_on_tie():
    views = [_translation(1, 0, 0), _translation(-1, 0, 0)]
    assert nearest_view(views, np.eye(4)) == 0


def test_nearest_view_empty():
    assert nearest_view([], np.eye(4)) is None


def test_bounds_without_planes_cover_positions():
    positions = np.array([[0.0, 5.0, -1.0], [2.0, -3.0, 4.0], [1.0, 1.0, 1.0]])
    lo, hi = adjusted_bounds(positions, [IDENTITY_Q] * 3, 0.0, 0.0)
    np.testing.assert_allclose(lo, positions.min(axis=0))
    np.testing.assert_allclose(hi, positions.max(axis=0))


def test_bounds_identity_rotation_extend_along_z():
    positions = np.array([[0.0, 0.0, 0.0], [1.0, 2.0, 3.0]])
    lo, hi = adjusted_bounds(positions, [IDENTITY_Q] * 2, 1.0, 5.0)
    assert lo[2] == pytest.approx(0.0 + 1.0)
    assert hi[2] == pytest.approx(3.0 + 5.0)
    np.testing.assert_allclose(lo[:2], positions[:, :2].min(axis=0))
    np.testing.assert_allclose(hi[:2], positions[:, :2].max(axis=0))


def test_bounds_follow_rotation():
    s = math.sin(math.pi / 4)
    lo, hi = adjusted_bounds([[0.0, 0.0, 0.0]], [(s, 0.0, 0.0, s)], 0.0, 2.0)
    np.testing.assert_allclose(lo, [0.0, -2.0, 0.0], atol=1e-9)
    np.testing.assert_allclose(hi, [0.0, 0.0, 0.0], atol=1e-9)


def test_bounds_empty_scene():
    lo, hi = adjusted_bounds(np.zeros((0, 3)), np.zeros((0, 4)))
    assert np.all(np.isposinf(lo))
    assert np.all(np.isneginf(hi))


def test_bounds_mismatched_lengths_raise():
    with pytest.raises(ValueError):
        adjusted_bounds(np.zeros((2, 3)), np.zeros((1, 4)))


def test_estimate_extent_needs_five_views():
    positions = np.random.default_rng(0).normal(size=(4, 3))
    assert estimate_extent(positions, [IDENTITY_Q] * 4) is None


def test_estimate_extent_uses_two_smallest_sizes():
    positions = [[0, 0, 0], [10, 0, 0], [0, 3, 0], [0, 0, 4], [1, 1, 1]]
    assert estimate_extent(positions, [IDENTITY_Q] * 5) == pytest.approx(5.0)