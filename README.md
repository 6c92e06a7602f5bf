# splatforge

Building blocks for training Gaussian splat scenes with NumPy and Pillow.

## Modules

- `splatforge.colmap`: readers for COLMAP `cameras`, `images` and `points3D`
  files, text or binary: `read_cameras`, `read_images`, `read_points3d`, each
  taking a file object and a `binary` flag and returning a dict keyed by id.
  Records are the dataclasses `Camera` (with `focal()` and
  `principal_point()`), `Image` and `Point3D`; `CameraModel` lists the camera
  models with `from_id`, `from_name` and `num_params`. Malformed or truncated
  input raises `ColmapFormatError` (a `ValueError`).
- `splatforge.scene`: `ViewType`, `ViewImageType`, and helpers over camera
  poses: `camera_distance_penalty`, `nearest_view` (index of the closest of a
  list of 3x4 or 4x4 local-to-world matrices, or `None`), `adjusted_bounds`
  (min/max of camera positions pushed along their view axis by near and far
  distances; rotations are `(x, y, z, w)` quaternions), `estimate_extent`
  (`None` with fewer than five cameras) and `find_two_smallest`.
- `splatforge.adam`: Adam with an optional element-wise learning-rate scale.
  `AdamScaledConfig(...).init()` gives an `AdamScaled`; its
  `step(lr, tensor, grad, state)` returns the updated array and an `AdamState`
  whose `scaling` array, when set, multiplies the step. Weight decay and
  value or norm gradient clipping are optional.
- `splatforge.image`: `image_to_sample` turns a PIL image into a float32
  `[H, W, C]` array in `[0, 1]` (four channels when the image has alpha,
  premultiplied in `ViewImageType.ALPHA` mode); `tensor_into_image` turns a
  float32 `[H, W, 3|4]` array back into an 8-bit image.
- `splatforge.stats`: `RefineRecord` accumulates, per splat, screen-space
  gradient norms, visibility counts and the largest normalised radius through
  `gather_stats`.
- `splatforge.codewriter`: `CodeWriter` collects lines indented by brace depth;
  `text()` returns the result.
- `splatforge.mangling`: demangling of composed shader identifiers
  (`demangle`, `mod_name_from_mangled`, `decode`, `make_valid_import`) and the
  host type and alignment of WGSL types (`rust_type_name`, `alignment_of`).

## Install

```
pip install .
```

With the test requirements:

```
pip install ".[test]"
```

## Examples

```python
from splatforge.colmap import read_cameras

with open("sparse/0/cameras.bin", "rb") as fh:
    cameras = read_cameras(fh, binary=True)

for camera_id, camera in cameras.items():
    print(camera_id, camera.model, camera.focal(), camera.principal_point())
```

```python
import numpy as np
from splatforge.adam import AdamScaledConfig, AdamState

optimizer = AdamScaledConfig(epsilon=1e-15).init()
param = np.zeros((4, 3), dtype=np.float32)
grad = np.ones((4, 3), dtype=np.float32)

state = AdamState(scaling=np.array([1.0, 0.5, 0.25], dtype=np.float32))
param, state = optimizer.step(0.01, param, grad, state)
```

```python
from splatforge.stats import RefineRecord

record = RefineRecord(4)
record.gather_stats(
    global_from_compact_gid=[2, 0],
    num_visible=[2],
    radii=[1.0, 0.0, 3.0, 0.0],
    refine_weight=[[0.01, 0.0], [0.0, 0.02]],
    width=64,
    height=32,
)
print(record.refine_weight_norm, record.visible_counts, record.max_radii)
```

## What it does not do

The package has no splat renderer, no loss or image-quality metrics, no
training loop and no densify/prune step; it provides the data readers,
optimiser, image conversion and statistics such a trainer is built from. It
has no command-line tool and no viewer.

## Tests

```
pytest
```