"""Readers for COLMAP reconstruction files (cameras, images and 3D points).

Both the text and the binary flavours are supported. Readers take a binary
file-like object (text readers also accept a text stream) and return
dictionaries keyed by the record id.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import Enum
from typing import BinaryIO, Iterator

__all__ = [
    "ColmapFormatError",
    "CameraModel",
    "Camera",
    "Image",
    "Point3D",
    "read_cameras",
    "read_images",
    "read_points3d",
]

_I32 = (-(2**31), 2**31 - 1)
_I64 = (-(2**63), 2**63 - 1)
_U64 = (0, 2**64 - 1)
_U8 = (0, 255)


class ColmapFormatError(ValueError):
    """Raised when COLMAP data is malformed or truncated."""


class CameraModel(Enum):
    """COLMAP camera models; the value is the model id used in binary files."""

    SIMPLE_PINHOLE = 0
    PINHOLE = 1
    SIMPLE_RADIAL = 2
    RADIAL = 3
    OPENCV = 4
    OPENCV_FISHEYE = 5
    FULL_OPENCV = 6
    FOV = 7
    SIMPLE_RADIAL_FISHEYE = 8
    RADIAL_FISHEYE = 9
    THIN_PRISM_FISHEYE = 10

    @classmethod
    def from_id(cls, model_id: int) -> CameraModel:
        """Return the model with this numeric id."""
        try:
            return cls(model_id)
        except ValueError:
            raise ColmapFormatError("Invalid camera model") from None

    @classmethod
    def from_name(cls, name: str) -> CameraModel:
        """Return the model with this exact COLMAP name."""
        model = cls.__members__.get(name)
        if model is None:
            raise ColmapFormatError("Invalid camera model")
        return model

    def num_params(self) -> int:
        """Number of intrinsic parameters the model carries."""
        return _NUM_PARAMS[self]

    @property
    def _single_focal(self) -> bool:
        return self in _SINGLE_FOCAL


_NUM_PARAMS = {
    CameraModel.SIMPLE_PINHOLE: 3,
    CameraModel.PINHOLE: 4,
    CameraModel.SIMPLE_RADIAL: 4,
    CameraModel.RADIAL: 5,
    CameraModel.OPENCV: 8,
    CameraModel.OPENCV_FISHEYE: 8,
    CameraModel.FULL_OPENCV: 12,
    CameraModel.FOV: 5,
    CameraModel.SIMPLE_RADIAL_FISHEYE: 4,
    CameraModel.RADIAL_FISHEYE: 5,
    CameraModel.THIN_PRISM_FISHEYE: 12,
}

_SINGLE_FOCAL = frozenset(
    {
        CameraModel.SIMPLE_PINHOLE,
        CameraModel.SIMPLE_RADIAL,
        CameraModel.RADIAL,
        CameraModel.SIMPLE_RADIAL_FISHEYE,
        CameraModel.RADIAL_FISHEYE,
    }
)


def _f32(value: float) -> float:
    """Round a float to single precision."""
    return struct.unpack("<f", struct.pack("<f", value))[0]


@dataclass
class Camera:
    """A camera with its intrinsic parameters."""

    id: int
    model: CameraModel
    width: int
    height: int
    params: list[float]

    def focal(self) -> tuple[float, float]:
        """Focal lengths (fx, fy) in pixels."""
        fy_index = 0 if self.model._single_focal else 1
        return self.params[0], self.params[fy_index]

    def principal_point(self) -> tuple[float, float]:
        """Principal point (cx, cy) in pixels, single precision."""
        cx_index = 1 if self.model._single_focal else 2
        return _f32(self.params[cx_index]), _f32(self.params[cx_index + 1])


@dataclass
class Image:
    """A registered image. ``quat`` is stored as (x, y, z, w)."""

    tvec: tuple[float, float, float]
    quat: tuple[float, float, float, float]
    camera_id: int
    name: str
    xys: list[tuple[float, float]] = field(default_factory=list)
    point3d_ids: list[int] = field(default_factory=list)


@dataclass
class Point3D:
    """A triangulated point with its track."""

    xyz: tuple[float, float, float]
    rgb: tuple[int, int, int]
    error: float
    image_ids: list[int] = field(default_factory=list)
    point2d_idxs: list[int] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Text parsing helpers


def _parse_int(text: str, bounds: tuple[int, int]) -> int:
    try:
        value = int(text)
    except ValueError:
        raise ColmapFormatError("Parse error") from None
    lo, hi = bounds
    if not lo <= value <= hi:
        raise ColmapFormatError("Parse error")
    return value


def _parse_float(text: str) -> float:
    try:
        return float(text)
    except ValueError:
        raise ColmapFormatError("Parse error") from None


def _text_lines(reader) -> Iterator[str]:
    for line in reader:
        if isinstance(line, bytes):
            try:
                line = line.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise ColmapFormatError(str(exc)) from None
        yield line


def _read_cameras_text(reader) -> dict[int, Camera]:
    cameras: dict[int, Camera] = {}
    for line in _text_lines(reader):
        if line.startswith("#"):
            continue
        parts = line.split()
        if len(parts) < 4:
            raise ColmapFormatError("Invalid camera data")
        cam_id = _parse_int(parts[0], _I32)
        model = CameraModel.from_name(parts[1])
        width = _parse_int(parts[2], _U64)
        height = _parse_int(parts[3], _U64)
        params = [_parse_float(p) for p in parts[4:]]
        if len(params) != model.num_params():
            raise ColmapFormatError("Invalid number of camera parameters")
        cameras[cam_id] = Camera(cam_id, model, width, height, params)
    return cameras


def _read_images_text(reader) -> dict[int, Image]:
    images: dict[int, Image] = {}
    lines = _text_lines(reader)
    for line in lines:
        if not line or line.startswith("#"):
            continue
        elems = line.split()
        if len(elems) < 10:
            raise ColmapFormatError("Invalid image data")
        image_id = _parse_int(elems[0], _I32)
        w, x, y, z = (_f32(_parse_float(e)) for e in elems[1:5])
        tvec = tuple(_f32(_parse_float(e)) for e in elems[5:8])
        camera_id = _parse_int(elems[8], _I32)
        name = elems[9]

        point_elems = next(lines, "").split()
        xys = []
        point3d_ids = []
        for start in range(0, len(point_elems), 3):
            chunk = point_elems[start : start + 3]
            if len(chunk) < 3:
                raise ColmapFormatError("Invalid image point data")
            xys.append((_f32(_parse_float(chunk[0])), _f32(_parse_float(chunk[1]))))
            point3d_ids.append(_parse_int(chunk[2], _I64))

        images[image_id] = Image(
            tvec=tvec,
            quat=(x, y, z, w),
            camera_id=camera_id,
            name=name,
            xys=xys,
            point3d_ids=point3d_ids,
        )
    return images


def _read_points3d_text(reader) -> dict[int, Point3D]:
    points: dict[int, Point3D] = {}
    for line in _text_lines(reader):
        if line.startswith("#"):
            continue
        parts = line.split()
        if len(parts) < 8:
            raise ColmapFormatError("Invalid point3D data")
        point_id = _parse_int(parts[0], _I64)
        xyz = tuple(_f32(_parse_float(p)) for p in parts[1:4])
        rgb = tuple(_parse_int(p, _U8) for p in parts[4:7])
        error = _parse_float(parts[7])

        track = parts[8:]
        if len(track) % 2:
            raise ColmapFormatError("Invalid point3D track data")
        image_ids = [_parse_int(t, _I32) for t in track[0::2]]
        point2d_idxs = [_parse_int(t, _I32) for t in track[1::2]]

        points[point_id] = Point3D(xyz, rgb, error, image_ids, point2d_idxs)
    return points


# ---------------------------------------------------------------------------
# Binary parsing helpers


class _BinaryReader:
    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream

    def _read(self, fmt: str):
        size = struct.calcsize(fmt)
        data = self._stream.read(size)
        if len(data) != size:
            raise ColmapFormatError("Unexpected end of data")
        return struct.unpack(fmt, data)

    def u8(self) -> int:
        return self._read("<B")[0]

    def i32(self) -> int:
        return self._read("<i")[0]

    def u64(self) -> int:
        return self._read("<Q")[0]

    def f64(self) -> float:
        return self._read("<d")[0]

    def i64_be(self) -> int:
        return self._read(">q")[0]

    def cstring(self) -> str:
        buf = bytearray()
        while True:
            byte = self._stream.read(1)
            if not byte:
                raise ColmapFormatError("Unterminated string")
            if byte == b"\0":
                break
            buf += byte
        try:
            return buf.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ColmapFormatError(str(exc)) from None


def _read_cameras_binary(stream: BinaryIO) -> dict[int, Camera]:
    reader = _BinaryReader(stream)
    cameras: dict[int, Camera] = {}
    for _ in range(reader.u64()):
        cam_id = reader.i32()
        model_id = reader.i32()
        width = reader.u64()
        height = reader.u64()
        model = CameraModel.from_id(model_id)
        params = [reader.f64() for _ in range(model.num_params())]
        cameras[cam_id] = Camera(cam_id, model, width, height, params)
    return cameras


def _read_images_binary(stream: BinaryIO) -> dict[int, Image]:
    reader = _BinaryReader(stream)
    images: dict[int, Image] = {}
    for _ in range(reader.u64()):
        image_id = reader.i32()
        w, x, y, z = (_f32(reader.f64()) for _ in range(4))
        tvec = tuple(_f32(reader.f64()) for _ in range(3))
        camera_id = reader.i32()
        name = reader.cstring()
        xys = []
        point3d_ids = []
        for _ in range(reader.u64()):
            xys.append((_f32(reader.f64()), _f32(reader.f64())))
            point3d_ids.append(reader.i64_be())
        images[image_id] = Image(
            tvec=tvec,
            quat=(x, y, z, w),
            camera_id=camera_id,
            name=name,
            xys=xys,
            point3d_ids=point3d_ids,
        )
    return images


def _read_points3d_binary(stream: BinaryIO) -> dict[int, Point3D]:
    reader = _BinaryReader(stream)
    points: dict[int, Point3D] = {}
    for _ in range(reader.u64()):
        point_id = reader.i64_be()
        xyz = tuple(_f32(reader.f64()) for _ in range(3))
        rgb = (reader.u8(), reader.u8(), reader.u8())
        error = reader.f64()
        image_ids = []
        point2d_idxs = []
        for _ in range(reader.u64()):
            image_ids.append(reader.i32())
            point2d_idxs.append(reader.i32())
        points[point_id] = Point3D(xyz, rgb, error, image_ids, point2d_idxs)
    return points


# ---------------------------------------------------------------------------
# Public API


def read_cameras(reader, binary: bool) -> dict[int, Camera]:
    """Read cameras keyed by camera id."""
    return _read_cameras_binary(reader) if binary else _read_cameras_text(reader)


def read_images(reader, binary: bool) -> dict[int, Image]:
    """Read registered images keyed by image id."""
    return _read_images_binary(reader) if binary else _read_images_text(reader)


def read_points3d(reader, binary: bool) -> dict[int, Point3D]:
    """Read 3D points keyed by point id."""
    return _read_points3d_binary(reader) if binary else _read_points3d_text(reader)