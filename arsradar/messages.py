"""Message types published by the radar driver: headers, point clouds, poses."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import Any

MSG_BUFFER_SIZE = 102400
"""Size of the buffer used to receive one datagram from the radar."""


@dataclass(frozen=True)
class Stamp:
    """A point in time split into whole seconds and nanoseconds."""

    sec: int = 0
    nanosec: int = 0

    @classmethod
    def from_seconds(cls, seconds: float) -> Stamp:
        """Build a stamp from a time in seconds, such as ``time.time()``."""
        sec = math.floor(seconds)
        nanosec = round((seconds - sec) * 1_000_000_000)
        if nanosec >= 1_000_000_000:
            sec += 1
            nanosec -= 1_000_000_000
        return cls(int(sec), int(nanosec))


@dataclass
class Header:
    """Time stamp and coordinate frame of a message."""

    stamp: Stamp = field(default_factory=Stamp)
    frame_id: str = ""


class PointFieldType(IntEnum):
    """Data types a point cloud field may hold."""

    INT8 = 1
    UINT8 = 2
    INT16 = 3
    UINT16 = 4
    INT32 = 5
    UINT32 = 6
    FLOAT32 = 7
    FLOAT64 = 8

    @property
    def code(self) -> str:
        """The struct format character of this type."""
        return _TYPE_CODES[self]

    @property
    def size(self) -> int:
        """Size of one value of this type in bytes."""
        return struct.calcsize("<" + self.code)


_TYPE_CODES = {
    PointFieldType.INT8: "b",
    PointFieldType.UINT8: "B",
    PointFieldType.INT16: "h",
    PointFieldType.UINT16: "H",
    PointFieldType.INT32: "i",
    PointFieldType.UINT32: "I",
    PointFieldType.FLOAT32: "f",
    PointFieldType.FLOAT64: "d",
}


@dataclass(frozen=True)
class PointField:
    """One named field of every point in a cloud."""

    name: str
    datatype: PointFieldType
    count: int = 1
    offset: int = 0


@dataclass
class PointCloud:
    """A single-row point cloud.

    Fields are laid out contiguously in the order given, without padding;
    their offsets are assigned on construction. Each point is a tuple with
    one entry per field (a sequence for fields whose count exceeds one).
    """

    fields: list[PointField]
    points: list[tuple[Any, ...]] = field(default_factory=list)
    header: Header = field(default_factory=Header)
    height: int = 1
    is_dense: bool = False
    is_bigendian: bool = False

    def __post_init__(self) -> None:
        offset = 0
        laid_out = []
        for point_field in self.fields:
            laid_out.append(replace(point_field, offset=offset))
            offset += point_field.datatype.size * point_field.count
        self.fields = laid_out

    @property
    def width(self) -> int:
        return len(self.points)

    @property
    def row_step(self) -> int:
        return self.point_step() * self.width

    def point_step(self) -> int:
        """Size of one packed point in bytes."""
        return sum(f.datatype.size * f.count for f in self.fields)

    def column(self, name: str) -> list[Any]:
        """Return the values of field ``name`` for every point."""
        for index, point_field in enumerate(self.fields):
            if point_field.name == name:
                return [point[index] for point in self.points]
        raise KeyError(name)

    def to_bytes(self) -> bytes:
        """Pack all points into the cloud's binary data block."""
        order = ">" if self.is_bigendian else "<"
        layout = struct.Struct(
            order + "".join(f.datatype.code * f.count for f in self.fields)
        )
        chunks = []
        for point in self.points:
            if len(point) != len(self.fields):
                raise ValueError(
                    f"point has {len(point)} values, cloud has {len(self.fields)} fields"
                )
            values: list[Any] = []
            for point_field, value in zip(self.fields, point):
                if point_field.count == 1:
                    values.append(value)
                else:
                    values.extend(value)
            try:
                chunks.append(layout.pack(*values))
            except struct.error as exc:
                raise ValueError(f"cannot pack point {point!r}: {exc}") from exc
        return b"".join(chunks)


@dataclass
class Pose:
    """A position and an orientation quaternion (x, y, z, w)."""

    position: tuple[float, float, float] = (0.0, 0.0, 0.0)
    orientation: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 1.0)


@dataclass
class PoseArray:
    """A list of poses sharing one header."""

    header: Header = field(default_factory=Header)
    poses: list[Pose] = field(default_factory=list)


def quaternion_from_rpy(
    roll: float, pitch: float, yaw: float
) -> tuple[float, float, float, float]:
    """Return the quaternion (x, y, z, w) for fixed-axis roll, pitch and yaw."""
    cy, sy = math.cos(yaw * 0.5), math.sin(yaw * 0.5)
    cp, sp = math.cos(pitch * 0.5), math.sin(pitch * 0.5)
    cr, sr = math.cos(roll * 0.5), math.sin(roll * 0.5)
    return (
        sr * cp * cy - cr * sp * sy,
        cr * sp * cy + sr * cp * sy,
        cr * cp * sy - sr * sp * cy,
        cr * cp * cy + sr * sp * sy,
    )