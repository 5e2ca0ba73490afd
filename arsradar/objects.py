"""The radar's object list datagram: tracked objects per cycle."""

from __future__ import annotations

import math
import struct
from dataclasses import astuple, dataclass, field, fields
from typing import Any

from .messages import (
    Header,
    PointCloud,
    PointField,
    PointFieldType,
    Pose,
    PoseArray,
    Stamp,
    quaternion_from_rpy,
)
from .util import float32

ARS548_OBJECT_POINTCLOUD_HEIGHT = 1
ARS548_MAX_OBJECTS = 50
OBJECT_MESSAGE_METHOD_ID = 329
OBJECT_MESSAGE_PDU_LENGTH = 9393
OBJECT_MESSAGE_PAYLOAD = 9401

_OBJECT = struct.Struct(">HIHBBHB9fB2f10BB5fB5fB5fB5fB2fIB2fIB2f")
_HEAD = struct.Struct(">HHI8sQIIIIIBIBB")
_LIST_SIZE = _HEAD.size + ARS548_MAX_OBJECTS * _OBJECT.size
assert _LIST_SIZE == OBJECT_MESSAGE_PAYLOAD
_HEAD_FIELD_COUNT = len(_HEAD.unpack(bytes(_HEAD.size)))

OBJECT_CLOUD_FIELDS = [
    PointField("x", PointFieldType.FLOAT32),
    PointField("y", PointFieldType.FLOAT32),
    PointField("z", PointFieldType.FLOAT32),
    PointField("vx", PointFieldType.FLOAT32),
    PointField("vy", PointFieldType.FLOAT32),
]


@dataclass
class RadarObject:
    """A tracked object: position, existence, class, dynamics and shape."""

    status_sensor: int = 0
    object_id: int = 0
    age: int = 0
    status_measurement: int = 0
    status_movement: int = 0
    position_invalid_flags: int = 0
    position_reference: int = 0
    position_x: float = 0.0
    position_x_std: float = 0.0
    position_y: float = 0.0
    position_y_std: float = 0.0
    position_z: float = 0.0
    position_z_std: float = 0.0
    position_covariance_xy: float = 0.0
    position_orientation: float = 0.0
    position_orientation_std: float = 0.0
    existence_invalid_flags: int = 0
    existence_probability: float = 0.0
    existence_ppv: float = 0.0
    classification_car: int = 0
    classification_truck: int = 0
    classification_motorcycle: int = 0
    classification_bicycle: int = 0
    classification_pedestrian: int = 0
    classification_animal: int = 0
    classification_hazard: int = 0
    classification_unknown: int = 0
    classification_overdrivable: int = 0
    classification_underdrivable: int = 0
    abs_vel_invalid_flags: int = 0
    abs_vel_x: float = 0.0
    abs_vel_x_std: float = 0.0
    abs_vel_y: float = 0.0
    abs_vel_y_std: float = 0.0
    abs_vel_covariance_xy: float = 0.0
    rel_vel_invalid_flags: int = 0
    rel_vel_x: float = 0.0
    rel_vel_x_std: float = 0.0
    rel_vel_y: float = 0.0
    rel_vel_y_std: float = 0.0
    rel_vel_covariance_xy: float = 0.0
    abs_accel_invalid_flags: int = 0
    abs_accel_x: float = 0.0
    abs_accel_x_std: float = 0.0
    abs_accel_y: float = 0.0
    abs_accel_y_std: float = 0.0
    abs_accel_covariance_xy: float = 0.0
    rel_accel_invalid_flags: int = 0
    rel_accel_x: float = 0.0
    rel_accel_x_std: float = 0.0
    rel_accel_y: float = 0.0
    rel_accel_y_std: float = 0.0
    rel_accel_covariance_xy: float = 0.0
    orientation_invalid_flags: int = 0
    orientation_rate_mean: float = 0.0
    orientation_rate_std: float = 0.0
    shape_length_status: int = 0
    shape_length_edge_invalid_flags: int = 0
    shape_length_edge_mean: float = 0.0
    shape_length_edge_std: float = 0.0
    shape_width_status: int = 0
    shape_width_edge_invalid_flags: int = 0
    shape_width_edge_mean: float = 0.0
    shape_width_edge_std: float = 0.0

    @classmethod
    def from_bytes(cls, data: bytes) -> RadarObject:
        """Decode one object record."""
        if len(data) != _OBJECT.size:
            raise ValueError(
                f"object record must be {_OBJECT.size} bytes, got {len(data)}"
            )
        return cls(*_OBJECT.unpack(data))

    def to_bytes(self) -> bytes:
        """Encode the object record as it travels on the wire."""
        try:
            return _OBJECT.pack(*astuple(self))
        except (struct.error, OverflowError) as exc:
            raise ValueError(f"cannot encode object: {exc}") from exc

    def to_msg(self) -> dict[str, Any]:
        """Return the object as a message dictionary keyed by message field name."""
        return {
            "u_statussensor": self.status_sensor,
            "u_id": self.object_id,
            "u_age": self.age,
            "u_position_invalidflags": self.position_invalid_flags,
            "u_position_x": self.position_x,
            "u_position_x_std": self.position_x_std,
            "u_position_y": self.position_y,
            "u_position_y_std": self.position_y_std,
            "u_position_z": self.position_z,
            "u_position_z_std": self.position_z_std,
            "u_position_covariancexy": self.position_covariance_xy,
            "u_position_orientation": self.position_orientation,
            "u_position_orientation_std": self.position_orientation_std,
            "u_existence_invalidflags": self.existence_invalid_flags,
            "u_existence_ppv": self.existence_ppv,
            "u_existence_probability": self.existence_probability,
            "u_dynamics_absaccel_invalidflags": self.abs_accel_invalid_flags,
            "u_dynamics_absvel_invalidflags": self.abs_vel_invalid_flags,
            "u_dynamics_orientation_invalidflags": self.orientation_invalid_flags,
            "u_dynamics_orientation_rate_mean": self.orientation_rate_mean,
            "u_dynamics_orientation_rate_std": self.orientation_rate_std,
            "u_dynamics_relaccel_invalidflags": self.rel_accel_invalid_flags,
            "u_dynamics_relvel_invalidflags": self.rel_vel_invalid_flags,
            "u_shape_length_edge_invalidflags": self.shape_length_edge_invalid_flags,
            "u_shape_length_edge_mean": self.shape_length_edge_mean,
            "u_shape_length_edge_std": self.shape_length_edge_std,
            "u_shape_length_status": self.shape_length_status,
            "u_shape_width_edge_invalidflags": self.shape_width_edge_invalid_flags,
            "u_shape_width_edge_mean": self.shape_width_edge_mean,
            "u_shape_width_edge_std": self.shape_width_edge_std,
            "u_shape_width_status": self.shape_width_status,
            "u_statusmeasurement": self.status_measurement,
            "u_statusmovement": self.status_movement,
            "u_classification_animal": self.classification_animal,
            "u_classification_bicycle": self.classification_bicycle,
            "u_classification_car": self.classification_car,
            "u_classification_hazard": self.classification_hazard,
            "u_classification_motorcycle": self.classification_motorcycle,
            "u_classification_overdrivable": self.classification_overdrivable,
            "u_classification_pedestrian": self.classification_pedestrian,
            "u_classification_truck": self.classification_truck,
            "u_classification_underdrivable": self.classification_underdrivable,
            "u_classification_unknown": self.classification_unknown,
            "f_dynamics_absaccel_covariancexy": self.abs_accel_covariance_xy,
            "f_dynamics_absaccel_x": self.abs_accel_x,
            "f_dynamics_absaccel_x_std": self.abs_accel_x_std,
            "f_dynamics_absaccel_y": self.abs_accel_y,
            "f_dynamics_absaccel_y_std": self.abs_accel_y_std,
            "f_dynamics_absvel_covariancexy": self.abs_vel_covariance_xy,
            "f_dynamics_absvel_x": self.abs_vel_x,
            "f_dynamics_absvel_x_std": self.abs_vel_x_std,
            "f_dynamics_absvel_y": self.abs_vel_y,
            "f_dynamics_absvel_y_std": self.abs_vel_y_std,
            "f_dynamics_relaccel_covariancexy": self.rel_accel_covariance_xy,
            "f_dynamics_relaccel_x": self.rel_accel_x,
            "f_dynamics_relaccel_x_std": self.rel_accel_x_std,
            "f_dynamics_relaccel_y": self.rel_accel_y,
            "f_dynamics_relaccel_y_std": self.rel_accel_y_std,
            "f_dynamics_relvel_covariancexy": self.rel_vel_covariance_xy,
            "f_dynamics_relvel_x": self.rel_vel_x,
            "f_dynamics_relvel_x_std": self.rel_vel_x_std,
            "f_dynamics_relvel_y": self.rel_vel_y,
            "f_dynamics_relvel_y_std": self.rel_vel_y_std,
        }


@dataclass
class ObjectList:
    """Decoded object list datagram.

    ``objects`` holds the records in use; ``num_of_objects`` is the count as
    sent, clamped to the list capacity when messages are built. It defaults
    to the number of records given.
    """

    service_id: int = 0
    method_id: int = OBJECT_MESSAGE_METHOD_ID
    payload_length: int = OBJECT_MESSAGE_PDU_LENGTH
    reserved: bytes = bytes(8)
    crc: int = 0
    length: int = 0
    sqc: int = 0
    data_id: int = 0
    timestamp_nanoseconds: int = 0
    timestamp_seconds: int = 0
    timestamp_sync_status: int = 0
    event_data_qualifier: int = 0
    extended_qualifier: int = 0
    num_of_objects: int | None = None
    objects: list[RadarObject] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.num_of_objects is None:
            self.num_of_objects = len(self.objects)

    @classmethod
    def from_bytes(cls, data: bytes) -> ObjectList:
        """Decode an object list datagram; the object count is clamped to capacity."""
        if len(data) < _LIST_SIZE:
            raise ValueError(
                f"object list datagram needs at least {_LIST_SIZE} bytes, got {len(data)}"
            )
        *head, count = _HEAD.unpack_from(data, 0)
        count = min(count, ARS548_MAX_OBJECTS)
        records = data[_HEAD.size : _HEAD.size + count * _OBJECT.size]
        objects = [RadarObject(*values) for values in _OBJECT.iter_unpack(records)]
        return cls(*head, count, objects)

    def to_bytes(self) -> bytes:
        """Encode the list as a full-size datagram; unused slots are zero."""
        if len(self.objects) > ARS548_MAX_OBJECTS:
            raise ValueError(
                f"at most {ARS548_MAX_OBJECTS} objects fit, got {len(self.objects)}"
            )
        head = [getattr(self, f.name) for f in fields(self)][:_HEAD_FIELD_COUNT]
        try:
            encoded_head = _HEAD.pack(*head)
        except (struct.error, OverflowError) as exc:
            raise ValueError(f"cannot encode object list: {exc}") from exc
        records = b"".join(o.to_bytes() for o in self.objects)
        unused = bytes((ARS548_MAX_OBJECTS - len(self.objects)) * _OBJECT.size)
        return encoded_head + records + unused

    def is_valid(self) -> bool:
        """True when the method id and payload length are those of an object list."""
        return (
            self.method_id == OBJECT_MESSAGE_METHOD_ID
            and self.payload_length == OBJECT_MESSAGE_PDU_LENGTH
        )

    def _count(self) -> int:
        return min(self.num_of_objects or 0, ARS548_MAX_OBJECTS)

    def _in_use(self) -> list[RadarObject]:
        return self.objects[: self._count()]

    def _header(self, frame_id: str, now: Stamp, override_stamp: bool) -> Header:
        stamp = (
            now
            if override_stamp
            else Stamp(self.timestamp_seconds, self.timestamp_nanoseconds)
        )
        return Header(stamp=stamp, frame_id=frame_id)

    def to_msg(
        self, frame_id: str, now: Stamp, override_stamp: bool = True
    ) -> dict[str, Any]:
        """Return the list as a message dictionary keyed by message field name."""
        return {
            "header": self._header(frame_id, now, override_stamp),
            "crc": self.crc,
            "length": self.length,
            "sqc": self.sqc,
            "timestamp_nanoseconds": self.timestamp_nanoseconds,
            "timestamp_seconds": self.timestamp_seconds,
            "timestamp_syncstatus": self.timestamp_sync_status,
            "eventdataqualifier": self.event_data_qualifier,
            "extendedqualifier": self.extended_qualifier,
            "dataid": self.data_id,
            "objectlist_numofobjects": self._count(),
            "objectlist_objects": [o.to_msg() for o in self._in_use()],
        }

    def to_point_cloud(
        self, frame_id: str, now: Stamp, override_stamp: bool = True
    ) -> PointCloud:
        """Point cloud of object positions with their absolute velocities."""
        points = [
            (o.position_x, o.position_y, o.position_z, o.abs_vel_x, o.abs_vel_y)
            for o in self._in_use()
        ]
        return PointCloud(
            fields=list(OBJECT_CLOUD_FIELDS),
            points=points,
            header=self._header(frame_id, now, override_stamp),
            height=ARS548_OBJECT_POINTCLOUD_HEIGHT,
            is_dense=False,
            is_bigendian=False,
        )

    def direction_poses(
        self, frame_id: str, now: Stamp, override_stamp: bool = True
    ) -> PoseArray:
        """One pose per object, heading along its relative velocity."""
        poses = []
        for o in self._in_use():
            yaw = float32(math.atan2(o.rel_vel_y, o.rel_vel_x))
            poses.append(
                Pose(
                    position=(
                        float(o.position_x),
                        float(o.position_y),
                        float(o.position_z),
                    ),
                    orientation=quaternion_from_rpy(0.0, 0.0, yaw),
                )
            )
        return PoseArray(header=self._header(frame_id, now, override_stamp), poses=poses)