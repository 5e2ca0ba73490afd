"""The radar's detection list datagram: individual reflections per cycle."""

from __future__ import annotations

import math
import struct
from dataclasses import astuple, dataclass, field, fields
from typing import Any

from .messages import Header, PointCloud, PointField, PointFieldType, Stamp
from .util import float32

ARS548_MAX_DETECTIONS = 800
DETECTION_MESSAGE_METHOD_ID = 336
DETECTION_MESSAGE_PDU_LENGTH = 35328
DETECTION_MESSAGE_PAYLOAD = 35336
DETECTION_LIST_POINTCLOUD_HEIGHT = 1

_DETECTION = struct.Struct(">ffBffffffbHBBBHBH")
_HEAD = struct.Struct(">HHI8sQIIIIIBIBH12fB")
_TAIL = struct.Struct(">ffIffB")
_TAIL_OFFSET = _HEAD.size + ARS548_MAX_DETECTIONS * _DETECTION.size
_LIST_SIZE = _TAIL_OFFSET + _TAIL.size
_HEAD_FIELD_COUNT = len(_HEAD.unpack(bytes(_HEAD.size)))

DETECTION_CLOUD_FIELDS = [
    PointField("x", PointFieldType.FLOAT32),
    PointField("y", PointFieldType.FLOAT32),
    PointField("z", PointFieldType.FLOAT32),
    PointField("v", PointFieldType.FLOAT32),
    PointField("r", PointFieldType.FLOAT32),
    PointField("RCS", PointFieldType.INT8),
    PointField("azimuth", PointFieldType.FLOAT32),
    PointField("elevation", PointFieldType.FLOAT32),
]


@dataclass
class Detection:
    """A single radar reflection in polar coordinates."""

    azimuth_angle: float = 0.0
    azimuth_angle_std: float = 0.0
    invalid_flags: int = 0
    elevation_angle: float = 0.0
    elevation_angle_std: float = 0.0
    range: float = 0.0
    range_std: float = 0.0
    range_rate: float = 0.0
    range_rate_std: float = 0.0
    rcs: int = 0
    measurement_id: int = 0
    positive_predictive_value: int = 0
    classification: int = 0
    multi_target_probability: int = 0
    object_id: int = 0
    ambiguity_flag: int = 0
    sort_index: int = 0

    @classmethod
    def from_bytes(cls, data: bytes) -> Detection:
        """Decode one detection record."""
        if len(data) != _DETECTION.size:
            raise ValueError(
                f"detection record must be {_DETECTION.size} bytes, got {len(data)}"
            )
        return cls(*_DETECTION.unpack(data))

    def to_bytes(self) -> bytes:
        """Encode the detection record as it travels on the wire."""
        try:
            return _DETECTION.pack(*astuple(self))
        except (struct.error, OverflowError) as exc:
            raise ValueError(f"cannot encode detection: {exc}") from exc

    def to_msg(self) -> dict[str, Any]:
        """Return the detection as a message dictionary keyed by message field name."""
        return {
            "f_azimuthangle": self.azimuth_angle,
            "f_azimuthanglestd": self.azimuth_angle_std,
            "f_elevationangle": self.elevation_angle,
            "f_elevationanglestd": self.elevation_angle_std,
            "f_range": self.range,
            "f_rangerate": self.range_rate,
            "f_rangeratestd": self.range_rate_std,
            "f_rangestd": self.range_std,
            "s_rcs": self.rcs,
            "u_ambiguityflag": self.ambiguity_flag,
            "u_classification": self.classification,
            "u_invalidflags": self.invalid_flags,
            "u_measurementid": self.measurement_id,
            "u_multitargetprobabilitym": self.multi_target_probability,
            "u_objectid": self.object_id,
            "u_positivepredictivevalue": self.positive_predictive_value,
            "u_sortindex": self.sort_index,
        }


@dataclass
class DetectionList:
    """Decoded detection list datagram.

    ``detections`` holds the records in use; ``num_of_detections`` is the
    count as sent, which may exceed the list capacity and is clamped when
    messages are built. It defaults to the number of records given.
    """

    service_id: int = 0
    method_id: int = DETECTION_MESSAGE_METHOD_ID
    payload_length: int = DETECTION_MESSAGE_PDU_LENGTH
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
    origin_invalid_flags: int = 0
    origin_x_pos: float = 0.0
    origin_x_std: float = 0.0
    origin_y_pos: float = 0.0
    origin_y_std: float = 0.0
    origin_z_pos: float = 0.0
    origin_z_std: float = 0.0
    origin_roll: float = 0.0
    origin_roll_std: float = 0.0
    origin_pitch: float = 0.0
    origin_pitch_std: float = 0.0
    origin_yaw: float = 0.0
    origin_yaw_std: float = 0.0
    list_invalid_flags: int = 0
    detections: list[Detection] = field(default_factory=list)
    rad_vel_domain_min: float = 0.0
    rad_vel_domain_max: float = 0.0
    num_of_detections: int | None = None
    aln_azimuth_correction: float = 0.0
    aln_elevation_correction: float = 0.0
    aln_status: int = 0

    def __post_init__(self) -> None:
        if self.num_of_detections is None:
            self.num_of_detections = len(self.detections)

    @classmethod
    def from_bytes(cls, data: bytes) -> DetectionList:
        """Decode a detection list datagram; bytes past the list layout are ignored."""
        if len(data) < _LIST_SIZE:
            raise ValueError(
                f"detection list datagram needs at least {_LIST_SIZE} bytes, got {len(data)}"
            )
        head = _HEAD.unpack_from(data, 0)
        tail = _TAIL.unpack_from(data, _TAIL_OFFSET)
        count = min(tail[2], ARS548_MAX_DETECTIONS)
        records = data[_HEAD.size : _HEAD.size + count * _DETECTION.size]
        detections = [Detection(*values) for values in _DETECTION.iter_unpack(records)]
        return cls(*head, detections, *tail)

    def to_bytes(self) -> bytes:
        """Encode the list as a full-size datagram; unused slots are zero."""
        if len(self.detections) > ARS548_MAX_DETECTIONS:
            raise ValueError(
                f"at most {ARS548_MAX_DETECTIONS} detections fit, got {len(self.detections)}"
            )
        values = [getattr(self, f.name) for f in fields(self)]
        head = values[:_HEAD_FIELD_COUNT]
        tail = values[_HEAD_FIELD_COUNT + 1 :]
        try:
            encoded_head = _HEAD.pack(*head)
            encoded_tail = _TAIL.pack(*tail)
        except (struct.error, OverflowError) as exc:
            raise ValueError(f"cannot encode detection list: {exc}") from exc
        records = b"".join(d.to_bytes() for d in self.detections)
        unused = bytes((ARS548_MAX_DETECTIONS - len(self.detections)) * _DETECTION.size)
        body = encoded_head + records + unused + encoded_tail
        return body + bytes(DETECTION_MESSAGE_PAYLOAD - len(body))

    def is_valid(self) -> bool:
        """True when the method id and payload length are those of a detection list."""
        return (
            self.method_id == DETECTION_MESSAGE_METHOD_ID
            and self.payload_length == DETECTION_MESSAGE_PDU_LENGTH
        )

    def _in_use(self) -> list[Detection]:
        count = min(self.num_of_detections or 0, ARS548_MAX_DETECTIONS)
        return self.detections[:count]

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
        in_use = self._in_use()
        return {
            "header": self._header(frame_id, now, override_stamp),
            "aln_status": self.aln_status,
            "crc": self.crc,
            "dataid": self.data_id,
            "eventdataqualifier": self.event_data_qualifier,
            "extendedqualifier": self.extended_qualifier,
            "length": self.length,
            "origin_invalidflags": self.origin_invalid_flags,
            "origin_pitch": self.origin_pitch,
            "origin_pitchstd": self.origin_pitch_std,
            "origin_roll": self.origin_roll,
            "origin_rollstd": self.origin_roll_std,
            "origin_xpos": self.origin_x_pos,
            "origin_xstd": self.origin_x_std,
            "origin_yaw": self.origin_yaw,
            "origin_yawstd": self.origin_yaw_std,
            "origin_ypos": self.origin_y_pos,
            "origin_ystd": self.origin_y_std,
            "origin_zpos": self.origin_z_pos,
            "origin_zstd": self.origin_z_std,
            "sqc": self.sqc,
            "timestamp_nanoseconds": self.timestamp_nanoseconds,
            "timestamp_seconds": self.timestamp_seconds,
            "timestamp_syncstatus": self.timestamp_sync_status,
            "list_numofdetections": min(
                self.num_of_detections or 0, ARS548_MAX_DETECTIONS
            ),
            "list_detections": [d.to_msg() for d in in_use],
        }

    def to_point_cloud(
        self, frame_id: str, now: Stamp, override_stamp: bool = True
    ) -> PointCloud:
        """Cartesian point cloud of the detections, with speed, range and RCS."""
        points = []
        for d in self._in_use():
            cos_elevation = float32(math.cos(d.elevation_angle))
            ground = float32(d.range * cos_elevation)
            points.append(
                (
                    float32(ground * float32(math.cos(d.azimuth_angle))),
                    float32(ground * float32(math.sin(d.azimuth_angle))),
                    float32(d.range * float32(math.sin(d.elevation_angle))),
                    d.range_rate,
                    d.range,
                    d.rcs,
                    d.azimuth_angle,
                    d.elevation_angle,
                )
            )
        return PointCloud(
            fields=list(DETECTION_CLOUD_FIELDS),
            points=points,
            header=self._header(frame_id, now, override_stamp),
            height=DETECTION_LIST_POINTCLOUD_HEIGHT,
            is_dense=False,
            is_bigendian=False,
        )