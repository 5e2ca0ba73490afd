"""Vehicle-signal datagrams used by the radar's auto-alignment.

Multi-byte fields travel big-endian. The reserved bytes that pad each
message to its specified size are kept as raw bytes.
"""

from __future__ import annotations

import struct
from dataclasses import astuple, dataclass
from typing import ClassVar

_RESERVED_LONG = 20
_RESERVED_SHORT = 8


def _unpack(cls, layout: struct.Struct, data: bytes) -> tuple:
    if len(data) != layout.size:
        raise ValueError(
            f"{cls.__name__} datagram must be {layout.size} bytes, got {len(data)}"
        )
    return layout.unpack(data)


def _pack(message, layout: struct.Struct) -> bytes:
    try:
        return layout.pack(*astuple(message))
    except (struct.error, OverflowError) as exc:
        raise ValueError(f"cannot encode {type(message).__name__}: {exc}") from exc


@dataclass
class AccelerationLateralCoG:
    """Lateral acceleration at the vehicle's centre of gravity."""

    _LAYOUT: ClassVar[struct.Struct] = struct.Struct(f">HHIfBBfBB{_RESERVED_LONG}s")

    service_id: int = 0
    method_id: int = 0
    payload_length: int = 0
    acceleration_lateral_err_amp: float = 0.0
    acceleration_lateral_err_amp_invalid_flag: int = 0
    qualifier_acceleration_lateral: int = 0
    acceleration_lateral: float = 0.0
    acceleration_lateral_invalid_flag: int = 0
    acceleration_lateral_event_data_qualifier: int = 0
    reserved: bytes = bytes(_RESERVED_LONG)

    @classmethod
    def from_bytes(cls, data: bytes) -> "AccelerationLateralCoG":
        """Decode a datagram of exactly this message's size."""
        return cls(*_unpack(cls, cls._LAYOUT, data))

    def to_bytes(self) -> bytes:
        """Encode the message as it travels on the wire."""
        return _pack(self, self._LAYOUT)


@dataclass
class AccelerationLongitudinalCoG:
    """Longitudinal acceleration at the vehicle's centre of gravity."""

    _LAYOUT: ClassVar[struct.Struct] = struct.Struct(f">HHIfBBfBB{_RESERVED_LONG}s")

    service_id: int = 0
    method_id: int = 0
    payload_length: int = 0
    acceleration_longitudinal_err_amp: float = 0.0
    acceleration_longitudinal_err_amp_invalid_flag: int = 0
    qualifier_acceleration_longitudinal: int = 0
    acceleration_longitudinal: float = 0.0
    acceleration_longitudinal_invalid_flag: int = 0
    acceleration_longitudinal_event_data_qualifier: int = 0
    reserved: bytes = bytes(_RESERVED_LONG)

    @classmethod
    def from_bytes(cls, data: bytes) -> "AccelerationLongitudinalCoG":
        """Decode a datagram of exactly this message's size."""
        return cls(*_unpack(cls, cls._LAYOUT, data))

    def to_bytes(self) -> bytes:
        """Encode the message as it travels on the wire."""
        return _pack(self, self._LAYOUT)


@dataclass
class CharacteristicSpeed:
    """Characteristic speed of the vehicle."""

    _LAYOUT: ClassVar[struct.Struct] = struct.Struct(f">HHIBBB{_RESERVED_SHORT}s")

    service_id: int = 0
    method_id: int = 0
    payload_length: int = 0
    characteristic_speed_err_amp: int = 0
    qualifier_characteristic_speed: int = 0
    characteristic_speed: int = 0
    reserved: bytes = bytes(_RESERVED_SHORT)

    @classmethod
    def from_bytes(cls, data: bytes) -> "CharacteristicSpeed":
        """Decode a datagram of exactly this message's size."""
        return cls(*_unpack(cls, cls._LAYOUT, data))

    def to_bytes(self) -> bytes:
        """Encode the message as it travels on the wire."""
        return _pack(self, self._LAYOUT)


@dataclass
class DrivingDirection:
    """Confirmed and unconfirmed driving direction."""

    _LAYOUT: ClassVar[struct.Struct] = struct.Struct(f">HHIBB{_RESERVED_LONG}s")

    service_id: int = 0
    method_id: int = 0
    payload_length: int = 0
    driving_direction_unconfirmed: int = 0
    driving_direction_confirmed: int = 0
    reserved: bytes = bytes(_RESERVED_LONG)

    @classmethod
    def from_bytes(cls, data: bytes) -> "DrivingDirection":
        """Decode a datagram of exactly this message's size."""
        return cls(*_unpack(cls, cls._LAYOUT, data))

    def to_bytes(self) -> bytes:
        """Encode the message as it travels on the wire."""
        return _pack(self, self._LAYOUT)


@dataclass
class SteeringAngleFrontAxle:
    """Steering angle of the front axle."""

    _LAYOUT: ClassVar[struct.Struct] = struct.Struct(f">HHIBfBfBB{_RESERVED_LONG}s")

    service_id: int = 0
    method_id: int = 0
    payload_length: int = 0
    qualifier_steering_angle_front_axle: int = 0
    steering_angle_front_axle_err_amp: float = 0.0
    steering_angle_front_axle_err_amp_invalid_flag: int = 0
    steering_angle_front_axle: float = 0.0
    steering_angle_front_axle_invalid_flag: int = 0
    steering_angle_front_axle_event_data_qualifier: int = 0
    reserved: bytes = bytes(_RESERVED_LONG)

    @classmethod
    def from_bytes(cls, data: bytes) -> "SteeringAngleFrontAxle":
        """Decode a datagram of exactly this message's size."""
        return cls(*_unpack(cls, cls._LAYOUT, data))

    def to_bytes(self) -> bytes:
        """Encode the message as it travels on the wire."""
        return _pack(self, self._LAYOUT)


@dataclass
class VelocityVehicle:
    """Vehicle velocity."""

    _LAYOUT: ClassVar[struct.Struct] = struct.Struct(f">HHIBBBfB{_RESERVED_LONG}s")

    service_id: int = 0
    method_id: int = 0
    payload_length: int = 0
    status_velocity_near_standstill: int = 0
    qualifier_velocity_vehicle: int = 0
    velocity_vehicle_event_data_qualifier: int = 0
    velocity_vehicle: float = 0.0
    velocity_vehicle_invalid_flag: int = 0
    reserved: bytes = bytes(_RESERVED_LONG)

    @classmethod
    def from_bytes(cls, data: bytes) -> "VelocityVehicle":
        """Decode a datagram of exactly this message's size."""
        return cls(*_unpack(cls, cls._LAYOUT, data))

    def to_bytes(self) -> bytes:
        """Encode the message as it travels on the wire."""
        return _pack(self, self._LAYOUT)


@dataclass
class YawRate:
    """Yaw rate of the vehicle."""

    _LAYOUT: ClassVar[struct.Struct] = struct.Struct(f">HHIfBBfBB{_RESERVED_LONG}s")

    service_id: int = 0
    method_id: int = 0
    payload_length: int = 0
    yaw_rate_err_amp: float = 0.0
    yaw_rate_err_amp_invalid_flag: int = 0
    qualifier_yaw_rate: int = 0
    yaw_rate: float = 0.0
    yaw_rate_invalid_flag: int = 0
    yaw_rate_event_data_qualifier: int = 0
    reserved: bytes = bytes(_RESERVED_LONG)

    @classmethod
    def from_bytes(cls, data: bytes) -> "YawRate":
        """Decode a datagram of exactly this message's size."""
        return cls(*_unpack(cls, cls._LAYOUT, data))

    def to_bytes(self) -> bytes:
        """Encode the message as it travels on the wire."""
        return _pack(self, self._LAYOUT)