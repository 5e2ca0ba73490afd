"""The radar's periodic status datagram."""

from __future__ import annotations

import struct
from dataclasses import astuple, dataclass
from typing import Any, Protocol

from .util import float32

STATUS_MESSAGE_METHOD_ID = 380
STATUS_MESSAGE_PAYLOAD = 84
STATUS_MESSAGE_PDU_LENGTH = 76

_STATUS = struct.Struct(">HHIIIBBBBfffffBffffHBBBBBIIBBBBBBBBBBBB")
assert _STATUS.size == STATUS_MESSAGE_PAYLOAD


@dataclass
class UdpStatus:
    """Decoded status datagram: mounting, vehicle, radar and network settings."""

    service_id: int = 0
    method_id: int = STATUS_MESSAGE_METHOD_ID
    payload_length: int = STATUS_MESSAGE_PDU_LENGTH
    timestamp_nanoseconds: int = 0
    timestamp_seconds: int = 0
    timestamp_sync_status: int = 0
    sw_version_major: int = 0
    sw_version_minor: int = 0
    sw_version_patch: int = 0
    longitudinal: float = 0.0
    lateral: float = 0.0
    vertical: float = 0.0
    yaw: float = 0.0
    pitch: float = 0.0
    plug_orientation: int = 0
    length: float = 0.0
    width: float = 0.0
    height: float = 0.0
    wheelbase: float = 0.0
    maximum_distance: int = 0
    frequency_slot: int = 0
    cycle_time: int = 0
    time_slot: int = 0
    hcc: int = 0
    powersave_standstill: int = 0
    sensor_ip_address_0: int = 0
    sensor_ip_address_1: int = 0
    configuration_counter: int = 0
    status_longitudinal_velocity: int = 0
    status_longitudinal_acceleration: int = 0
    status_lateral_acceleration: int = 0
    status_yaw_rate: int = 0
    status_steering_angle: int = 0
    status_driving_direction: int = 0
    status_characteristic_speed: int = 0
    status_radar_status: int = 0
    status_voltage_status: int = 0
    status_temperature_status: int = 0
    status_blockage_status: int = 0

    @classmethod
    def from_bytes(cls, data: bytes) -> UdpStatus:
        """Decode a status datagram of exactly the status payload size."""
        if len(data) != STATUS_MESSAGE_PAYLOAD:
            raise ValueError(
                f"status datagram must be {STATUS_MESSAGE_PAYLOAD} bytes, got {len(data)}"
            )
        return cls(*_STATUS.unpack(data))

    def to_bytes(self) -> bytes:
        """Encode the status as it travels on the wire."""
        try:
            return _STATUS.pack(*astuple(self))
        except struct.error as exc:
            raise ValueError(f"cannot encode status: {exc}") from exc

    def is_valid(self) -> bool:
        """True when the method id and payload length are those of a status message."""
        return (
            self.method_id == STATUS_MESSAGE_METHOD_ID
            and self.payload_length == STATUS_MESSAGE_PDU_LENGTH
        )

    def to_msg(self) -> dict[str, Any]:
        """Return the status as a message dictionary keyed by message field name."""
        return {
            "cycletime": self.cycle_time,
            "configurationcounter": self.configuration_counter,
            "frequencyslot": self.frequency_slot,
            "hcc": self.hcc,
            "height": self.height,
            "lateral": self.lateral,
            "length": self.length,
            "longitudinal": self.longitudinal,
            "maximumdistance": self.maximum_distance,
            "pitch": self.pitch,
            "plugorientation": self.plug_orientation,
            "powersave_standstill": self.powersave_standstill,
            "sensoripaddress_0": self.sensor_ip_address_0,
            "sensoripaddress_1": self.sensor_ip_address_1,
            "status_blockagestatus": self.status_blockage_status,
            "status_characteristicspeed": self.status_characteristic_speed,
            "status_drivingdirection": self.status_driving_direction,
            "status_lateralacceleration": self.status_lateral_acceleration,
            "status_longitudinalacceleration": self.status_longitudinal_acceleration,
            "status_longitudinalvelocity": self.status_longitudinal_velocity,
            "status_radarstatus": self.status_radar_status,
            "status_steeringangle": self.status_steering_angle,
            "status_temperaturestatus": self.status_temperature_status,
            "status_voltagestatus": self.status_voltage_status,
            "status_yawrate": self.status_yaw_rate,
            "swversion_major": self.sw_version_major,
            "swversion_minor": self.sw_version_minor,
            "swversion_patch": self.sw_version_patch,
            "timeslot": self.time_slot,
            "timestamp_nanoseconds": self.timestamp_nanoseconds,
            "timestamp_seconds": self.timestamp_seconds,
            "timestamp_syncstatus": self.timestamp_sync_status,
            "vertical": self.vertical,
            "wheelbase": self.wheelbase,
            "width": self.width,
            "yaw": self.yaw,
        }

    def format(self) -> str:
        """Human-readable report of the status settings."""
        return _describe("Status", self)


def receive_status(data: bytes) -> UdpStatus | None:
    """Decode ``data`` if it is a valid status datagram, otherwise return None."""
    if len(data) != STATUS_MESSAGE_PAYLOAD:
        return None
    status = UdpStatus.from_bytes(data)
    return status if status.is_valid() else None


def _describe(title: str, settings: Any) -> str:
    """Report of the settings shared by status and configuration messages."""
    frequency = {0: "LOW", 1: "MID"}.get(settings.frequency_slot, "HIGH")
    lines = [
        f"{title}: ",
        f"Longitudinal Pos: {float32(settings.longitudinal):g}",
        f"Lateral Pos: {float32(settings.lateral):g}",
        f"Vertical Pos: {float32(settings.vertical):g}",
        f"Yaw: {float32(settings.yaw):g}",
        f"Pitch: {float32(settings.pitch):g}",
        "Plug Orientation: " + ("LEFT" if settings.plug_orientation == 1 else "RIGHT"),
        f"Vehicle Length: {float32(settings.length):g}",
        f"Vehicle Width: {float32(settings.width):g}",
        f"Vehicle Height: {float32(settings.height):g}",
        f"Vehicle WheelBase: {float32(settings.wheelbase):g}",
        f"Max Detection Dist: {settings.maximum_distance}",
        f"Center Frequency: {frequency}",
        f"Cycle Time: {settings.cycle_time}",
        f"Cycle Offset: {settings.time_slot}",
        "Country Code: " + ("WORLDWIDE" if settings.hcc == 1 else "JAPAN"),
        "Powersave Standstill: " + ("ON" if settings.powersave_standstill == 1 else "OFF"),
        f"Sensor IP Address 0: {settings.sensor_ip_address_0}",
        f"Sensor IP Address 1: {settings.sensor_ip_address_1}",
    ]
    return "\n".join(lines) + "\n\n"