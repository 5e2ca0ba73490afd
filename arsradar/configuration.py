"""The configuration datagram sent to the radar to change its settings."""

from __future__ import annotations

import struct
from dataclasses import astuple, dataclass

from .status import UdpStatus, _describe
from .util import FLOAT32_EPSILON, float32, rough_eq

CONFIGURATION_SERVICE_ID = 0
CONFIGURATION_METHOD_ID = 390
CONFIGURATION_MESSAGE_ID = 390
CONFIGURATION_PDU_LENGTH = 56
CONFIGURATION_UDP_PAYLOAD = 64
CONFIGURATION_UDP_LENGTH = 72
ARS548_MINIMUM_DISTANCE_SLOT_1 = 190
CONFIGURATION_PRECISION = float32(0.001)

NEW_IP = "0.0.0.0"
# Address value meaning "leave the sensor address as it is" (0.0.0.0).
_UNSET_IP_ADDRESS = 0

_CONFIGURATION = struct.Struct(">HHIfffffBffffHBBBBBIIBBBB")
assert _CONFIGURATION.size == CONFIGURATION_UDP_PAYLOAD


def _close(lhs: float, rhs: float, epsilon: float = FLOAT32_EPSILON) -> bool:
    return rough_eq(float32(lhs), float32(rhs), epsilon)


@dataclass
class SensorConfiguration:
    """Requested radar settings plus flags saying which groups change."""

    service_id: int = 0
    method_id: int = 0
    payload_length: int = 0
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
    new_sensor_mounting: int = 0
    new_vehicle_parameters: int = 0
    new_radar_parameters: int = 0
    new_network_configuration: int = 0

    @classmethod
    def from_status(cls, status: UdpStatus) -> SensorConfiguration:
        """A configuration that repeats the settings reported in ``status``."""
        return cls(
            longitudinal=status.longitudinal,
            lateral=status.lateral,
            vertical=status.vertical,
            yaw=status.yaw,
            pitch=status.pitch,
            plug_orientation=status.plug_orientation,
            length=status.length,
            width=status.width,
            height=status.height,
            wheelbase=status.wheelbase,
            maximum_distance=status.maximum_distance,
            frequency_slot=status.frequency_slot,
            cycle_time=status.cycle_time,
            time_slot=status.time_slot,
            hcc=status.hcc,
            powersave_standstill=status.powersave_standstill,
            sensor_ip_address_0=status.sensor_ip_address_0,
            sensor_ip_address_1=status.sensor_ip_address_1,
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> SensorConfiguration:
        """Decode a configuration datagram."""
        if len(data) != CONFIGURATION_UDP_PAYLOAD:
            raise ValueError(
                f"configuration datagram must be {CONFIGURATION_UDP_PAYLOAD} bytes, "
                f"got {len(data)}"
            )
        return cls(*_CONFIGURATION.unpack(data))

    def to_bytes(self) -> bytes:
        """Encode the configuration as it is sent on the wire."""
        try:
            return _CONFIGURATION.pack(*astuple(self))
        except struct.error as exc:
            raise ValueError(f"cannot encode configuration: {exc}") from exc

    def set_ids_and_payload(self) -> None:
        """Fill in the service id, method id and payload length of the message."""
        self.service_id = CONFIGURATION_SERVICE_ID
        self.method_id = CONFIGURATION_METHOD_ID
        self.payload_length = CONFIGURATION_PDU_LENGTH

    def is_equal_to_status(self, status: UdpStatus) -> bool:
        """True when the radar reports the settings this configuration asks for."""
        precision = CONFIGURATION_PRECISION
        ip_matches = (
            self.sensor_ip_address_0 == status.sensor_ip_address_0
            or self.sensor_ip_address_0 == _UNSET_IP_ADDRESS
            or status.sensor_ip_address_0 == _UNSET_IP_ADDRESS
        )
        return all(
            (
                _close(self.longitudinal, status.longitudinal, precision),
                _close(self.lateral, status.lateral, precision),
                _close(self.vertical, status.vertical, precision),
                _close(self.yaw, status.yaw, precision),
                _close(self.pitch, status.pitch, precision),
                self.plug_orientation == status.plug_orientation,
                _close(self.length, status.length, precision),
                _close(self.width, status.width, precision),
                # Height has always been compared at single-precision epsilon.
                _close(self.height, status.height),
                _close(self.wheelbase, status.wheelbase, precision),
                self.frequency_slot == status.frequency_slot,
                self.maximum_distance == status.maximum_distance,
                self.cycle_time == status.cycle_time,
                self.time_slot == status.time_slot,
                self.hcc == status.hcc,
                self.powersave_standstill == status.powersave_standstill,
                ip_matches,
            )
        )

    def change_configuration(self, status: UdpStatus) -> bool:
        """Raise the change flags for settings that differ from ``status``.

        A maximum distance below the slot-1 minimum forces the mid
        frequency slot. Returns True if anything is to be changed.
        """
        precision = CONFIGURATION_PRECISION
        mounting = [
            (self.longitudinal, status.longitudinal),
            (self.lateral, status.lateral),
            (self.vertical, status.vertical),
            (self.yaw, status.yaw),
            (self.pitch, status.pitch),
        ]
        if (
            any(not _close(a, b, precision) for a, b in mounting)
            or self.plug_orientation != status.plug_orientation
        ):
            self.new_sensor_mounting = 1

        vehicle = [
            (self.length, status.length),
            (self.width, status.width),
            (self.height, status.height),
            (self.wheelbase, status.wheelbase),
        ]
        if any(not _close(a, b, precision) for a, b in vehicle):
            self.new_vehicle_parameters = 1

        if self.frequency_slot != status.frequency_slot:
            self.new_radar_parameters = 1
        if self.maximum_distance != status.maximum_distance:
            self.new_radar_parameters = 1
            if self.maximum_distance < ARS548_MINIMUM_DISTANCE_SLOT_1:
                self.frequency_slot = 1
        if (
            self.cycle_time != status.cycle_time
            or self.time_slot != status.time_slot
            or self.hcc != status.hcc
            or self.powersave_standstill != status.powersave_standstill
        ):
            self.new_radar_parameters = 1

        if (
            self.sensor_ip_address_0 != status.sensor_ip_address_0
            and self.sensor_ip_address_0 != _UNSET_IP_ADDRESS
        ):
            self.new_network_configuration = 1

        return 1 in (
            self.new_sensor_mounting,
            self.new_vehicle_parameters,
            self.new_radar_parameters,
            self.new_network_configuration,
        )

    def format(self) -> str:
        """Human-readable report of the requested settings."""
        return _describe("Config", self)