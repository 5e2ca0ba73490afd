import struct

import pytest

from arsradar.signals import (
    AccelerationLateralCoG,
    AccelerationLongitudinalCoG,
    CharacteristicSpeed,
    DrivingDirection,
    SteeringAngleFrontAxle,
    VelocityVehicle,
    YawRate,
)
from arsradar.util import float32


def _header(service_id, method_id, payload_length):
    return struct.pack(">HHI", service_id, method_id, payload_length)


def test_acceleration_lateral_round_trip():
    message = AccelerationLateralCoG(1, 2, 32, 0.5, 1, 2, -1.25, 0, 3)
    data = message.to_bytes()
    assert len(data) == 40
    assert data[:8] == _header(1, 2, 32)
    assert AccelerationLateralCoG.from_bytes(data) == message
    with pytest.raises(ValueError):
        AccelerationLateralCoG.from_bytes(data[:-1])
    with pytest.raises(ValueError):
        AccelerationLateralCoG.from_bytes(data + b"\x00")


def test_acceleration_longitudinal_round_trip():
    message = AccelerationLongitudinalCoG(1, 3, 32, 0.25, 0, 1, 2.5, 1, 4)
    data = message.to_bytes()
    assert len(data) == 40
    assert data[:8] == _header(1, 3, 32)
    assert AccelerationLongitudinalCoG.from_bytes(data) == message
    with pytest.raises(ValueError):
        AccelerationLongitudinalCoG.from_bytes(data[:-1])
    with pytest.raises(ValueError):
        AccelerationLongitudinalCoG.from_bytes(data + b"\x00")


def test_characteristic_speed_round_trip():
    message = CharacteristicSpeed(1, 4, 11, 7, 8, 9)
    data = message.to_bytes()
    assert len(data) == 19
    assert data[:8] == _header(1, 4, 11)
    assert CharacteristicSpeed.from_bytes(data) == message
    with pytest.raises(ValueError):
        CharacteristicSpeed.from_bytes(data[:-1])
    with pytest.raises(ValueError):
        CharacteristicSpeed.from_bytes(data + b"\x00")


def test_driving_direction_round_trip():
    message = DrivingDirection(1, 5, 22, 1, 2)
    data = message.to_bytes()
    assert len(data) == 30
    assert data[:8] == _header(1, 5, 22)
    assert DrivingDirection.from_bytes(data) == message
    with pytest.raises(ValueError):
        DrivingDirection.from_bytes(data[:-1])
    with pytest.raises(ValueError):
        DrivingDirection.from_bytes(data + b"\x00")


def test_steering_angle_round_trip():
    message = SteeringAngleFrontAxle(1, 6, 32, 3, 0.125, 1, -0.75, 0, 2)
    data = message.to_bytes()
    assert len(data) == 40
    assert data[:8] == _header(1, 6, 32)
    assert SteeringAngleFrontAxle.from_bytes(data) == message
    with pytest.raises(ValueError):
        SteeringAngleFrontAxle.from_bytes(data[:-1])
    with pytest.raises(ValueError):
        SteeringAngleFrontAxle.from_bytes(data + b"\x00")


def test_velocity_vehicle_round_trip():
    message = VelocityVehicle(1, 7, 28, 1, 2, 3, 13.5, 0)
    data = message.to_bytes()
    assert len(data) == 36
    assert data[:8] == _header(1, 7, 28)
    assert VelocityVehicle.from_bytes(data) == message
    with pytest.raises(ValueError):
        VelocityVehicle.from_bytes(data[:-1])
    with pytest.raises(ValueError):
        VelocityVehicle.from_bytes(data + b"\x00")


def test_yaw_rate_round_trip():
    message = YawRate(1, 8, 32, 0.0625, 1, 1, 0.375, 0, 5)
    data = message.to_bytes()
    assert len(data) == 40
    assert data[:8] == _header(1, 8, 32)
    assert YawRate.from_bytes(data) == message
    with pytest.raises(ValueError):
        YawRate.from_bytes(data[:-1])
    with pytest.raises(ValueError):
        YawRate.from_bytes(data + b"\x00")


def test_yaw_rate_decodes_wire_layout():
    reserved = bytes(range(20))
    data = struct.pack(">HHIfBBfBB20s", 9, 10, 32, 1.5, 1, 2, -2.0, 1, 6, reserved)
    message = YawRate.from_bytes(data)
    assert message.service_id == 9
    assert message.method_id == 10
    assert message.yaw_rate_err_amp == 1.5
    assert message.qualifier_yaw_rate == 2
    assert message.yaw_rate == -2.0
    assert message.yaw_rate_event_data_qualifier == 6
    assert message.reserved == reserved


def test_velocity_decodes_wire_layout():
    data = struct.pack(">HHIBBBfB20s", 2, 3, 28, 1, 0, 4, 27.5, 1, bytes(20))
    message = VelocityVehicle.from_bytes(data)
    assert message.status_velocity_near_standstill == 1
    assert message.velocity_vehicle_event_data_qualifier == 4
    assert message.velocity_vehicle == 27.5
    assert message.velocity_vehicle_invalid_flag == 1


def test_characteristic_speed_decodes_wire_layout():
    data = struct.pack(">HHIBBB8s", 0, 1, 11, 5, 6, 120, b"abcdefgh")
    message = CharacteristicSpeed.from_bytes(data)
    assert message.characteristic_speed == 120
    assert message.reserved == b"abcdefgh"


def test_steering_angle_decodes_wire_layout():
    data = struct.pack(">HHIBfBfBB20s", 0, 1, 32, 2, 0.5, 1, -0.25, 0, 3, bytes(20))
    message = SteeringAngleFrontAxle.from_bytes(data)
    assert message.qualifier_steering_angle_front_axle == 2
    assert message.steering_angle_front_axle_err_amp == 0.5
    assert message.steering_angle_front_axle == -0.25


def test_float_fields_travel_as_single_precision():
    message = AccelerationLateralCoG(acceleration_lateral=0.1)
    decoded = AccelerationLateralCoG.from_bytes(message.to_bytes())
    assert decoded.acceleration_lateral == float32(0.1)


def test_driving_direction_round_trip_keeps_reserved():
    message = DrivingDirection(driving_direction_confirmed=2, reserved=bytes(range(1, 21)))
    assert DrivingDirection.from_bytes(message.to_bytes()).reserved == bytes(range(1, 21))


def test_out_of_range_value_rejected():
    with pytest.raises(ValueError):
        DrivingDirection(driving_direction_confirmed=256).to_bytes()
    with pytest.raises(ValueError):
        YawRate(service_id=-1).to_bytes()