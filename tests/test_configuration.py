import struct

import pytest

from arsradar.configuration import (
    ARS548_MINIMUM_DISTANCE_SLOT_1,
    CONFIGURATION_METHOD_ID,
    CONFIGURATION_PDU_LENGTH,
    CONFIGURATION_SERVICE_ID,
    CONFIGURATION_UDP_PAYLOAD,
    SensorConfiguration,
)
from arsradar.status import UdpStatus


def make_status(**changes):
    values = dict(
        longitudinal=1.5,
        lateral=-0.25,
        vertical=0.75,
        yaw=0.5,
        pitch=-0.125,
        plug_orientation=0,
        length=4.5,
        width=2.0,
        height=1.5,
        wheelbase=2.75,
        maximum_distance=300,
        frequency_slot=0,
        cycle_time=50,
        time_slot=10,
        hcc=1,
        powersave_standstill=0,
        sensor_ip_address_0=0x0A0D0171,
        sensor_ip_address_1=0,
    )
    values.update(changes)
    return UdpStatus(**values)


def flags(config):
    return (
        config.new_sensor_mounting,
        config.new_vehicle_parameters,
        config.new_radar_parameters,
        config.new_network_configuration,
    )


def test_set_ids_and_payload():
    config = SensorConfiguration()
    config.set_ids_and_payload()
    assert (config.service_id, config.method_id, config.payload_length) == (
        CONFIGURATION_SERVICE_ID,
        CONFIGURATION_METHOD_ID,
        CONFIGURATION_PDU_LENGTH,
    )


def test_encoding_header_and_size():
    config = SensorConfiguration.from_status(make_status())
    config.set_ids_and_payload()
    data = config.to_bytes()
    assert len(data) == CONFIGURATION_UDP_PAYLOAD
    assert data[:8] == struct.pack(
        ">HHI", CONFIGURATION_SERVICE_ID, CONFIGURATION_METHOD_ID, CONFIGURATION_PDU_LENGTH
    )


def test_round_trip():
    config = SensorConfiguration.from_status(make_status())
    config.set_ids_and_payload()
    config.new_radar_parameters = 1
    assert SensorConfiguration.from_bytes(config.to_bytes()) == config


def test_from_bytes_wrong_length():
    with pytest.raises(ValueError):
        SensorConfiguration.from_bytes(b"\x00" * 63)


def test_to_bytes_out_of_range():
    with pytest.raises(ValueError):
        SensorConfiguration(cycle_time=300).to_bytes()


def test_unchanged_configuration_matches_status():
    status = make_status()
    config = SensorConfiguration.from_status(status)
    assert config.is_equal_to_status(status) is True
    assert config.change_configuration(status) is False
    assert flags(config) == (0, 0, 0, 0)


def test_mounting_change():
    status = make_status()
    config = SensorConfiguration.from_status(status)
    config.longitudinal = 2.0
    assert config.change_configuration(status) is True
    assert flags(config) == (1, 0, 0, 0)


def test_plug_orientation_change():
    status = make_status()
    config = SensorConfiguration.from_status(status)
    config.plug_orientation = 1
    assert config.change_configuration(status) is True
    assert config.new_sensor_mounting == 1


def test_vehicle_change():
    status = make_status()
    config = SensorConfiguration.from_status(status)
    config.width = 2.5
    assert config.change_configuration(status) is True
    assert flags(config) == (0, 1, 0, 0)


def test_short_distance_forces_mid_slot():
    status = make_status()
    config = SensorConfiguration.from_status(status)
    config.maximum_distance = ARS548_MINIMUM_DISTANCE_SLOT_1 - 1
    assert config.change_configuration(status) is True
    assert config.frequency_slot == 1
    assert flags(config) == (0, 0, 1, 0)


def test_long_distance_keeps_slot():
    status = make_status()
    config = SensorConfiguration.from_status(status)
    config.maximum_distance = ARS548_MINIMUM_DISTANCE_SLOT_1 + 10
    assert config.change_configuration(status) is True
    assert config.frequency_slot == status.frequency_slot


def test_unset_ip_is_not_a_change():
    status = make_status()
    config = SensorConfiguration.from_status(status)
    config.sensor_ip_address_0 = 0
    assert config.change_configuration(status) is False
    assert config.is_equal_to_status(status) is True


def test_new_ip_is_a_change():
    status = make_status()
    config = SensorConfiguration.from_status(status)
    config.sensor_ip_address_0 = status.sensor_ip_address_0 + 1
    assert config.change_configuration(status) is True
    assert flags(config) == (0, 0, 0, 1)
    assert config.is_equal_to_status(status) is False


def test_status_without_ip_matches_any_address():
    status = make_status(sensor_ip_address_0=0)
    config = SensorConfiguration.from_status(make_status())
    assert config.is_equal_to_status(status) is True


def test_equal_within_precision():
    status = make_status()
    config = SensorConfiguration.from_status(status)
    config.longitudinal = status.longitudinal + 0.0005
    assert config.is_equal_to_status(status) is True
    config.longitudinal = status.longitudinal + 0.01
    assert config.is_equal_to_status(status) is False


def test_height_compared_strictly():
    status = make_status()
    config = SensorConfiguration.from_status(status)
    config.height = status.height + 0.0005
    assert config.is_equal_to_status(status) is False
    assert config.change_configuration(status) is False


@pytest.mark.parametrize(
    "field_name,value",
    [("cycle_time", 100), ("time_slot", 20), ("hcc", 2), ("powersave_standstill", 1)],
)
def test_radar_parameter_changes(field_name, value):
    status = make_status()
    config = SensorConfiguration.from_status(status)
    setattr(config, field_name, value)
    assert config.is_equal_to_status(status) is False
    assert config.change_configuration(status) is True
    assert flags(config) == (0, 0, 1, 0)


def test_format():
    config = SensorConfiguration.from_status(make_status(hcc=2, plug_orientation=1))
    text = config.format()
    assert text.startswith("Config: \n")
    assert "Country Code: JAPAN\n" in text
    assert "Plug Orientation: LEFT\n" in text
    assert "Center Frequency: LOW\n" in text
    assert text.endswith("\n\n")