"""Command that reads the radar's status and sends it a new configuration."""

from __future__ import annotations

import argparse
import socket
import sys
from typing import Any, Callable

from .configuration import SensorConfiguration
from .driver import DEFAULT_MULTICAST_IP, DEFAULT_RADAR_PORT
from .messages import MSG_BUFFER_SIZE
from .status import UdpStatus, receive_status
from .util import float32

DEFAULT_RADAR_INTERFACE = "10.13.1.166"
DEFAULT_RADAR_IP = "10.13.1.113"
DEFAULT_NEW_IP = "0.0.0.0"
CONFIGURATION_SOURCE_PORT = 42401
CONFIGURATION_DESTINATION_PORT = 42101

STATUS_TIMEOUT = 2.0
STATUS_RETRIES = 5
CONFIRMATION_CYCLES = 30

# (argument destination, configuration attribute, is a float setting)
_SETTINGS = [
    ("new_x_pos", "longitudinal", True),
    ("new_y_pos", "lateral", True),
    ("new_z_pos", "vertical", True),
    ("new_yaw", "yaw", True),
    ("new_pitch", "pitch", True),
    ("new_plug_orientation", "plug_orientation", False),
    ("new_vehicle_length", "length", True),
    ("new_vehicle_width", "width", True),
    ("new_vehicle_height", "height", True),
    ("new_vehicle_wheelbase", "wheelbase", True),
    ("max_dist", "maximum_distance", False),
    ("new_frequency_slot", "frequency_slot", False),
    ("new_cycle_time", "cycle_time", False),
    ("new_cycle_offset", "time_slot", False),
    ("new_country_code", "hcc", False),
    ("powersave_standstill", "powersave_standstill", False),
]


def _unsigned(bits: int) -> Callable[[str], int]:
    limit = (1 << bits) - 1

    def parse(text: str) -> int:
        try:
            value = int(text, 10)
        except ValueError:
            raise argparse.ArgumentTypeError(f"not an integer: {text!r}") from None
        if not 0 <= value <= limit:
            raise argparse.ArgumentTypeError(f"{value} is outside 0..{limit}")
        return value

    parse.__name__ = f"uint{bits}"
    return parse


def build_parser() -> argparse.ArgumentParser:
    """Command-line parser; settings left out keep the radar's current value."""
    parser = argparse.ArgumentParser(
        prog="ars548-setup", description="Change the configuration of an ARS548 radar."
    )
    parser.add_argument("-l", "--local_ip", default=DEFAULT_RADAR_INTERFACE,
                        help="Local Interface IP")
    parser.add_argument("-r", "--radar_ip", default=DEFAULT_RADAR_IP, help="Radar IP")
    parser.add_argument("-m", "--multicast_ip", default=DEFAULT_MULTICAST_IP,
                        help="Multicast IP")

    uint8 = _unsigned(8)
    uint16 = _unsigned(16)
    options: list[tuple[str, str, str, Any, str]] = [
        ("-X", "--NewXPos", "new_x_pos", float,
         "New Longitudinal position of the radar (-100,100)"),
        ("-Y", "--NewYPos", "new_y_pos", float,
         "New Lateral position of the radar (-100,100)"),
        ("-Z", "--NewZPos", "new_z_pos", float,
         "New Vertical position of the radar (0.01,10)"),
        ("-y", "--NewYaw", "new_yaw", float,
         "New yaw for the radar (-3.14159,3.14159)"),
        ("-P", "--NewPitch", "new_pitch", float,
         "New pitch for the radar (-1.5707,1.5707)"),
        ("-p", "--NewPlugOr", "new_plug_orientation", uint8,
         "New plug orientation for the radar(0=RIGHT,1=LEFT)"),
        ("-L", "--NewLength", "new_vehicle_length", float,
         "New vehicle length (0.01,100)"),
        ("-W", "--NewWidth", "new_vehicle_width", float,
         "New vehicle width (0.01,100)"),
        ("-H", "--NewHeight", "new_vehicle_height", float,
         "New vehicle height (0.01,100)"),
        ("-w", "--NewWheelLength", "new_vehicle_wheelbase", float,
         "New vehicle wheelbase (0.01,100)"),
        ("-D", "--maxDist", "max_dist", uint16,
         "New max distance for the radar (93,1514)"),
        ("-F", "--NewFreq", "new_frequency_slot", uint8,
         "New Frequency Slot for the radar (0=Low,1=Mid,2=High)"),
        ("-C", "--Newtime", "new_cycle_time", uint8,
         "New cycle time for the radar (50,100)"),
        ("-O", "--NewOffset", "new_cycle_offset", uint8,
         "New radar cycle offset (10,90)"),
        ("-c", "--NewCountryCode", "new_country_code", uint8,
         "New radar Country Code (1=Worldwide,2=Japan)"),
        ("-s", "--PowersaveActiveStandstill", "powersave_standstill", uint8,
         "Turn on or off the powersaving in standstill(0=Off,1=On)"),
    ]
    for short, long, dest, kind, text in options:
        parser.add_argument(short, long, dest=dest, type=kind, default=None, help=text)
    parser.add_argument("-I", "--NewIp0", dest="new_ip0", default=DEFAULT_NEW_IP,
                        help="New IP0 to connect to the radar")
    return parser


def merge_configuration(args: argparse.Namespace, status: UdpStatus) -> SensorConfiguration:
    """Configuration holding the given settings and the radar's values for the rest."""
    config = SensorConfiguration.from_status(status)
    for dest, attribute, is_float in _SETTINGS:
        value = getattr(args, dest, None)
        if value is not None:
            setattr(config, attribute, float32(value) if is_float else value)
    config.new_sensor_mounting = 0
    config.new_vehicle_parameters = 0
    config.new_radar_parameters = 0
    config.new_network_configuration = 0
    return config


def wait_for_status(sock: Any, retries: int = STATUS_RETRIES) -> UdpStatus | None:
    """Read datagrams until a valid status arrives; None after ``retries`` reads."""
    for remaining in range(retries, 0, -1):
        try:
            data = sock.recv(MSG_BUFFER_SIZE)
        except TimeoutError:
            print(f"Timeout waiting for data. Retrying... ({remaining})")
            continue
        except OSError as exc:
            print(f"recvfrom failed: {exc}", file=sys.stderr)
            continue
        status = receive_status(data)
        if status is not None:
            print("Status received.")
            return status
    return None


def wait_for_confirmation(
    sock: Any, config: SensorConfiguration, cycles: int = CONFIRMATION_CYCLES
) -> tuple[bool, UdpStatus | None]:
    """Read up to ``cycles`` datagrams until the radar reports ``config``.

    Returns whether it did, and the last valid status received (or None).
    """
    latest: UdpStatus | None = None
    for _ in range(cycles):
        try:
            data = sock.recv(MSG_BUFFER_SIZE)
        except TimeoutError:
            continue
        except OSError as exc:
            print(f"recvfrom error in confirmation loop: {exc}", file=sys.stderr)
            continue
        status = receive_status(data)
        if status is None:
            continue
        latest = status
        if config.is_equal_to_status(status):
            return True, latest
    return False, latest


def _send_configuration(config: SensorConfiguration, radar_ip: str) -> None:
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sender:
        sender.sendto(config.to_bytes(), (radar_ip, CONFIGURATION_DESTINATION_PORT))


def _configure(receiver: Any, args: argparse.Namespace) -> int:
    print("Waiting for status message...")
    status = wait_for_status(receiver)
    if status is None:
        print("Could not receive valid status data after retries.")
        return 1

    config = merge_configuration(args, status)
    if config.change_configuration(status):
        if config.new_sensor_mounting == 1:
            print("Changing the sensor mounting Position ")
        if config.new_vehicle_parameters == 1:
            print("Changing the vehicle parameters")
        if config.new_radar_parameters == 1:
            print("Changing the Radar parameters")
        if config.new_network_configuration == 1:
            print("Changing the Network Configuration")
        config.set_ids_and_payload()
        try:
            _send_configuration(config, args.radar_ip)
        except OSError as exc:
            print(f"Failed sending the message: {exc}", file=sys.stderr)
            return 1

    print("Waiting for status update confirmation...")
    confirmed, latest = wait_for_confirmation(receiver, config)
    print("\n\n -------------- Desired configuration -------------- \n")
    print(config.format(), end="")
    print(" -------------- Received status updated ------------ \n")
    print((latest or status).format(), end="")
    if confirmed:
        print("\n\n Configured OK!!!!!!!!\n")
        return 0
    print("\n\n Failed to configure the system (or timeout) \n")
    return 1


def main(argv: list[str] | None = None) -> int:
    """Read the radar status, send the requested changes and wait for them to apply."""
    args = build_parser().parse_args(argv)
    try:
        receiver = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    except OSError as exc:
        print(f"socket: {exc}", file=sys.stderr)
        return 1
    try:
        try:
            receiver.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        except OSError as exc:
            print(f"Reusing ADDR failed: {exc}", file=sys.stderr)
            return 1
        try:
            receiver.bind(("", DEFAULT_RADAR_PORT))
        except OSError as exc:
            print(f"bind: {exc}", file=sys.stderr)
            return 1

        connected = True
        try:
            membership = socket.inet_aton(args.multicast_ip) + socket.inet_aton(
                args.local_ip
            )
            receiver.setsockopt(socket.IPPROTO_IP, socket.IP_ADD_MEMBERSHIP, membership)
        except OSError as exc:
            print(f"setsockopt - Join Multicast Failed: {exc}", file=sys.stderr)
            connected = False

        receiver.settimeout(STATUS_TIMEOUT)
        if not connected:
            return 0
        return _configure(receiver, args)
    finally:
        receiver.close()