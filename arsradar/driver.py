"""Receives radar datagrams over multicast UDP and publishes decoded messages."""

from __future__ import annotations

import argparse
import logging
import socket
import sys
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable

from .detections import DETECTION_MESSAGE_PAYLOAD, DetectionList
from .messages import MSG_BUFFER_SIZE, PointCloud, PoseArray, Stamp
from .objects import OBJECT_MESSAGE_PAYLOAD, ObjectList
from .status import STATUS_MESSAGE_PAYLOAD, receive_status

DEFAULT_LOCAL_IP = "10.13.1.166"
DEFAULT_RADAR_IP = "10.13.1.113"
DEFAULT_RADAR_PORT = 42102
DEFAULT_MULTICAST_IP = "224.0.2.2"
DEFAULT_FRAME_ID = "ARS_548"

RECEIVE_TIMEOUT = 0.1
ERROR_BACKOFF = 1.0

TOPIC_STATUS = "Status"
TOPIC_OBJECT_LIST = "ObjectList"
TOPIC_DETECTION_LIST = "DetectionList"
TOPIC_DIRECTION = "DirectionVelocity"
TOPIC_OBJECT_CLOUD = "PointCloudObject"
TOPIC_DETECTION_CLOUD = "PointCloudDetection"

logger = logging.getLogger(__name__)

Publisher = Callable[[str, Any], None]


@dataclass
class DriverConfig:
    """Network and output settings of the driver."""

    local_ip: str = DEFAULT_LOCAL_IP
    radar_ip: str = DEFAULT_RADAR_IP
    radar_port: int = DEFAULT_RADAR_PORT
    frame_id: str = DEFAULT_FRAME_ID
    multicast_ip: str = DEFAULT_MULTICAST_IP
    override_stamp: bool = True


def open_multicast_socket(
    port: int, multicast_ip: str, local_ip: str, timeout: float = RECEIVE_TIMEOUT
) -> socket.socket:
    """Open a UDP socket bound to ``port`` that has joined ``multicast_ip``.

    Raises OSError if any step fails; the socket is closed in that case.
    """
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.settimeout(timeout)
        sock.bind(("", port))
        membership = socket.inet_aton(multicast_ip) + socket.inet_aton(local_ip)
        sock.setsockopt(socket.IPPROTO_IP, socket.IP_ADD_MEMBERSHIP, membership)
    except OSError:
        sock.close()
        raise
    return sock


def _summary(message: Any) -> str:
    if isinstance(message, PointCloud):
        return f"{message.width} points"
    if isinstance(message, PoseArray):
        return f"{len(message.poses)} poses"
    if "objectlist_numofobjects" in message:
        return f"{message['objectlist_numofobjects']} objects"
    if "list_numofdetections" in message:
        return f"{message['list_numofdetections']} detections"
    return f"configuration counter {message.get('configurationcounter')}"


def _print_message(topic: str, message: Any) -> None:
    print(f"{topic}: {_summary(message)}", flush=True)


class Ars548Driver:
    """Decodes radar datagrams and hands each resulting message to ``publish``."""

    def __init__(
        self,
        config: DriverConfig | None = None,
        publish: Publisher | None = None,
        socket_factory: Callable[[], Any] | None = None,
    ) -> None:
        self.config = config or DriverConfig()
        self._publish = publish or _print_message
        self._socket_factory = socket_factory or self._open_socket
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self.error: OSError | None = None

    def _open_socket(self) -> socket.socket:
        return open_multicast_socket(
            self.config.radar_port, self.config.multicast_ip, self.config.local_ip
        )

    def handle_packet(
        self, data: bytes, now: Stamp | None = None
    ) -> list[tuple[str, Any]]:
        """Decode one datagram, publish its messages and return them as (topic, message).

        The datagram kind is told by its size; unknown sizes and invalid
        messages produce nothing.
        """
        stamp = now if now is not None else Stamp.from_seconds(time.time())
        cfg = self.config
        out: list[tuple[str, Any]] = []
        size = len(data)
        if size == STATUS_MESSAGE_PAYLOAD:
            status = receive_status(data)
            if status is not None:
                out.append((TOPIC_STATUS, status.to_msg()))
        elif size == OBJECT_MESSAGE_PAYLOAD:
            objects = ObjectList.from_bytes(data)
            if objects.is_valid():
                args = (cfg.frame_id, stamp, cfg.override_stamp)
                out.append((TOPIC_OBJECT_LIST, objects.to_msg(*args)))
                out.append((TOPIC_OBJECT_CLOUD, objects.to_point_cloud(*args)))
                out.append((TOPIC_DIRECTION, objects.direction_poses(*args)))
        elif size == DETECTION_MESSAGE_PAYLOAD:
            detections = DetectionList.from_bytes(data)
            if detections.is_valid():
                args = (cfg.frame_id, stamp, cfg.override_stamp)
                out.append((TOPIC_DETECTION_LIST, detections.to_msg(*args)))
                out.append((TOPIC_DETECTION_CLOUD, detections.to_point_cloud(*args)))
        for topic, message in out:
            self._publish(topic, message)
        return out

    def start(self) -> None:
        """Run the receive loop in a background thread."""
        if self._thread is not None and self._thread.is_alive():
            raise RuntimeError("driver is already running")
        self._stop.clear()
        self.error = None
        self._thread = threading.Thread(
            target=self._run_in_thread, name="ars548-receive", daemon=True
        )
        self._thread.start()

    def _run_in_thread(self) -> None:
        try:
            self.run()
        except OSError as exc:
            self.error = exc
            logger.error("Receive loop failed: %s", exc)

    def stop(self) -> None:
        """Ask the receive loop to end and wait for its thread."""
        self._stop.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()

    def run(self) -> None:
        """Receive and handle datagrams until stopped; raises OSError if the socket cannot open."""
        sock = self._socket_factory()
        logger.info("Waiting for data...")
        try:
            while not self._stop.is_set():
                try:
                    data = sock.recv(MSG_BUFFER_SIZE)
                except TimeoutError:
                    continue
                except OSError as exc:
                    logger.warning("recv failed: %s", exc)
                    self._stop.wait(ERROR_BACKOFF)
                    continue
                if data:
                    self.handle_packet(data)
        finally:
            sock.close()
            logger.info("ARS548 receive loop stopped.")

    def __enter__(self) -> Ars548Driver:
        self.start()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.stop()


def main(argv: list[str] | None = None) -> int:
    """Run the driver in the foreground, printing a line per published message."""
    parser = argparse.ArgumentParser(
        prog="ars548-driver", description="Receive and decode ARS548 radar data."
    )
    parser.add_argument("--local-ip", default=DEFAULT_LOCAL_IP)
    parser.add_argument("--radar-ip", default=DEFAULT_RADAR_IP)
    parser.add_argument("--radar-port", type=int, default=DEFAULT_RADAR_PORT)
    parser.add_argument("--frame-id", default=DEFAULT_FRAME_ID)
    parser.add_argument("--multicast-ip", default=DEFAULT_MULTICAST_IP)
    parser.add_argument(
        "--override-stamp", action=argparse.BooleanOptionalAction, default=True
    )
    args = parser.parse_args(argv)
    config = DriverConfig(
        local_ip=args.local_ip,
        radar_ip=args.radar_ip,
        radar_port=args.radar_port,
        frame_id=args.frame_id,
        multicast_ip=args.multicast_ip,
        override_stamp=args.override_stamp,
    )
    logging.basicConfig(level=logging.INFO)
    logger.info(
        "ARS548 Driver started. Listening on %s Multicast %s",
        config.local_ip,
        config.multicast_ip,
    )
    driver = Ars548Driver(config)
    try:
        driver.run()
    except KeyboardInterrupt:
        pass
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0