import time

import pytest

from arsradar.detections import Detection, DetectionList
from arsradar.driver import (
    Ars548Driver,
    DriverConfig,
    main,
    open_multicast_socket,
)
from arsradar.messages import PointCloud, PoseArray, Stamp
from arsradar.objects import ObjectList, RadarObject
from arsradar.status import UdpStatus


class _Sink:
    def __init__(self):
        self.messages = []

    def __call__(self, topic, message):
        self.messages.append((topic, message))


class _FakeSocket:
    def __init__(self, packets, on_empty):
        self.packets = list(packets)
        self.on_empty = on_empty
        self.closed = False

    def recv(self, size):
        if self.packets:
            return self.packets.pop(0)
        self.on_empty()
        time.sleep(0.01)
        raise TimeoutError

    def close(self):
        self.closed = True


def _driver(**config):
    sink = _Sink()
    return Ars548Driver(DriverConfig(**config), publish=sink), sink


def test_default_config():
    cfg = DriverConfig()
    assert cfg.radar_port == 42102
    assert cfg.multicast_ip == "224.0.2.2"
    assert cfg.frame_id == "ARS_548"
    assert cfg.override_stamp is True


def test_status_packet_published():
    driver, sink = _driver()
    status = UdpStatus(cycle_time=50, maximum_distance=300, configuration_counter=3)
    out = driver.handle_packet(status.to_bytes(), Stamp(1, 2))
    assert [topic for topic, _ in out] == ["Status"]
    assert out[0][1] == status.to_msg()
    assert sink.messages == out


def test_invalid_status_not_published():
    driver, sink = _driver()
    out = driver.handle_packet(UdpStatus(method_id=1).to_bytes(), Stamp(1, 2))
    assert out == []
    assert sink.messages == []


def test_object_packet_published_in_order():
    driver, sink = _driver(frame_id="front")
    objects = ObjectList(
        objects=[RadarObject(position_x=1.5, abs_vel_x=2.0, rel_vel_x=1.0)],
        timestamp_seconds=10,
        timestamp_nanoseconds=20,
    )
    now = Stamp(3, 4)
    out = driver.handle_packet(objects.to_bytes(), now)
    assert [t for t, _ in out] == ["ObjectList", "PointCloudObject", "DirectionVelocity"]
    msg, cloud, poses = (m for _, m in out)
    assert msg["objectlist_numofobjects"] == 1
    assert msg["header"].stamp == now
    assert isinstance(cloud, PointCloud) and cloud.column("x") == [1.5]
    assert isinstance(poses, PoseArray) and poses.poses[0].position[0] == 1.5
    assert cloud.header.frame_id == "front"
    assert len(sink.messages) == 3


def test_object_packet_keeps_radar_stamp():
    driver, _ = _driver(override_stamp=False)
    objects = ObjectList(objects=[], timestamp_seconds=10, timestamp_nanoseconds=20)
    out = driver.handle_packet(objects.to_bytes(), Stamp(3, 4))
    assert out[0][1]["header"].stamp == Stamp(10, 20)


def test_detection_packet_published():
    driver, _ = _driver()
    detections = DetectionList(detections=[Detection(range=4.0, range_rate=-1.0, rcs=5)])
    out = driver.handle_packet(detections.to_bytes(), Stamp(1, 1))
    assert [t for t, _ in out] == ["DetectionList", "PointCloudDetection"]
    assert out[0][1]["list_numofdetections"] == 1
    assert out[1][1].column("r") == [4.0]
    assert out[1][1].column("RCS") == [5]


def test_unknown_size_ignored():
    driver, sink = _driver()
    assert driver.handle_packet(b"\x00" * 17, Stamp(0, 0)) == []
    assert sink.messages == []


def test_run_handles_packets_and_closes_socket():
    sink = _Sink()
    holder = {}
    status = UdpStatus(hcc=1)

    def factory():
        holder["sock"] = _FakeSocket([status.to_bytes(), b"junk"], driver.stop)
        return holder["sock"]

    driver = Ars548Driver(DriverConfig(), publish=sink, socket_factory=factory)
    driver.run()
    assert [t for t, _ in sink.messages] == ["Status"]
    assert sink.messages[0][1]["hcc"] == 1
    assert holder["sock"].closed is True


def test_start_and_stop_thread():
    sink = _Sink()
    sock = _FakeSocket([], lambda: None)
    driver = Ars548Driver(DriverConfig(), publish=sink, socket_factory=lambda: sock)
    with driver:
        time.sleep(0.05)
    assert sock.closed is True
    assert driver.error is None


def test_socket_failure_recorded_as_error():
    def factory():
        raise OSError("cannot bind")

    driver = Ars548Driver(DriverConfig(), publish=_Sink(), socket_factory=factory)
    driver.start()
    driver.stop()
    assert str(driver.error) == "cannot bind"


def test_open_multicast_socket_rejects_bad_address():
    with pytest.raises(OSError):
        open_multicast_socket(0, "not-an-ip", "127.0.0.1")


def test_main_reports_socket_error():
    assert main(["--radar-port", "0", "--multicast-ip", "not-an-ip"]) == 1