# arsradar

`arsradar` reads and writes the UDP messages of the ARS548 automotive radar.
It uses only the standard library.

What it offers:

- decoding of the radar's status, object list and detection list datagrams
  (`arsradar.status.UdpStatus`, `arsradar.objects.ObjectList`,
  `arsradar.detections.DetectionList`), and encoding them back to bytes;
- conversion of object and detection lists into message dictionaries
  (`to_msg`), point clouds (`arsradar.messages.PointCloud`) and, for objects,
  direction poses (`arsradar.messages.PoseArray`);
- decoding and encoding of the vehicle signal datagrams in
  `arsradar.signals` (`AccelerationLateralCoG`, `AccelerationLongitudinalCoG`,
  `CharacteristicSpeed`, `DrivingDirection`, `SteeringAngleFrontAxle`,
  `VelocityVehicle`, `YawRate`);
- building the `arsradar.configuration.SensorConfiguration` datagram that
  changes the radar's mounting position, vehicle parameters, radar parameters
  or network settings;
- filtering object list messages into point clouds with
  `arsradar.filtering.ObjectFilter` or the speed-based `VelocityFilter`;
- a multicast receiver, `arsradar.driver.Ars548Driver`, and two commands.

All wire formats are packed and big-endian. Floating-point fields are kept at
32-bit precision where the radar's arithmetic is reproduced.

## Installation

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Commands

### `ars548-driver`

Joins the radar's multicast group (default `224.0.2.2`, port `42102`, local
interface `10.13.1.166`) and handles every datagram it receives. The kind of
a datagram is told by its size (84 bytes status, 9401 bytes object list,
35336 bytes detection list) and then checked by method id and payload length;
anything else is ignored. For each decoded message the command prints one line
with its topic and a short summary, for example `PointCloudObject: 3 points`.

Options: `--local-ip`, `--radar-ip`, `--radar-port`, `--frame-id`,
`--multicast-ip` and `--override-stamp` / `--no-override-stamp`. With
`--override-stamp` (the default) headers carry the time of reception;
otherwise they carry the radar's own timestamp. Stop it with Ctrl-C. It exits
with 1 if the socket cannot be opened.

```
ars548-driver --help
```

### `ars548-setup`

Listens on port `42102` in the multicast group, waits for a valid status
message (five reads, two seconds each), merges the settings given on the
command line with the status, and, when something differs, sends a
configuration datagram to the radar (`-r/--radar_ip`, default `10.13.1.113`)
on port `42101`. It then reads up to 30 more datagrams for a status that
matches the requested settings and prints the desired configuration and the
last status received. It exits with 0 when the settings were confirmed and
with 1 otherwise. If joining the multicast group fails it reports that and
exits with 0 without sending anything.

Settings (any not given keep the radar's current value):

| Option | Setting |
| --- | --- |
| `-X/--NewXPos`, `-Y/--NewYPos`, `-Z/--NewZPos` | mounting position |
| `-y/--NewYaw`, `-P/--NewPitch` | mounting orientation |
| `-p/--NewPlugOr` | plug orientation (0 right, 1 left) |
| `-L/--NewLength`, `-W/--NewWidth`, `-H/--NewHeight`, `-w/--NewWheelLength` | vehicle dimensions |
| `-D/--maxDist` | maximum distance |
| `-F/--NewFreq` | frequency slot (0 low, 1 mid, 2 high) |
| `-C/--Newtime` | cycle time |
| `-O/--NewOffset` | cycle offset |
| `-c/--NewCountryCode` | country code (1 worldwide, 2 Japan) |
| `-s/--PowersaveActiveStandstill` | power saving at standstill (0 off, 1 on) |

When the maximum distance is changed to below 190, the frequency slot is
forced to 1 (mid). `-I/--NewIp0` is accepted but has no effect: the sensor
address is always carried over from the received status.

```
ars548-setup --help
```

## Library use

Decoding a status datagram:

```python
from arsradar.status import receive_status

status = receive_status(packet)   # None unless it is a valid status datagram
if status is not None:
    print(status.format())
```

Decoding an object list and building a point cloud and poses from it:

```python
from arsradar.messages import Stamp
from arsradar.objects import ObjectList

objects = ObjectList.from_bytes(packet)
if objects.is_valid():
    now = Stamp.from_seconds(1_700_000_000.25)
    cloud = objects.to_point_cloud("ARS_548", now, True)
    xs = cloud.column("x")
    data = cloud.to_bytes()
    poses = objects.direction_poses("ARS_548", now, True)
```

Filtering an object list message by speed:

```python
from arsradar.filtering import VelocityFilter

fast = VelocityFilter(min_velocity=2.0).filter_cloud(objects.to_msg("ARS_548", now))
```

Receiving in the background with your own publisher:

```python
from arsradar.driver import Ars548Driver, DriverConfig

def publish(topic, message):
    ...

with Ars548Driver(DriverConfig(frame_id="radar"), publish=publish) as driver:
    ...   # datagrams are handled on a background thread until the block ends
```

`Ars548Driver.handle_packet(data, now)` decodes a single datagram, passes each
`(topic, message)` pair to the publisher and returns them; if the receive
thread could not open its socket, the error is left in `driver.error`.

Building a configuration from a received status:

```python
from arsradar.configuration import SensorConfiguration

config = SensorConfiguration.from_status(status)
config.cycle_time = 50
if config.change_configuration(status):
    config.set_ids_and_payload()
    payload = config.to_bytes()   # 64 bytes, ready to send to the radar
```

## What it does not do

Messages are handed to a Python callable as dictionaries and dataclasses; the
package does not publish them on any robotics middleware or message bus, and
the `ars548-driver` command only prints a summary of each one. There is no
command for the object filter; it is available as a library class only. The
vehicle signal datagrams can be encoded and decoded, but nothing in the
package sends them to the radar.