"""Filters over published object lists, producing reduced point clouds."""

from __future__ import annotations

import abc
import logging
import time
from typing import Any, Mapping

from .messages import Header, PointCloud, Stamp
from .objects import ARS548_OBJECT_POINTCLOUD_HEIGHT, OBJECT_CLOUD_FIELDS
from .util import float32

MINIMUM_VELOCITY = 2.0
DEFAULT_FRAME_ID = "ARS_548"
FILTERED_CLOUD_TOPIC = "PointCloudObjectFiltered"
OBJECT_LIST_TOPIC = "ObjectList"

logger = logging.getLogger(__name__)


class ObjectFilter(abc.ABC):
    """Turns an object list message into a point cloud of the objects that pass."""

    def __init__(self, frame_id: str = DEFAULT_FRAME_ID) -> None:
        self.frame_id = frame_id

    @abc.abstractmethod
    def condition(self, obj: Mapping[str, Any]) -> bool:
        """True when the object message ``obj`` is kept."""

    def filter_cloud(
        self, object_list_msg: Mapping[str, Any], now: Stamp | None = None
    ) -> PointCloud:
        """Point cloud of the objects in ``object_list_msg`` that meet the condition.

        The cloud is stamped with ``now``, or with the current time if omitted.
        """
        stamp = now if now is not None else Stamp.from_seconds(time.time())
        count = object_list_msg["objectlist_numofobjects"]
        objects = object_list_msg["objectlist_objects"][:count]
        points = [
            (
                obj["u_position_x"],
                obj["u_position_y"],
                obj["u_position_z"],
                obj["f_dynamics_absvel_x"],
                obj["f_dynamics_absvel_y"],
            )
            for obj in objects
            if self.condition(obj)
        ]
        return PointCloud(
            fields=list(OBJECT_CLOUD_FIELDS),
            points=points,
            header=Header(stamp=stamp, frame_id=self.frame_id),
            height=ARS548_OBJECT_POINTCLOUD_HEIGHT,
            is_dense=False,
            is_bigendian=False,
        )


class VelocityFilter(ObjectFilter):
    """Keeps objects whose absolute speed exceeds a minimum."""

    def __init__(
        self,
        min_velocity: float = MINIMUM_VELOCITY,
        frame_id: str = DEFAULT_FRAME_ID,
    ) -> None:
        super().__init__(frame_id)
        self.min_velocity = float32(min_velocity)
        self.min_velocity_sq = float32(self.min_velocity * self.min_velocity)
        logger.info(
            "Velocity filter initialized: minimum velocity %f, frame id %s",
            self.min_velocity,
            self.frame_id,
        )

    def condition(self, obj: Mapping[str, Any]) -> bool:
        """True when the squared absolute velocity exceeds the squared minimum."""
        vx = float32(obj["f_dynamics_absvel_x"])
        vy = float32(obj["f_dynamics_absvel_y"])
        speed_sq = float32(float32(vx * vx) + float32(vy * vy))
        logger.debug(
            "Velocity filter condition: v_sq = %f, min_vel_sq = %f",
            speed_sq,
            self.min_velocity_sq,
        )
        return speed_sq > self.min_velocity_sq