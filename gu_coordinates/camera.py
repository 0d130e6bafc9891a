"""
Camera and camera pivot configuration.

A `Camera` only describes how a camera is mounted relative to the pivot it
is attached to. The `CameraPivot` describes the pivot itself (pan and tilt)
and holds up to `CAMERA_PIVOT_NUM_CAMERAS` cameras, each paired with an
extra height offset from the pivot.

Conventions:
    - Heights and offsets in centimetres
    - Angles in degrees
    - A positive vertical direction/pitch points towards the ground
    - A positive yaw turns the assembly to the left
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Tuple
import logging

from .units import require_finite

logger = logging.getLogger(__name__)

# Maximum number of cameras a single pivot can hold.
CAMERA_PIVOT_NUM_CAMERAS = 4


class CameraIndexError(IndexError):
    """Raised when a camera index does not reference a camera on the pivot."""


class CameraPivotCapacityError(ValueError):
    """Raised when a pivot is given more cameras than it can hold."""


class InvalidCameraError(ValueError):
    """Raised when a camera cannot be used for projection."""


@dataclass(frozen=True)
class Camera:
    """
    Specification of a single camera relative to its pivot.

    Attributes:
        height: Height from the pivot to the middle of the camera. With no
            pivot this is the height above the ground.
        center_offset: Distance the camera sits in front of (positive) or
            behind (negative) the pivot's center point.
        v_direction: Vertical direction the camera faces. Positive points
            towards the ground, negative towards the sky.
        v_fov: Vertical field of view
        h_fov: Horizontal field of view
    """
    height: float = 0.0
    center_offset: float = 0.0
    v_direction: float = 0.0
    v_fov: float = 0.0
    h_fov: float = 0.0

    def __post_init__(self):
        for name in ('height', 'center_offset', 'v_direction', 'v_fov', 'h_fov'):
            object.__setattr__(self, name, require_finite(name, getattr(self, name)))
        if self.v_fov < 0 or self.h_fov < 0:
            raise ValueError(
                f"Field of view must be non-negative: v_fov={self.v_fov}, h_fov={self.h_fov}"
            )

    def as_tuple(self) -> Tuple[float, float, float, float, float]:
        return (self.height, self.center_offset, self.v_direction, self.v_fov, self.h_fov)

    @classmethod
    def from_tuple(cls, values: Iterable[float]) -> "Camera":
        return cls(*values)

    def to_dict(self) -> Dict[str, float]:
        return {
            'height': self.height,
            'center_offset': self.center_offset,
            'v_direction': self.v_direction,
            'v_fov': self.v_fov,
            'h_fov': self.h_fov,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Camera":
        return cls(
            height=data.get('height', 0.0),
            center_offset=data.get('center_offset', 0.0),
            v_direction=data.get('v_direction', 0.0),
            v_fov=data.get('v_fov', 0.0),
            h_fov=data.get('h_fov', 0.0),
        )


@dataclass(frozen=True)
class CameraPivot:
    """
    The mount point that one or more cameras are attached to.

    The order of `cameras` defines the camera index used by every
    projection. Each entry is a `(Camera, height_offset)` pair where
    `height_offset` is the extra height of that camera above the pivot.

    Attributes:
        pitch: Tilt of the pivot in degrees (positive towards the ground)
        yaw: Pan of the pivot in degrees (positive to the left)
        cameras: Tuple of `(Camera, height_offset)` pairs

    Raises:
        CameraPivotCapacityError: More than `CAMERA_PIVOT_NUM_CAMERAS`
            cameras were supplied
    """
    pitch: float = 0.0
    yaw: float = 0.0
    cameras: Tuple[Tuple[Camera, float], ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, 'pitch', require_finite('pitch', self.pitch))
        object.__setattr__(self, 'yaw', require_finite('yaw', self.yaw))

        cameras = tuple(
            (camera, require_finite('height_offset', offset))
            for camera, offset in self.cameras
        )
        if len(cameras) > CAMERA_PIVOT_NUM_CAMERAS:
            raise CameraPivotCapacityError(
                f"A camera pivot holds at most {CAMERA_PIVOT_NUM_CAMERAS} cameras, "
                f"got {len(cameras)}"
            )
        for camera, _ in cameras:
            if not isinstance(camera, Camera):
                raise TypeError(f"Expected Camera, got {type(camera).__name__}")
        object.__setattr__(self, 'cameras', cameras)

    @property
    def num_cameras(self) -> int:
        return len(self.cameras)

    def camera(self, index: int) -> Camera:
        """Return the camera at `index`."""
        return self.mount(index)[0]

    def height_offset(self, index: int) -> float:
        """Return the height offset of the camera at `index`."""
        return self.mount(index)[1]

    def mount(self, index: int) -> Tuple[Camera, float]:
        """
        Return the `(Camera, height_offset)` pair at `index`.

        Raises:
            CameraIndexError: `index` is outside [0, num_cameras)
        """
        if not 0 <= index < len(self.cameras):
            raise CameraIndexError(
                f"Camera index {index} out of range for pivot with "
                f"{len(self.cameras)} camera(s)"
            )
        return self.cameras[index]

    def as_tuple(self) -> Tuple[float, float, Tuple[Tuple[Camera, float], ...]]:
        return (self.pitch, self.yaw, self.cameras)

    @classmethod
    def from_tuple(cls, values: Iterable[Any]) -> "CameraPivot":
        pitch, yaw, cameras = values
        return cls(pitch=pitch, yaw=yaw, cameras=tuple(cameras))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'pitch': self.pitch,
            'yaw': self.yaw,
            'cameras': [
                {'camera': camera.to_dict(), 'height_offset': offset}
                for camera, offset in self.cameras
            ],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CameraPivot":
        entries = data.get('cameras') or []
        if not isinstance(entries, list):
            raise ValueError(f"Expected a list of cameras, got {type(entries).__name__}")

        cameras = []
        for index, entry in enumerate(entries):
            if not isinstance(entry, dict):
                raise ValueError(f"Camera entry {index} must be a mapping, got {entry!r}")
            camera_data = entry.get('camera') or {}
            if not isinstance(camera_data, dict):
                raise ValueError(f"Camera {index} must be a mapping, got {camera_data!r}")
            cameras.append((Camera.from_dict(camera_data), entry.get('height_offset', 0.0)))

        pivot = cls(
            pitch=data.get('pitch', 0.0),
            yaw=data.get('yaw', 0.0),
            cameras=cameras,
        )
        logger.debug(f"Camera pivot with {pivot.num_cameras} camera(s): "
                     f"pitch={pivot.pitch}, yaw={pivot.yaw}")
        return pivot
