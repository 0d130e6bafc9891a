"""
Robot Vision Coordinate Conversions

A Python package to convert between the coordinate spaces of a mobile
robot's vision pipeline, and to project flat-ground targets into the
images of cameras mounted on a pan/tilt pivot.

Coordinate System Chain:
    Field <-> Cartesian <-> Relative <-> Percent <-> Pixel <-> Camera

Conventions:
    - Angles in degrees, positive to the left / towards the ground
    - Distances in centimetres
    - Percent and pixel coordinates are centered, y up
    - Camera coordinates have their origin top-left, y down
"""

from .units import MAX_DISTANCE, normalise_angle
from .camera import (
    CAMERA_PIVOT_NUM_CAMERAS,
    Camera,
    CameraIndexError,
    CameraPivot,
    CameraPivotCapacityError,
    InvalidCameraError,
)
from .ground import CartesianCoordinate, FieldCoordinate, RelativeCoordinate
from .image import CameraCoordinate, PercentCoordinate, PixelCoordinate
from .projection import CameraProjector
from .config import Config, Resolution

__version__ = "1.0.0"
__all__ = [
    "MAX_DISTANCE",
    "normalise_angle",
    "CAMERA_PIVOT_NUM_CAMERAS",
    "Camera",
    "CameraIndexError",
    "CameraPivot",
    "CameraPivotCapacityError",
    "InvalidCameraError",
    "CartesianCoordinate",
    "FieldCoordinate",
    "RelativeCoordinate",
    "CameraCoordinate",
    "PercentCoordinate",
    "PixelCoordinate",
    "CameraProjector",
    "Config",
    "Resolution",
]
