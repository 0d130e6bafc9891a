"""
Image-space coordinates.

    - PercentCoordinate: normalised [-1, 1] position, centered on the image
    - PixelCoordinate: centered pixel position
    - CameraCoordinate: pixel position with the origin in the top-left corner

Coordinate System:
    - Percent and pixel coordinates: x right, y up, (0, 0) in the middle
    - Camera coordinates: x right, y down, (0, 0) top-left

      (0,0)          x       res_width
        * ---------------------->|
        |
      y |
        |
        V
    res_height

For an axis with N pixels the centered pixel range is
    -(N // 2) <= v <= (N - 1) // 2
which maps onto the camera range 0 <= v' < N.
"""

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Iterable, Tuple
import logging

from .units import require_finite, require_integer, require_resolution

if TYPE_CHECKING:
    from .camera import CameraPivot
    from .ground import RelativeCoordinate

logger = logging.getLogger(__name__)


def _percent_to_pixel(value: float, resolution: int) -> int:
    """
    Scale a percent value onto a centered pixel axis.

    Values inside [-1, 1] always land on a pixel inside the image, values
    outside it scale linearly past the edge.
    """
    pixel = math.floor(round(value * resolution / 2.0, 9))
    if -1.0 <= value <= 1.0:
        pixel = min(max(pixel, -(resolution // 2)), (resolution - 1) // 2)
    return pixel


@dataclass(frozen=True)
class PercentCoordinate:
    """
    A point within an image as a fraction of the half-resolution.

    Attributes:
        x: -1 is the left edge, 1 the right edge
        y: -1 is the bottom edge, 1 the top edge

    Values outside [-1, 1] describe a point outside of the image.
    """
    x: float = 0.0
    y: float = 0.0

    # Bounds of a point within the image.
    x_lower_bound = -1.0
    x_upper_bound = 1.0
    y_lower_bound = -1.0
    y_upper_bound = 1.0

    def __post_init__(self):
        object.__setattr__(self, 'x', require_finite('x', self.x))
        object.__setattr__(self, 'y', require_finite('y', self.y))

    @property
    def in_bounds(self) -> bool:
        return (
            self.x_lower_bound <= self.x <= self.x_upper_bound
            and self.y_lower_bound <= self.y <= self.y_upper_bound
        )

    def clamped(self) -> "PercentCoordinate":
        """Return this point moved onto the nearest image edge if it is outside."""
        return PercentCoordinate(
            x=min(max(self.x, self.x_lower_bound), self.x_upper_bound),
            y=min(max(self.y, self.y_lower_bound), self.y_upper_bound),
        )

    def pixel_coordinate(self, res_width: int, res_height: int) -> "PixelCoordinate":
        """Convert to a centered pixel within an image of the given resolution."""
        require_resolution(res_width, res_height)
        return PixelCoordinate(
            x=_percent_to_pixel(self.x, res_width),
            y=_percent_to_pixel(self.y, res_height),
            res_width=res_width,
            res_height=res_height,
        )

    def camera_coordinate(self, res_width: int, res_height: int) -> "CameraCoordinate":
        return self.pixel_coordinate(res_width, res_height).camera_coordinate()

    def relative_coordinate(self, pivot: "CameraPivot", camera: int) -> "RelativeCoordinate":
        """
        Locate the object at this point on the ground.

        Only meaningful when the point shows something on the ground. Points
        on or above the horizon report `units.MAX_DISTANCE`.
        """
        from .projection import CameraProjector
        return CameraProjector(pivot, camera).relative_coordinate(self)

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    @classmethod
    def from_tuple(cls, values: Iterable[float]) -> "PercentCoordinate":
        return cls(*values)

    def to_dict(self) -> Dict[str, float]:
        return {'x': self.x, 'y': self.y}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PercentCoordinate":
        return cls(x=data['x'], y=data['y'])


@dataclass(frozen=True)
class PixelCoordinate:
    """
    A pixel within an image where (0, 0) is the middle of the image.

    Attributes:
        x: Pixel column, increasing to the right
        y: Pixel row, increasing upwards
        res_width: Width of the image resolution, e.g. 1920
        res_height: Height of the image resolution, e.g. 1080
    """
    x: int = 0
    y: int = 0
    res_width: int = 0
    res_height: int = 0

    def __post_init__(self):
        for name in ('x', 'y', 'res_width', 'res_height'):
            object.__setattr__(self, name, require_integer(name, getattr(self, name)))
        if self.res_width < 0 or self.res_height < 0:
            raise ValueError(
                f"Resolution must be non-negative, got {self.res_width}x{self.res_height}"
            )

    @property
    def x_lower_bound(self) -> int:
        return -(self.res_width // 2)

    @property
    def x_upper_bound(self) -> int:
        return (self.res_width - 1) // 2

    @property
    def y_lower_bound(self) -> int:
        return -(self.res_height // 2)

    @property
    def y_upper_bound(self) -> int:
        return (self.res_height - 1) // 2

    def camera_coordinate(self) -> "CameraCoordinate":
        """Move the origin to the top-left corner and flip the vertical axis."""
        return CameraCoordinate(
            x=self.x + self.res_width // 2,
            y=(self.res_height - 1) // 2 - self.y,
            res_width=self.res_width,
            res_height=self.res_height,
        )

    def percent_coordinate(self) -> PercentCoordinate:
        require_resolution(self.res_width, self.res_height)
        return PercentCoordinate(
            x=self.x / (self.res_width / 2.0),
            y=self.y / (self.res_height / 2.0),
        )

    def relative_coordinate(self, pivot: "CameraPivot", camera: int) -> "RelativeCoordinate":
        return self.percent_coordinate().relative_coordinate(pivot, camera)

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return (self.x, self.y, self.res_width, self.res_height)

    @classmethod
    def from_tuple(cls, values: Iterable[int]) -> "PixelCoordinate":
        return cls(*values)

    def to_dict(self) -> Dict[str, int]:
        return {
            'x': self.x,
            'y': self.y,
            'res_width': self.res_width,
            'res_height': self.res_height,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PixelCoordinate":
        return cls(
            x=data['x'],
            y=data['y'],
            res_width=data['res_width'],
            res_height=data['res_height'],
        )


@dataclass(frozen=True)
class CameraCoordinate:
    """
    A pixel within an image where (0, 0) is the top-left corner.

    Attributes:
        x: Pixel column, 0 <= x < res_width
        y: Pixel row, 0 <= y < res_height
        res_width: Width of the image resolution, e.g. 1920
        res_height: Height of the image resolution, e.g. 1080
    """
    x: int = 0
    y: int = 0
    res_width: int = 0
    res_height: int = 0

    def __post_init__(self):
        for name in ('x', 'y', 'res_width', 'res_height'):
            object.__setattr__(self, name, require_integer(name, getattr(self, name)))
        if self.res_width < 0 or self.res_height < 0:
            raise ValueError(
                f"Resolution must be non-negative, got {self.res_width}x{self.res_height}"
            )

    @property
    def x_lower_bound(self) -> int:
        return 0

    @property
    def x_upper_bound(self) -> int:
        return self.res_width - 1

    @property
    def y_lower_bound(self) -> int:
        return 0

    @property
    def y_upper_bound(self) -> int:
        return self.res_height - 1

    @property
    def in_bounds(self) -> bool:
        return (
            self.x_lower_bound <= self.x <= self.x_upper_bound
            and self.y_lower_bound <= self.y <= self.y_upper_bound
        )

    def pixel_coordinate(self) -> PixelCoordinate:
        """Move the origin to the middle of the image, y increasing upwards."""
        return PixelCoordinate(
            x=self.x - self.res_width // 2,
            y=(self.res_height - 1) // 2 - self.y,
            res_width=self.res_width,
            res_height=self.res_height,
        )

    def percent_coordinate(self) -> PercentCoordinate:
        return self.pixel_coordinate().percent_coordinate()

    def relative_coordinate(self, pivot: "CameraPivot", camera: int) -> "RelativeCoordinate":
        """
        Locate the object shown at this pixel on the ground.

        Only use this when the pixel shows something on the ground, otherwise
        the distance is reported as `units.MAX_DISTANCE`.
        """
        return self.percent_coordinate().relative_coordinate(pivot, camera)

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return (self.x, self.y, self.res_width, self.res_height)

    @classmethod
    def from_tuple(cls, values: Iterable[int]) -> "CameraCoordinate":
        return cls(*values)

    def to_dict(self) -> Dict[str, int]:
        return {
            'x': self.x,
            'y': self.y,
            'res_width': self.res_width,
            'res_height': self.res_height,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CameraCoordinate":
        return cls(
            x=data['x'],
            y=data['y'],
            res_width=data['res_width'],
            res_height=data['res_height'],
        )
