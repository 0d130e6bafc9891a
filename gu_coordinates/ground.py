"""
Ground-plane coordinates.

    - RelativeCoordinate: polar (direction, distance) from a source point
    - CartesianCoordinate: (x, y) from a source point facing 0 degrees
    - FieldCoordinate: (x, y) position plus the heading at that position

Coordinate System:
    - +x straight ahead, +y to the left (counter-clockwise angles)
    - Direction 0 is straight ahead, positive directions are to the left
    - Distances in centimetres, angles in degrees

The relative coordinate system viewed from above:

                      0 deg
                        |
                        |
        90 deg ---------+--------- -90 deg
                        |
                        |
                    +/-180 deg
"""

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Iterable, Tuple
import logging
import numpy as np

from .units import normalise_angle, require_finite

if TYPE_CHECKING:
    from .camera import CameraPivot
    from .image import CameraCoordinate, PercentCoordinate, PixelCoordinate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CartesianCoordinate:
    """
    A position on the ground plane.

    The origin is the source point, facing 0 degrees along +x.

    Attributes:
        x: Forward offset in centimetres
        y: Left offset in centimetres
    """
    x: float = 0.0
    y: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, 'x', require_finite('x', self.x))
        object.__setattr__(self, 'y', require_finite('y', self.y))

    def relative_coordinate(self) -> "RelativeCoordinate":
        """Convert to polar form from the origin."""
        direction = math.degrees(np.arctan2(self.y, self.x))
        distance = float(np.hypot(self.x, self.y))
        return RelativeCoordinate(direction=direction, distance=distance)

    def relative_coordinate_to(self, coord: "CartesianCoordinate") -> "RelativeCoordinate":
        """
        Calculate the relative coordinate from `self` to `coord`.

        Both coordinates must share the same origin and heading. The result
        is a translation only, no rotation is applied.
        """
        return CartesianCoordinate(coord.x - self.x, coord.y - self.y).relative_coordinate()

    def field_coordinate(self, heading: float) -> "FieldCoordinate":
        """Attach `heading` to this position."""
        return FieldCoordinate(position=self, heading=heading)

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def as_array(self) -> np.ndarray:
        """Return coordinates as numpy array."""
        return np.array([self.x, self.y])

    @classmethod
    def from_tuple(cls, values: Iterable[float]) -> "CartesianCoordinate":
        return cls(*values)

    def to_dict(self) -> Dict[str, float]:
        return {'x': self.x, 'y': self.y}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CartesianCoordinate":
        return cls(x=data['x'], y=data['y'])


@dataclass(frozen=True)
class FieldCoordinate:
    """
    An absolute position within the shared field frame.

    Attributes:
        position: Position on the field
        heading: Orientation at `position` in degrees, normalised to (-180, 180]
    """
    position: CartesianCoordinate = field(default_factory=CartesianCoordinate)
    heading: float = 0.0

    def __post_init__(self):
        object.__setattr__(
            self, 'heading', normalise_angle(require_finite('heading', self.heading))
        )

    @property
    def cartesian_coordinate(self) -> CartesianCoordinate:
        return self.position

    def relative_coordinate_to(self, coord: CartesianCoordinate) -> "RelativeCoordinate":
        """
        Calculate where `coord` lies relative to this position and heading.

        Unlike `CartesianCoordinate.relative_coordinate_to`, the result is
        measured from the heading of `self` rather than from 0 degrees.
        """
        relative = self.position.relative_coordinate_to(coord)
        return RelativeCoordinate(
            direction=relative.direction - self.heading,
            distance=relative.distance,
        )

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.position.x, self.position.y, self.heading)

    @classmethod
    def from_tuple(cls, values: Iterable[float]) -> "FieldCoordinate":
        x, y, heading = values
        return cls(position=CartesianCoordinate(x, y), heading=heading)

    def to_dict(self) -> Dict[str, Any]:
        return {'position': self.position.to_dict(), 'heading': self.heading}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FieldCoordinate":
        return cls(
            position=CartesianCoordinate.from_dict(data['position']),
            heading=data['heading'],
        )


@dataclass(frozen=True)
class RelativeCoordinate:
    """
    Polar coordinate from a source to a target.

    Attributes:
        direction: Heading towards the target in degrees. Positive values
            are on the left, negative on the right, zero straight ahead.
            Normalised to (-180, 180].
        distance: Distance to the target in centimetres (non-negative)
    """
    direction: float = 0.0
    distance: float = 0.0

    def __post_init__(self):
        direction = require_finite('direction', self.direction)
        distance = require_finite('distance', self.distance)
        if distance < 0:
            raise ValueError(f"distance must be non-negative, got {distance}")
        object.__setattr__(self, 'direction', normalise_angle(direction))
        object.__setattr__(self, 'distance', distance)

    def __add__(self, other):
        """Component-wise sum. `RelativeCoordinate()` is the zero."""
        if not isinstance(other, RelativeCoordinate):
            return NotImplemented
        return RelativeCoordinate(
            direction=self.direction + other.direction,
            distance=self.distance + other.distance,
        )

    def __sub__(self, other):
        """
        Component-wise difference.

        Raises:
            ValueError: The resulting distance would be negative
        """
        if not isinstance(other, RelativeCoordinate):
            return NotImplemented
        return RelativeCoordinate(
            direction=self.direction - other.direction,
            distance=self.distance - other.distance,
        )

    # Ground plane

    def cartesian_coordinate(self) -> CartesianCoordinate:
        """Convert to cartesian form, assuming the source is (0, 0) facing 0 degrees."""
        phi = np.deg2rad(self.direction)
        return CartesianCoordinate(
            x=float(self.distance * np.cos(phi)),
            y=float(self.distance * np.sin(phi)),
        )

    def field_coordinate(self, heading: float) -> FieldCoordinate:
        """
        Convert to a `FieldCoordinate` with the given heading.

        The heading is attached as is, the position is not rotated by it.
        """
        return self.cartesian_coordinate().field_coordinate(heading)

    def relative_coordinate_to(self, coord: "RelativeCoordinate") -> "RelativeCoordinate":
        """
        Calculate the trajectory from this target to another.

        Given A (`source -> target`, i.e. `self`) and B (`source -> coord`),
        returns C (`target -> coord`). For example A = (0 deg, 30 cm) and
        B = (-45 deg, 60 cm) give C = (-74 deg, 44 cm).
        """
        return self.cartesian_coordinate().relative_coordinate_to(coord.cartesian_coordinate())

    # Image placement, see `projection.CameraProjector`

    def percent_coordinate(self, pivot: "CameraPivot", camera: int) -> "PercentCoordinate":
        """
        Place this target within the image of camera `camera` on `pivot`.

        The result is not bounds checked; values outside [-1, 1] mean the
        camera cannot see the target. Use `clamped_percent_coordinate` to
        force the result into the image.
        """
        from .projection import CameraProjector
        return CameraProjector(pivot, camera).percent_coordinate(self)

    def pixel_coordinate(
        self, pivot: "CameraPivot", camera: int, res_width: int, res_height: int
    ) -> "PixelCoordinate":
        return self.percent_coordinate(pivot, camera).pixel_coordinate(res_width, res_height)

    def camera_coordinate(
        self, pivot: "CameraPivot", camera: int, res_width: int, res_height: int
    ) -> "CameraCoordinate":
        return self.pixel_coordinate(pivot, camera, res_width, res_height).camera_coordinate()

    def clamped_percent_coordinate(self, pivot: "CameraPivot", camera: int) -> "PercentCoordinate":
        """Like `percent_coordinate` but moved onto the image edge when out of frame."""
        from .projection import CameraProjector
        return CameraProjector(pivot, camera).clamped_percent_coordinate(self)

    def clamped_pixel_coordinate(
        self, pivot: "CameraPivot", camera: int, res_width: int, res_height: int
    ) -> "PixelCoordinate":
        return self.clamped_percent_coordinate(pivot, camera).pixel_coordinate(res_width, res_height)

    def clamped_camera_coordinate(
        self, pivot: "CameraPivot", camera: int, res_width: int, res_height: int
    ) -> "CameraCoordinate":
        return self.clamped_pixel_coordinate(pivot, camera, res_width, res_height).camera_coordinate()

    # Serialisation

    def as_tuple(self) -> Tuple[float, float]:
        return (self.direction, self.distance)

    @classmethod
    def from_tuple(cls, values: Iterable[float]) -> "RelativeCoordinate":
        return cls(*values)

    def to_dict(self) -> Dict[str, float]:
        return {'direction': self.direction, 'distance': self.distance}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RelativeCoordinate":
        return cls(direction=data['direction'], distance=data['distance'])
