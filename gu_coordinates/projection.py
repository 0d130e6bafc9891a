"""
Projection between the ground plane and a camera image.

Implements a pinhole-like camera observing a flat ground plane. Angular
offsets from the optical axis are mapped linearly onto the image using the
camera's field of view.

Coordinate System:
    - Ground: +x forward, +y left, direction positive to the left
    - Image: percent coordinates, +x right, +y up, (0, 0) on the optical axis

Projection Model (ground -> image):
    1. Camera ground position: c = (o*cos(Y), o*sin(Y))
    2. Horizontal distance and bearing from the camera: r_c, b
    3. Azimuth from the optical axis: a = b - Y
    4. Camera height above ground: H = h + height_offset
    5. Depression angle to the target: e = atan2(H, r_c)
    6. Tilt of the optical axis: t = P + V
    7. Percent: x = -a / (hFov/2), y = (t - e) / (vFov/2)

where o is the camera center offset, Y/P the pivot yaw/pitch and V the
camera's vertical direction. The inverse solves step 7 for a and e, then
r_c = H / tan(e). Points on or above the horizon are reported at
`MAX_DISTANCE`.
"""

import math
import numpy as np
from typing import Tuple
import logging

from .camera import CameraPivot, InvalidCameraError
from .ground import CartesianCoordinate, RelativeCoordinate
from .image import PercentCoordinate
from .units import MAX_DISTANCE, cap_distance, normalise_angle, normalise_angles

logger = logging.getLogger(__name__)


class CameraProjector:
    """
    Projection model for a single camera on a camera pivot.

    Example usage:
        projector = CameraProjector(pivot, camera=0)
        percent = projector.percent_coordinate(RelativeCoordinate(10, 150))
        relative = projector.relative_coordinate(percent)
    """

    def __init__(self, pivot: CameraPivot, camera: int):
        """
        Initialize the projector for camera `camera` on `pivot`.

        Args:
            pivot: Pivot the camera is attached to
            camera: Index of the camera within `pivot.cameras`

        Raises:
            CameraIndexError: `camera` does not reference a camera on `pivot`
            InvalidCameraError: The camera has no field of view
        """
        cam, height_offset = pivot.mount(camera)
        if cam.h_fov <= 0 or cam.v_fov <= 0:
            raise InvalidCameraError(
                f"Camera {camera} needs a positive field of view for projection: "
                f"h_fov={cam.h_fov}, v_fov={cam.v_fov}"
            )

        self.pivot = pivot
        self.camera = cam
        self.index = camera

        self.height = cam.height + height_offset
        self.tilt = pivot.pitch + cam.v_direction
        self.yaw = pivot.yaw
        self.half_h_fov = cam.h_fov / 2.0
        self.half_v_fov = cam.v_fov / 2.0

        # Camera position on the ground plane relative to the pivot center
        yaw_rad = np.deg2rad(self.yaw)
        self.offset_x = cam.center_offset * np.cos(yaw_rad)
        self.offset_y = cam.center_offset * np.sin(yaw_rad)

        logger.debug(f"Projector for camera {camera}: height={self.height}, "
                     f"tilt={self.tilt}, yaw={self.yaw}")

    # Ground -> image

    def _angular_offsets(self, direction: float, distance: float) -> Tuple[float, float]:
        """Return (azimuth, elevation) of a ground target as seen from the camera."""
        phi = np.deg2rad(direction)
        dx = distance * np.cos(phi) - self.offset_x
        dy = distance * np.sin(phi) - self.offset_y

        ground_distance = float(np.hypot(dx, dy))
        if ground_distance == 0.0:
            bearing = self.yaw
        else:
            bearing = math.degrees(np.arctan2(dy, dx))

        azimuth = normalise_angle(bearing - self.yaw)
        elevation = math.degrees(np.arctan2(self.height, ground_distance))
        return azimuth, elevation

    def percent_coordinate(self, coord: RelativeCoordinate) -> PercentCoordinate:
        """
        Project a ground target into the image.

        Args:
            coord: Target relative to the pivot's center point

        Returns:
            The target's position in the image. Components outside [-1, 1]
            mean the target is outside the camera's field of view.
        """
        azimuth, elevation = self._angular_offsets(coord.direction, coord.distance)
        return PercentCoordinate(
            x=-azimuth / self.half_h_fov,
            y=(self.tilt - elevation) / self.half_v_fov,
        )

    def clamped_percent_coordinate(self, coord: RelativeCoordinate) -> PercentCoordinate:
        """
        Project a ground target into the image, keeping it inside the image.

        Each component is clipped into [-1, 1] independently, so an out of
        frame target is placed on the nearest edge of the image.
        """
        return self.percent_coordinate(coord).clamped()

    def percent_coordinates_batch(
        self,
        directions: np.ndarray,
        distances: np.ndarray,
        clamp: bool = False,
    ) -> Tuple[np.ndarray, np.ndarray]:
        """
        Project multiple ground targets into the image.

        Args:
            directions: N-element array of directions in degrees
            distances: N-element array of distances in centimetres
            clamp: Whether to clip the results into [-1, 1]

        Returns:
            Tuple of (x, y) N-element percent arrays
        """
        phi = np.deg2rad(np.asarray(directions, dtype=np.float64))
        distances = np.asarray(distances, dtype=np.float64)
        if not (np.all(np.isfinite(phi)) and np.all(np.isfinite(distances))):
            raise ValueError("directions and distances must be finite")
        if np.any(distances < 0):
            raise ValueError("distances must be non-negative")

        dx = distances * np.cos(phi) - self.offset_x
        dy = distances * np.sin(phi) - self.offset_y
        ground_distance = np.hypot(dx, dy)

        bearing = np.where(ground_distance == 0.0, self.yaw, np.rad2deg(np.arctan2(dy, dx)))
        azimuth = normalise_angles(bearing - self.yaw)
        elevation = np.rad2deg(np.arctan2(self.height, ground_distance))

        x = -azimuth / self.half_h_fov
        y = (self.tilt - elevation) / self.half_v_fov
        if clamp:
            x = np.clip(x, -1.0, 1.0)
            y = np.clip(y, -1.0, 1.0)
        return x, y

    # Image -> ground

    def _ground_distance(self, elevation: float) -> float:
        """Horizontal distance from the camera to the ground at `elevation`, signed."""
        if self.height <= 0 or not 0.0 < elevation < 180.0:
            return MAX_DISTANCE
        e = np.deg2rad(elevation)
        return float(self.height * np.cos(e) / np.sin(e))

    def relative_coordinate(self, coord: PercentCoordinate) -> RelativeCoordinate:
        """
        Locate the ground point shown at `coord`.

        Args:
            coord: Point within the image

        Returns:
            The point relative to the pivot's center point. When the point
            is on or above the horizon the distance is `MAX_DISTANCE`.
        """
        azimuth = -coord.x * self.half_h_fov
        elevation = self.tilt - coord.y * self.half_v_fov
        bearing = azimuth + self.yaw

        ground_distance = self._ground_distance(elevation)
        if ground_distance >= MAX_DISTANCE:
            logger.debug(f"Elevation {elevation} does not intersect the ground, "
                         f"using maximum distance")
            return RelativeCoordinate(direction=bearing, distance=MAX_DISTANCE)
        if ground_distance < 0:
            # Looking past vertical, the point is behind the camera
            bearing += 180.0
            ground_distance = -ground_distance

        b = np.deg2rad(bearing)
        target = CartesianCoordinate(
            x=float(self.offset_x + ground_distance * np.cos(b)),
            y=float(self.offset_y + ground_distance * np.sin(b)),
        )
        relative = target.relative_coordinate()
        return RelativeCoordinate(
            direction=relative.direction,
            distance=cap_distance(relative.distance),
        )

    def relative_coordinates_batch(
        self,
        xs: np.ndarray,
        ys: np.ndarray,
    ) -> Tuple[np.ndarray, np.ndarray]:
        """
        Locate multiple image points on the ground.

        Args:
            xs: N-element array of percent x values
            ys: N-element array of percent y values

        Returns:
            Tuple of (directions, distances) N-element arrays
        """
        xs = np.asarray(xs, dtype=np.float64)
        ys = np.asarray(ys, dtype=np.float64)
        if not (np.all(np.isfinite(xs)) and np.all(np.isfinite(ys))):
            raise ValueError("percent coordinates must be finite")

        bearing = -xs * self.half_h_fov + self.yaw
        elevation = self.tilt - ys * self.half_v_fov

        hits = (elevation > 0.0) & (elevation < 180.0) & (self.height > 0)
        e = np.deg2rad(np.where(hits, elevation, 90.0))
        ground_distance = self.height * np.cos(e) / np.sin(e)

        behind = hits & (ground_distance < 0)
        bearing = np.where(behind, bearing + 180.0, bearing)
        ground_distance = np.abs(ground_distance)

        b = np.deg2rad(bearing)
        tx = self.offset_x + ground_distance * np.cos(b)
        ty = self.offset_y + ground_distance * np.sin(b)

        directions = np.where(hits, np.rad2deg(np.arctan2(ty, tx)), bearing)
        distances = np.where(hits, np.minimum(np.hypot(tx, ty), MAX_DISTANCE), MAX_DISTANCE)
        return normalise_angles(directions), distances
