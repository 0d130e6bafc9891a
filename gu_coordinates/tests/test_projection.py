"""
Tests for the ground to image projection.

These tests verify the correctness of:
    - Forward projection of ground targets into percent coordinates
    - Inverse projection of image points onto the ground
    - Clamping of out of frame targets
    - Degenerate geometry (horizon, behind the camera)
    - Batch projection against the scalar path
"""

import math

import pytest
import numpy as np
from numpy.testing import assert_allclose

from gu_coordinates.camera import (
    Camera,
    CameraIndexError,
    CameraPivot,
    InvalidCameraError,
)
from gu_coordinates.ground import RelativeCoordinate
from gu_coordinates.image import PercentCoordinate
from gu_coordinates.projection import CameraProjector
from gu_coordinates.units import MAX_DISTANCE


@pytest.fixture
def level_pivot():
    """Level camera 50cm above the ground with a 60x40 degree field of view."""
    camera = Camera(height=50, h_fov=60, v_fov=40)
    return CameraPivot(pitch=0, yaw=0, cameras=[(camera, 0.0)])


@pytest.fixture
def tilted_pivot():
    """Camera looking down at the ground in front of the robot."""
    camera = Camera(height=50, v_direction=20, h_fov=60, v_fov=40)
    return CameraPivot(pitch=0, yaw=0, cameras=[(camera, 0.0)])


@pytest.fixture
def mounted_pivot():
    """Yawed, pitched pivot with an offset camera."""
    camera = Camera(height=40, center_offset=3, v_direction=20, h_fov=60.97, v_fov=47.64)
    return CameraPivot(pitch=10, yaw=15, cameras=[(camera, 5.0)])


class TestForwardProjection:
    """Tests for projecting ground targets into the image."""

    def test_known_elevation(self, level_pivot):
        """A target 100cm ahead of a 50cm camera is atan2(50, 100) below the axis."""
        result = RelativeCoordinate(direction=0, distance=100).percent_coordinate(level_pivot, 0)

        elevation = math.degrees(math.atan2(50, 100))
        assert elevation == pytest.approx(26.565, abs=1e-3)
        assert result.x == pytest.approx(0, abs=1e-12)
        assert result.y == pytest.approx(-elevation / 20)

    def test_out_of_frame_is_not_an_error(self, level_pivot):
        result = RelativeCoordinate(direction=0, distance=100).percent_coordinate(level_pivot, 0)
        assert not result.in_bounds

    def test_left_target_appears_left(self, level_pivot):
        """Positive directions land in the left half of the image."""
        result = RelativeCoordinate(direction=15, distance=500).percent_coordinate(level_pivot, 0)
        assert result.x == pytest.approx(-0.5)

    def test_pivot_yaw(self):
        """A target along the pivot's yaw is in the middle of the image."""
        pivot = CameraPivot(yaw=20, cameras=[(Camera(height=50, h_fov=60, v_fov=40), 0.0)])
        result = RelativeCoordinate(direction=20, distance=300).percent_coordinate(pivot, 0)
        assert result.x == pytest.approx(0, abs=1e-9)

    def test_pivot_pitch_adds_to_camera_tilt(self):
        pitched = CameraPivot(pitch=12, cameras=[(Camera(height=50, v_direction=8, h_fov=60, v_fov=40), 0.0)])
        tilted = CameraPivot(cameras=[(Camera(height=50, v_direction=20, h_fov=60, v_fov=40), 0.0)])
        target = RelativeCoordinate(direction=0, distance=200)

        a = target.percent_coordinate(pitched, 0)
        b = target.percent_coordinate(tilted, 0)
        assert a.as_tuple() == pytest.approx(b.as_tuple())

    def test_height_offset_adds_to_height(self):
        offset = CameraPivot(cameras=[(Camera(height=40, h_fov=60, v_fov=40), 10.0)])
        direct = CameraPivot(cameras=[(Camera(height=50, h_fov=60, v_fov=40), 0.0)])
        target = RelativeCoordinate(direction=-5, distance=150)

        a = target.percent_coordinate(offset, 0)
        b = target.percent_coordinate(direct, 0)
        assert a.as_tuple() == pytest.approx(b.as_tuple())

    def test_center_offset_shortens_distance(self):
        """A camera 10cm in front of the pivot sees a 110cm target at 100cm."""
        offset = CameraPivot(cameras=[(Camera(height=50, center_offset=10, h_fov=60, v_fov=40), 0.0)])
        result = RelativeCoordinate(direction=0, distance=110).percent_coordinate(offset, 0)

        elevation = math.degrees(math.atan2(50, 100))
        assert result.y == pytest.approx(-elevation / 20)

    def test_zero_distance(self, level_pivot):
        """A target at the robot's own position is straight down."""
        result = RelativeCoordinate(direction=0, distance=0).percent_coordinate(level_pivot, 0)
        assert result.x == pytest.approx(0)
        assert result.y == pytest.approx(-90 / 20)

    def test_monotonic_in_distance(self, tilted_pivot):
        """Further targets appear closer to the top of the frame."""
        projector = CameraProjector(tilted_pivot, 0)
        distances = np.linspace(10, 5000, 50)

        _, ys = projector.percent_coordinates_batch(np.zeros_like(distances), distances)

        assert np.all(np.diff(ys) > 0)


class TestInverseProjection:
    """Tests for locating image points on the ground."""

    def test_known_elevation_round_trip(self, level_pivot):
        target = RelativeCoordinate(direction=0, distance=100)
        percent = target.percent_coordinate(level_pivot, 0)

        result = percent.relative_coordinate(level_pivot, 0)

        assert result.direction == pytest.approx(0, abs=1e-9)
        assert result.distance == pytest.approx(100)

    def test_round_trip_with_mounting(self, mounted_pivot):
        """Pitch, yaw, height offset and center offset invert exactly."""
        projector = CameraProjector(mounted_pivot, 0)
        for direction in [-20.0, 0.0, 10.0, 35.0]:
            for distance in [20.0, 80.0, 300.0, 1000.0]:
                target = RelativeCoordinate(direction=direction, distance=distance)

                result = projector.relative_coordinate(projector.percent_coordinate(target))

                assert result.direction == pytest.approx(direction, abs=1e-6)
                assert result.distance == pytest.approx(distance, rel=1e-9)

    def test_horizon_is_max_distance(self, level_pivot):
        """The horizon never intersects the ground."""
        result = PercentCoordinate(0, 0).relative_coordinate(level_pivot, 0)
        assert result.distance == MAX_DISTANCE

    def test_above_horizon_is_max_distance(self, level_pivot):
        result = PercentCoordinate(0.2, 0.5).relative_coordinate(level_pivot, 0)

        assert result.distance == MAX_DISTANCE
        assert not math.isnan(result.direction)
        assert result.direction == pytest.approx(-6)

    def test_past_vertical_is_behind(self):
        """Looking further down than vertical sees the ground behind the camera."""
        camera = Camera(height=50, v_direction=80, h_fov=60, v_fov=40)
        pivot = CameraPivot(cameras=[(camera, 0.0)])

        result = PercentCoordinate(0, -1).relative_coordinate(pivot, 0)

        assert abs(result.direction) == pytest.approx(180, abs=1e-9)
        assert result.distance == pytest.approx(50 / math.tan(math.radians(80)))

    def test_camera_below_ground(self):
        pivot = CameraPivot(cameras=[(Camera(height=0, v_direction=30, h_fov=60, v_fov=40), 0.0)])
        result = PercentCoordinate(0, 0).relative_coordinate(pivot, 0)
        assert result.distance == MAX_DISTANCE

    def test_full_pixel_chain(self, tilted_pivot):
        """Ground -> camera pixel -> ground is accurate to pixel quantisation."""
        target = RelativeCoordinate(direction=5, distance=300)

        pixel = target.camera_coordinate(tilted_pivot, 0, 1920, 1080)
        result = pixel.relative_coordinate(tilted_pivot, 0)

        assert pixel.in_bounds
        assert result.direction == pytest.approx(5, abs=0.1)
        assert result.distance == pytest.approx(300, abs=5)


class TestClampedProjection:
    """Tests for projections forced into the image."""

    def test_clamped_keeps_sign(self, level_pivot):
        target = RelativeCoordinate(direction=80, distance=10)
        raw = target.percent_coordinate(level_pivot, 0)
        clamped = target.clamped_percent_coordinate(level_pivot, 0)

        assert raw.x < -1 and raw.y < -1
        assert clamped == PercentCoordinate(-1.0, -1.0)

    def test_in_frame_unchanged(self, tilted_pivot):
        target = RelativeCoordinate(direction=5, distance=300)
        assert target.clamped_percent_coordinate(tilted_pivot, 0) == target.percent_coordinate(tilted_pivot, 0)

    def test_clamped_camera_coordinate_always_in_image(self, mounted_pivot):
        for direction in np.linspace(-180, 180, 25):
            for distance in [0.0, 5.0, 50.0, 500.0, 1e6]:
                target = RelativeCoordinate(direction=direction, distance=distance)

                camera = target.clamped_camera_coordinate(mounted_pivot, 0, 640, 480)

                assert camera.in_bounds

    def test_clamped_pixel_coordinate(self, level_pivot):
        target = RelativeCoordinate(direction=-80, distance=10)
        pixel = target.clamped_pixel_coordinate(level_pivot, 0, 640, 480)
        assert (pixel.x, pixel.y) == (pixel.x_upper_bound, pixel.y_lower_bound)


class TestCameraSelection:
    """Tests for selecting the projecting camera."""

    def test_invalid_index(self, level_pivot):
        with pytest.raises(CameraIndexError):
            CameraProjector(level_pivot, 1)
        with pytest.raises(CameraIndexError):
            RelativeCoordinate(direction=0, distance=100).percent_coordinate(level_pivot, 3)
        with pytest.raises(CameraIndexError):
            PercentCoordinate(0, 0).relative_coordinate(level_pivot, -1)

    def test_zero_fov_rejected(self):
        pivot = CameraPivot(cameras=[(Camera(height=50), 0.0)])
        with pytest.raises(InvalidCameraError):
            CameraProjector(pivot, 0)

    def test_second_camera(self, level_pivot):
        top = Camera(height=50, h_fov=60, v_fov=40)
        bottom = Camera(height=45, v_direction=40, h_fov=60, v_fov=40)
        pivot = CameraPivot(cameras=[(top, 0.0), (bottom, 0.0)])
        target = RelativeCoordinate(direction=0, distance=50)

        assert target.percent_coordinate(pivot, 0) == target.percent_coordinate(level_pivot, 0)
        assert target.percent_coordinate(pivot, 1) != target.percent_coordinate(pivot, 0)


class TestBatchProjection:
    """Tests for numpy batch projection."""

    def test_forward_matches_scalar(self, mounted_pivot):
        projector = CameraProjector(mounted_pivot, 0)
        directions = np.array([-170.0, -30.0, 0.0, 12.5, 90.0])
        distances = np.array([0.0, 25.0, 100.0, 400.0, 2000.0])

        xs, ys = projector.percent_coordinates_batch(directions, distances)

        for direction, distance, x, y in zip(directions, distances, xs, ys):
            expected = projector.percent_coordinate(RelativeCoordinate(direction, distance))
            assert_allclose((x, y), expected.as_tuple(), atol=1e-9)

    def test_forward_clamp(self, level_pivot):
        projector = CameraProjector(level_pivot, 0)
        xs, ys = projector.percent_coordinates_batch([80.0, -80.0], [10.0, 10.0], clamp=True)
        assert_allclose(xs, [-1.0, 1.0])
        assert_allclose(ys, [-1.0, -1.0])

    def test_negative_distance_rejected(self, level_pivot):
        with pytest.raises(ValueError):
            CameraProjector(level_pivot, 0).percent_coordinates_batch([0.0], [-1.0])

    @pytest.mark.parametrize("directions,distances", [
        ([0.0, float('nan')], [100.0, 100.0]),
        ([0.0, 10.0], [float('inf'), 100.0]),
    ])
    def test_non_finite_rejected(self, level_pivot, directions, distances):
        with pytest.raises(ValueError):
            CameraProjector(level_pivot, 0).percent_coordinates_batch(directions, distances)

    def test_inverse_matches_scalar(self, mounted_pivot):
        projector = CameraProjector(mounted_pivot, 0)
        xs = np.array([-1.0, -0.3, 0.0, 0.5, 1.0, 0.0])
        ys = np.array([-1.0, -0.5, 0.0, 0.2, 0.9, 1.0])

        directions, distances = projector.relative_coordinates_batch(xs, ys)

        for x, y, direction, distance in zip(xs, ys, directions, distances):
            expected = projector.relative_coordinate(PercentCoordinate(x, y))
            assert direction == pytest.approx(expected.direction, abs=1e-9)
            assert distance == pytest.approx(expected.distance, rel=1e-9)

    def test_inverse_never_nan(self, level_pivot):
        projector = CameraProjector(level_pivot, 0)
        directions, distances = projector.relative_coordinates_batch(
            np.linspace(-2, 2, 9), np.linspace(-2, 2, 9)
        )
        assert np.all(np.isfinite(directions))
        assert np.all((distances >= 0) & (distances <= MAX_DISTANCE))
