"""
Command-line interface for coordinate conversions.

Usage:
    gu-coordinates project config.yaml --pivot head --camera 0 --direction 10 --distance 150
    gu-coordinates locate config.yaml --pivot head --camera 0 --x 960 --y 700
"""

import argparse
import logging
import sys

from .config import Config
from .ground import RelativeCoordinate
from .image import CameraCoordinate
from .projection import CameraProjector


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        'config',
        type=str,
        help='Path to YAML configuration file'
    )
    parser.add_argument(
        '--pivot', '-p',
        type=str,
        required=True,
        help='Name of the camera pivot in the configuration'
    )
    parser.add_argument(
        '--camera', '-c',
        type=int,
        default=0,
        help='Index of the camera on the pivot (default: 0)'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose output'
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Convert between ground-plane and camera image coordinates',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
    # Where does a target 1.5m away, 10 degrees to the left appear?
    gu-coordinates project robot.yaml --pivot head --direction 10 --distance 150

    # Force the result onto the image edge when out of frame
    gu-coordinates project robot.yaml --pivot head --direction 80 --distance 150 --clamp

    # Where on the ground is the object at pixel (960, 700)?
    gu-coordinates locate robot.yaml --pivot head --x 960 --y 700
'''
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    project = subparsers.add_parser('project', help='Place a ground target in an image')
    _add_common_arguments(project)
    project.add_argument('--direction', type=float, required=True,
                         help='Direction to the target in degrees (positive left)')
    project.add_argument('--distance', type=float, required=True,
                         help='Distance to the target in centimetres')
    project.add_argument('--clamp', action='store_true',
                         help='Move out of frame targets onto the image edge')

    locate = subparsers.add_parser('locate', help='Locate an image pixel on the ground')
    _add_common_arguments(locate)
    locate.add_argument('--x', type=int, required=True,
                        help='Pixel column, 0 is the left edge')
    locate.add_argument('--y', type=int, required=True,
                        help='Pixel row, 0 is the top edge')

    return parser


def _project(args: argparse.Namespace, config: Config) -> int:
    projector = CameraProjector(config.pivot(args.pivot), args.camera)
    target = RelativeCoordinate(direction=args.direction, distance=args.distance)

    if args.clamp:
        percent = projector.clamped_percent_coordinate(target)
    else:
        percent = projector.percent_coordinate(target)
    pixel = percent.pixel_coordinate(config.resolution.width, config.resolution.height)
    camera = pixel.camera_coordinate()

    print(f"Percent:  ({percent.x:.4f}, {percent.y:.4f})")
    print(f"Pixel:    ({pixel.x}, {pixel.y})")
    print(f"Camera:   ({camera.x}, {camera.y}) in {camera.res_width}x{camera.res_height}")
    if not percent.in_bounds:
        logging.getLogger(__name__).warning("Target is outside the camera's field of view")
    return 0


def _locate(args: argparse.Namespace, config: Config) -> int:
    projector = CameraProjector(config.pivot(args.pivot), args.camera)
    camera = CameraCoordinate(
        x=args.x,
        y=args.y,
        res_width=config.resolution.width,
        res_height=config.resolution.height,
    )
    if not camera.in_bounds:
        raise ValueError(
            f"Pixel ({args.x}, {args.y}) is outside the "
            f"{camera.res_width}x{camera.res_height} image"
        )

    relative = projector.relative_coordinate(camera.percent_coordinate())
    cartesian = relative.cartesian_coordinate()

    print(f"Relative:  direction {relative.direction:.3f} deg, distance {relative.distance:.3f} cm")
    print(f"Cartesian: ({cartesian.x:.3f}, {cartesian.y:.3f}) cm")
    return 0


def main(argv=None) -> int:
    """Main entry point for CLI."""
    args = build_parser().parse_args(argv)

    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        config = Config.from_yaml(args.config)
        if args.command == 'project':
            return _project(args, config)
        return _locate(args, config)

    except FileNotFoundError as e:
        logger.error(f"File not found: {e}")
        return 1
    except (KeyError, IndexError) as e:
        logger.error(f"Configuration error: {e}")
        return 1
    except ValueError as e:
        logger.error(f"Invalid input: {e}")
        return 1
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
