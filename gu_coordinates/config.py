"""
Configuration module for camera pivots.

Handles loading and saving of named camera pivots from YAML files.
"""

import yaml
from pathlib import Path
from dataclasses import dataclass, field
from typing import Dict
import logging

from .camera import CameraPivot

logger = logging.getLogger(__name__)


@dataclass
class Resolution:
    """Image resolution in pixels."""
    width: int = 1920
    height: int = 1080


@dataclass
class Config:
    """
    Main configuration class.

    Attributes:
        pivots: Camera pivots keyed by name, e.g. "head"
        resolution: Default resolution of images taken by the cameras
    """
    pivots: Dict[str, CameraPivot] = field(default_factory=dict)
    resolution: Resolution = field(default_factory=Resolution)

    def pivot(self, name: str) -> CameraPivot:
        """Return the pivot called `name`, raising KeyError if unknown."""
        try:
            return self.pivots[name]
        except KeyError:
            known = ', '.join(sorted(self.pivots)) or 'none'
            raise KeyError(f"Unknown camera pivot {name!r} (known: {known})") from None

    @classmethod
    def from_yaml(cls, config_path: str) -> "Config":
        """
        Load configuration from a YAML file.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            Config object with loaded parameters

        Example YAML structure:
            resolution:
              width: 1920
              height: 1080
            pivots:
              head:
                pitch: 0.0
                yaw: 0.0
                cameras:
                  - camera:
                      height: 6.364
                      center_offset: 5.871
                      v_direction: 1.2
                      v_fov: 47.64
                      h_fov: 60.97
                    height_offset: 41.7
        """
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(path, 'r') as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {config_path}: {e}") from e

        logger.info(f"Loading configuration from {config_path}")

        if not isinstance(data, dict):
            raise ValueError(f"Expected a mapping at the top of {config_path}")

        res_data = data.get('resolution') or {}
        if not isinstance(res_data, dict):
            raise ValueError(f"Resolution must be a mapping, got {res_data!r}")
        resolution = Resolution(
            width=int(res_data.get('width', 1920)),
            height=int(res_data.get('height', 1080)),
        )
        if resolution.width <= 0 or resolution.height <= 0:
            raise ValueError(
                f"Resolution must be positive, got {resolution.width}x{resolution.height}"
            )

        pivots = {}
        pivots_data = data.get('pivots') or {}
        if not isinstance(pivots_data, dict):
            raise ValueError(f"Pivots must be a mapping of name to pivot, got {pivots_data!r}")
        for name, pivot_data in pivots_data.items():
            if not isinstance(pivot_data, dict):
                raise ValueError(f"Pivot {name!r} must be a mapping")
            pivots[str(name)] = CameraPivot.from_dict(pivot_data)

        logger.info(f"Loaded {len(pivots)} camera pivot(s)")

        return cls(pivots=pivots, resolution=resolution)

    def to_yaml(self, config_path: str) -> None:
        """Save configuration to a YAML file."""
        data = {
            'resolution': {
                'width': self.resolution.width,
                'height': self.resolution.height,
            },
            'pivots': {
                name: pivot.to_dict() for name, pivot in self.pivots.items()
            },
        }

        with open(config_path, 'w') as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

        logger.info(f"Configuration saved to {config_path}")
