"""
Scene configuration loading for the simulator.
"""

from typing import Any, Dict, Optional
import json
import logging
import os
import numpy as np
import yaml
from .animation import Animator
from .body import Body
from .collection import BodyCollection

logger = logging.getLogger(__name__)

BODY_KEYS = {'mass', 'position', 'velocity', 'color', 'trail_length',
             'trail_thickness', 'highlight'}

DEFAULT_SCENE: Dict[str, Any] = {
    'bodies': [
        {'position': [91, -44]},
        {'position': [-13, -32]},
        {'position': [26, 45]},
    ],
    'animator': {
        'scale': 1.5,
        'paused': True,
    },
}


def default_scene() -> Dict[str, Any]:
    """Three unit masses at rest, drawn at scale 1.5."""
    return json.loads(json.dumps(DEFAULT_SCENE))


class SceneLoader:
    """Load scenes from JSON/YAML files and build collections from them."""

    @staticmethod
    def load_config(config_path: str) -> Dict[str, Any]:
        """
        Load configuration from file.

        Args:
            config_path: Path to configuration file (.json, .yaml or .yml)

        Returns:
            Configuration dictionary

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If file format is unsupported or the content is not a mapping
        """
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        ext = os.path.splitext(config_path)[1].lower()

        with open(config_path, 'r', encoding='utf-8') as f:
            if ext == '.json':
                config = json.load(f)
            elif ext in ('.yaml', '.yml'):
                config = yaml.safe_load(f)
            else:
                raise ValueError(f"Unsupported config format: {ext}")

        if config is None:
            config = {}
        if not isinstance(config, dict):
            raise ValueError(f"Configuration in {config_path} must be a mapping")

        logger.info(f"Loaded configuration from {config_path}")
        return config

    @staticmethod
    def create_collection_from_config(config: Dict[str, Any],
                                      rng: Optional[np.random.Generator] = None
                                      ) -> BodyCollection:
        """
        Create a body collection from configuration.

        Raises:
            LimitReachedError: If the scene has more than MAX_BODIES bodies
            ValueOutOfRangeError: If a body property is out of bounds
            ValueError: If a body entry lacks a position
        """
        collection = BodyCollection(rng=rng)

        for i, body_config in enumerate(config.get('bodies', [])):
            SceneLoader._create_body_from_config(collection, body_config, i)

        collection.update_meta_info()
        logger.info(f"Created collection of {len(collection)} bodies from configuration")
        return collection

    @staticmethod
    def _create_body_from_config(collection: BodyCollection,
                                 body_config: Dict[str, Any], index: int) -> Body:
        unknown = set(body_config) - BODY_KEYS
        if unknown:
            logger.warning(f"Ignoring unknown keys for body {index}: {sorted(unknown)}")

        if 'position' not in body_config:
            raise ValueError(f"Body {index} has no position")

        x, y = body_config['position']
        vx, vy = body_config.get('velocity', [0.0, 0.0])

        body = collection.add_body_custom(
            float(body_config.get('mass', 1.0)), float(x), float(y),
            float(vx), float(vy)
        )

        if 'color' in body_config:
            body.set_color(body_config['color'])
        if 'trail_length' in body_config:
            body.set_trail_length(body_config['trail_length'])
        if 'trail_thickness' in body_config:
            body.set_trail_thickness(body_config['trail_thickness'])
        body.highlight = bool(body_config.get('highlight', False))

        return body

    @staticmethod
    def apply_animator_config(animator: Animator, config: Dict[str, Any]) -> None:
        """Apply the optional ``animator`` section (speed, scale, paused)."""
        animator_config = config.get('animator', {})

        if 'speed' in animator_config:
            animator.change_speed(animator_config['speed'])
        if 'scale' in animator_config:
            animator.change_scale(animator_config['scale'])
        if 'paused' in animator_config:
            if animator_config['paused']:
                animator.pause()
            else:
                animator.unpause()
