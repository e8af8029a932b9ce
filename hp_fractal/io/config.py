"""
Configuration file handling.

Render settings can come from a YAML or JSON file with a ``render`` section
and optional named ``presets``. Built-in presets are always available and a
file may add to or override them.
"""

from typing import Any, Dict, List, Optional, Union
from dataclasses import fields
from pathlib import Path
import json
import logging

import yaml

from ..api import RenderConfig
from ..core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


BUILTIN_PRESETS: Dict[str, Dict[str, Any]] = {
    'reference': {
        '_description': 'Full view at 640x360, 100 significant digits',
        'width': 640,
        'height': 360,
        'center_x': '-0.75',
        'center_y': '0.0',
        'zoom': '3.5',
        'max_iterations': 100,
        'precision': 100,
    },
    'preview': {
        '_description': 'Quick low resolution preview in double precision',
        'width': 160,
        'height': 90,
        'max_iterations': 64,
        'precision': 'double',
    },
    'deep': {
        '_description': 'Seahorse valley at a zoom beyond double precision',
        'width': 320,
        'height': 180,
        'center_x': '-0.743643887037158704752191506114774',
        'center_y': '0.131825904205311970493132056385139',
        'zoom': '1e-20',
        'max_iterations': 1000,
        'precision': 40,
    },
}


def _render_field_names() -> List[str]:
    return [f.name for f in fields(RenderConfig)]


class ConfigManager:
    """Load, validate and export render configuration files."""

    def load_config(self, config_path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
        """
        Load a configuration dictionary.

        Args:
            config_path: YAML (.yaml/.yml) or JSON (.json) file; None for defaults

        Returns:
            Dictionary with ``render`` and ``presets`` sections
        """
        config_dict: Dict[str, Any] = {'render': {}, 'presets': {}}
        if config_path is None:
            return config_dict

        config_path = Path(config_path)
        suffix = config_path.suffix.lower()

        with open(config_path, 'r', encoding='utf-8') as f:
            if suffix in ('.yaml', '.yml'):
                loaded = yaml.safe_load(f)
            elif suffix == '.json':
                loaded = json.load(f)
            else:
                raise ConfigurationError(f"Unsupported config format '{suffix}' (use .yaml or .json)")

        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigurationError(f"{config_path}: top level must be a mapping")

        config_dict['render'] = dict(loaded.get('render') or {})
        config_dict['presets'] = dict(loaded.get('presets') or {})

        errors = self.validate_config(config_dict)
        if errors:
            raise ConfigurationError(f"{config_path}: " + "; ".join(errors))

        logger.info(f"Loaded configuration: {config_path}")
        return config_dict

    def validate_config(self, config_dict: Dict[str, Any]) -> List[str]:
        """Return a list of problems; empty when the configuration is valid."""
        errors = []
        known = set(_render_field_names())

        sections = [('render', config_dict.get('render', {}))]
        sections += [(f"presets.{name}", preset)
                     for name, preset in config_dict.get('presets', {}).items()]

        for section, values in sections:
            if not isinstance(values, dict):
                errors.append(f"{section} must be a mapping")
                continue
            for key in values:
                if not key.startswith('_') and key not in known:
                    errors.append(f"{section}: unknown parameter '{key}'")

        return errors

    def list_presets(self, config_dict: Optional[Dict[str, Any]] = None) -> Dict[str, Dict[str, Any]]:
        presets = dict(BUILTIN_PRESETS)
        if config_dict:
            presets.update(config_dict.get('presets', {}))
        return presets

    def create_render_config(self, config_dict: Optional[Dict[str, Any]] = None,
                             preset: Optional[str] = None,
                             overrides: Optional[Dict[str, Any]] = None) -> RenderConfig:
        """
        Build a RenderConfig.

        Precedence, lowest first: defaults, file ``render`` section, the
        named preset, explicit overrides.
        """
        config_dict = config_dict or {'render': {}, 'presets': {}}
        values: Dict[str, Any] = dict(config_dict.get('render', {}))

        if preset:
            presets = self.list_presets(config_dict)
            if preset not in presets:
                available = ', '.join(sorted(presets))
                raise ConfigurationError(f"Unknown preset '{preset}'. Available: {available}")
            values.update(presets[preset])

        values.update({k: v for k, v in (overrides or {}).items() if v is not None})

        values = {k: v for k, v in values.items() if not k.startswith('_')}
        unknown = set(values) - set(_render_field_names())
        if unknown:
            raise ConfigurationError(f"Unknown configuration parameters: {', '.join(sorted(unknown))}")

        # Viewport values stay strings so YAML floats do not cap precision.
        for key in ('center_x', 'center_y', 'zoom', 'aspect', 'escape_boundary'):
            if key in values:
                values[key] = str(values[key])

        render_config = RenderConfig(**values)
        render_config.validate()
        return render_config

    def export_config_template(self, output_path: Union[str, Path]) -> Path:
        """Write the default configuration as YAML or JSON, chosen by suffix."""
        output_path = Path(output_path)
        template = {
            'render': RenderConfig().to_dict(),
            'presets': {'example': {'width': 320, 'height': 180, 'zoom': '0.5'}},
        }

        with open(output_path, 'w', encoding='utf-8') as f:
            if output_path.suffix.lower() == '.json':
                json.dump(template, f, indent=2)
            else:
                yaml.safe_dump(template, f, sort_keys=False)

        logger.info(f"Wrote configuration template: {output_path}")
        return output_path


def load_config_from_args(config_file: Optional[str], preset: Optional[str],
                          overrides: Optional[Dict[str, Any]] = None) -> RenderConfig:
    """Resolve CLI arguments into a validated RenderConfig."""
    manager = ConfigManager()
    config_dict = manager.load_config(config_file)
    return manager.create_render_config(config_dict, preset, overrides)
