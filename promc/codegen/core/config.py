"""
Configuration management for code generation.

Handles loading and merging generator settings from JSON files,
providing defaults and validation for generator settings.
"""

import json
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Dict, Any, Optional, Union


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""
    pass


DEFAULT_CLIENT_IMPORT = "github.com/prometheus/client_golang/prometheus"


@dataclass
class GeneratorConfig:
    """Settings for code generators."""

    # Banner tool name, as in "Code generated by <tool>; DO NOT EDIT."
    generator_name: str = "promc"

    # Monitoring runtime client import path
    client_import: str = DEFAULT_CLIENT_IMPORT

    # Emit doc comments on declarations
    add_comments: bool = True

    # Custom settings (language-specific)
    custom: Dict[str, Any] = field(default_factory=dict)


class ConfigManager:
    """Manages configuration loading and merging."""

    def __init__(self):
        """Initialize configuration manager."""
        self._defaults: Dict[str, Any] = {
            "generator_name": "promc",
            "client_import": DEFAULT_CLIENT_IMPORT,
            "add_comments": True,
        }

    def get_config(self, custom_config: Optional[Dict[str, Any]] = None,
                   config_file: Optional[Union[str, Path]] = None) -> GeneratorConfig:
        """
        Get complete generator configuration.

        Args:
            custom_config: Custom configuration overrides
            config_file: Path to JSON settings file

        Returns:
            Merged configuration (defaults < file < overrides)
        """
        base_config = self._defaults.copy()

        if config_file:
            base_config.update(self._load_config_file(config_file))

        if custom_config:
            base_config.update(custom_config)

        config = self._dict_to_config(base_config)
        problems = self.validate_config(config)
        if problems:
            raise ConfigError("; ".join(problems))
        return config

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load settings from a JSON file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if not path.suffix.lower() == '.json':
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {str(e)}") from e
        except OSError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {str(e)}") from e

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")

        return config

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> GeneratorConfig:
        """Convert dictionary to GeneratorConfig instance."""
        known_fields = {f.name for f in fields(GeneratorConfig)}

        config_args = {}
        custom_args = {}

        for key, value in config_dict.items():
            if key in known_fields:
                config_args[key] = value
            else:
                custom_args[key] = value

        # Unknown keys are kept for language-specific use
        if custom_args:
            existing_custom = dict(config_args.get('custom') or {})
            existing_custom.update(custom_args)
            config_args['custom'] = existing_custom

        return GeneratorConfig(**config_args)

    def save_config(self, config: GeneratorConfig, output_path: Union[str, Path]):
        """Save configuration to JSON file."""
        path = Path(output_path)

        config_dict = asdict(config)
        # Custom settings are stored flat, as _dict_to_config reads them
        config_dict.update(config_dict.pop("custom"))

        try:
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(config_dict, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration to {path}: {str(e)}") from e

    def validate_config(self, config: GeneratorConfig) -> list[str]:
        """
        Validate generator settings.

        Returns:
            List of validation errors
        """
        problems = []

        if not isinstance(config.add_comments, bool):
            problems.append(f"add_comments must be a boolean, got {config.add_comments!r}")

        for name in ("generator_name", "client_import"):
            value = getattr(config, name)
            if not isinstance(value, str) or not value.strip():
                problems.append(f"{name} must be a non-empty string")
            elif any(c.isspace() or c == '"' for c in value):
                problems.append(f"{name} must not contain whitespace or quotes: {value!r}")

        return problems


# Global configuration manager instance
_config_manager = None


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(custom_config: Optional[Dict[str, Any]] = None,
                config_file: Optional[Union[str, Path]] = None) -> GeneratorConfig:
    """
    Convenience function to load configuration.

    Args:
        custom_config: Custom configuration overrides
        config_file: Path to JSON settings file

    Returns:
        Merged generator configuration
    """
    manager = get_config_manager()
    return manager.get_config(custom_config, config_file)
