"""Configuration loader with support for YAML files and environment variables."""

import os
from pathlib import Path
from typing import Any, Dict, Optional
import yaml

from .config_models import AuthGuardConfig


class ConfigLoader:
    """
    Load and manage authguard configuration.

    Configuration is loaded in the following order (later sources override earlier):
    1. Default configuration (embedded in code)
    2. Global configuration (~/.authguard/config.yaml)
    3. Project configuration (./authguard.yaml or .authguard.yaml)
    4. User-specified configuration file
    5. Environment variables (AUTHGUARD_*)
    """

    ENV_PREFIX = "AUTHGUARD_"
    ENV_NESTING = "__"

    DEFAULT_CONFIG_PATHS = [
        Path.home() / ".authguard" / "config.yaml",
        Path("./authguard.yaml"),
        Path("./.authguard.yaml"),
    ]

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> AuthGuardConfig:
        """
        Load configuration from multiple sources.

        Args:
            config_path: Optional path to configuration file

        Returns:
            AuthGuardConfig instance

        Raises:
            FileNotFoundError: If config_path is given but missing
            ValueError: If a file is not valid YAML
        """
        config_dict: Dict[str, Any] = {}

        for path in cls.DEFAULT_CONFIG_PATHS:
            if path.exists():
                config_dict = cls._merge_dicts(config_dict, cls._load_yaml_file(path))

        if config_path:
            user_path = Path(config_path)
            if not user_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            config_dict = cls._merge_dicts(config_dict, cls._load_yaml_file(user_path))

        config_dict = cls._merge_dicts(config_dict, cls._load_from_env())

        return AuthGuardConfig.model_validate(config_dict)

    @staticmethod
    def _load_yaml_file(path: Path) -> Dict[str, Any]:
        """
        Load YAML configuration file.

        Args:
            path: Path to YAML file

        Returns:
            Configuration dictionary
        """
        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f)
                return data if data else {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}")

    @staticmethod
    def _merge_dicts(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge ``override`` into a copy of ``base``."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = ConfigLoader._merge_dicts(result[key], value)
            else:
                result[key] = value

        return result

    @classmethod
    def _load_from_env(cls) -> Dict[str, Any]:
        """
        Load configuration from environment variables.

        Variables are prefixed with AUTHGUARD_ and use a double underscore
        between nesting levels, so field names keep their own underscores.
        Values stay strings; the config models coerce them to each field's
        type, so a user agent may contain commas and "7" becomes an int
        only where the field is an int:
        - AUTHGUARD_LOGGING__LEVEL -> logging.level
        - AUTHGUARD_LOGGING__RETENTION_DAYS -> logging.retention_days
        - AUTHGUARD_AUDIT__USER_AGENT -> audit.user_agent

        Returns:
            Configuration dictionary from environment
        """
        config: Dict[str, Any] = {}

        for key, value in os.environ.items():
            if not key.startswith(cls.ENV_PREFIX):
                continue

            key_parts = key[len(cls.ENV_PREFIX):].lower().split(cls.ENV_NESTING)

            current = config
            for part in key_parts[:-1]:
                current = current.setdefault(part, {})

            current[key_parts[-1]] = value

        return config

    @staticmethod
    def create_default_config(path: Optional[str] = None) -> Path:
        """
        Create a default configuration file.

        Args:
            path: Optional path for config file. If not provided, creates in ~/.authguard/

        Returns:
            Path to created configuration file
        """
        if path:
            config_path = Path(path)
            config_path.parent.mkdir(parents=True, exist_ok=True)
        else:
            config_dir = Path.home() / ".authguard"
            config_dir.mkdir(parents=True, exist_ok=True)
            config_path = config_dir / "config.yaml"

        yaml_content = AuthGuardConfig().to_yaml()

        yaml_with_comments = f"""# authguard configuration
#
# Override any setting with environment variables, using a double
# underscore between levels (AUTHGUARD_LOGGING__LEVEL=DEBUG), or pass
# --config at runtime.

{yaml_content}
"""

        config_path.write_text(yaml_with_comments)

        return config_path

    @classmethod
    def get_config_info(cls) -> Dict[str, Any]:
        """
        Get information about configuration sources.

        Returns:
            Dictionary with default paths, existing files and env overrides
        """
        info = {
            "default_paths": [str(p) for p in cls.DEFAULT_CONFIG_PATHS],
            "existing_configs": [str(p) for p in cls.DEFAULT_CONFIG_PATHS if p.exists()],
            "env_overrides": [k for k in os.environ if k.startswith(cls.ENV_PREFIX)],
        }
        return info
