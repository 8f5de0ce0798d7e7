import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional

class SettingsError(Exception):
    """Exception raised for malformed settings files."""
    pass

class Settings:
    """
    Driver settings management.

    Settings are resolved from the built-in defaults, then YAML configuration
    files, then ``GQGMC_*`` environment variables (highest priority).
    """
    # Default settings
    DEFAULTS = {
        # Logging settings
        "LOG_DIR": "logs",
        "LOG_LEVEL": "INFO",
        "LOG_FORMAT": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        "LOG_TO_CONSOLE": True,
        "LOG_TO_FILE": False,

        # Serial settings
        "DEFAULT_PORT": None,
        "DEFAULT_BAUDRATE": 57600,
        "SERIAL_TIMEOUT": 0.5,  # seconds per byte

        # Protocol settings
        "CLEAR_MAX_TRIES": 10,  # bytes drained before declaring the input stuck
        "NEW_FIRMWARE_REVISION": 2.23,

        # File paths
        "CONFIG_PROFILES_DIR": "profiles",
    }

    def __init__(self):
        """Initialize settings with defaults, then override from files and environment."""
        self._settings = self.DEFAULTS.copy()
        self._load_from_yaml()
        self._load_from_env()

    def _load_from_yaml(self):
        """Load settings from YAML configuration files."""
        config_paths = [
            Path(__file__).parent / "default_config.yaml",  # Default config
            Path.home() / ".gqgmc" / "config.yaml",  # User config
            Path("config.yaml")  # Project-level config
        ]

        for config_path in config_paths:
            if config_path.exists():
                self.load_file(config_path)

    def _load_from_env(self):
        """Override settings from environment variables."""
        for key in self._settings.keys():
            env_value = os.environ.get(f"GQGMC_{key}")
            if env_value is not None:
                self._settings[key] = self._coerce(key, env_value)

    def _coerce(self, key: str, value: str) -> Any:
        """Convert a string value to the type of the current setting."""
        default_type = type(self._settings[key])
        if default_type == bool:
            return value.lower() in ('true', 'yes', '1', 'y')
        if self._settings[key] is None:
            return value
        try:
            return default_type(value)
        except (ValueError, TypeError):
            # If conversion fails, use string value
            return value

    def load_file(self, config_path: Path) -> bool:
        """
        Merge settings from a single YAML file.

        Args:
            config_path: Path of the YAML file

        Returns:
            bool: True if the file was read and merged
        """
        try:
            with open(config_path, 'r') as f:
                yaml_settings = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            print(f"Warning: Could not load configuration from {config_path}: {str(e)}")
            return False

        if yaml_settings:
            if not isinstance(yaml_settings, dict):
                raise SettingsError(f"{config_path} must contain a mapping")
            self._settings.update(yaml_settings)
        return True

    def __getattr__(self, name: str) -> Any:
        """Allow attribute-style access to settings."""
        if name.startswith('_'):
            raise AttributeError(name)
        if name in self._settings:
            return self._settings[name]
        raise AttributeError(f"Setting '{name}' not found")

    def get(self, name: str, default: Any = None) -> Any:
        """Dictionary-style access to settings with default value."""
        return self._settings.get(name, default)

    def as_dict(self) -> Dict[str, Any]:
        """Return all settings as a dictionary."""
        return self._settings.copy()

    def update(self, settings_dict: Dict[str, Any]) -> None:
        """Update settings from a dictionary."""
        self._settings.update(settings_dict)

    def reset(self) -> None:
        """Restore the built-in defaults, discarding file and environment overrides."""
        self._settings = self.DEFAULTS.copy()

    def load_profile(self, profile_name: str) -> bool:
        """
        Load a specific configuration profile.

        Args:
            profile_name: Name of the profile to load

        Returns:
            bool: True if profile was loaded successfully
        """
        profile_path = Path(self._settings["CONFIG_PROFILES_DIR"]) / f"{profile_name}.yaml"

        if not profile_path.exists():
            return False

        return self.load_file(profile_path)

    def save_profile(self, profile_name: str, settings: Optional[Dict[str, Any]] = None) -> bool:
        """
        Save current or provided settings to a profile.

        Args:
            profile_name: Name to save the profile as
            settings: Specific settings to save, or None for all current settings

        Returns:
            bool: True if profile was saved successfully
        """
        profile_dir = Path(self._settings["CONFIG_PROFILES_DIR"])

        try:
            profile_dir.mkdir(exist_ok=True, parents=True)
            profile_path = profile_dir / f"{profile_name}.yaml"

            with open(profile_path, 'w') as f:
                yaml.safe_dump(settings or self._settings, f, default_flow_style=False)
            return True
        except (OSError, yaml.YAMLError):
            return False

# Create a singleton instance
settings = Settings()
