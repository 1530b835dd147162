"""
Configuration loader utility

Loads RideConfig and ScenarioConfig from YAML files.
"""

import yaml
from pathlib import Path
from typing import Union

from .simulation import RideConfig
from .scenario import ScenarioConfig


class ConfigLoader:
    """Utility class for loading configuration files"""

    @staticmethod
    def _read_yaml(file_path: Union[str, Path]) -> dict:
        file_path = Path(file_path)

        if not file_path.exists():
            raise FileNotFoundError(f"Config file not found: {file_path}")

        with open(file_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {file_path} must contain a mapping")
        return data

    @staticmethod
    def load_ride(file_path: Union[str, Path]) -> RideConfig:
        """
        Load RideConfig from YAML file

        Args:
            file_path: Path to YAML file

        Returns:
            RideConfig instance

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If validation fails
        """
        config = RideConfig.from_dict(ConfigLoader._read_yaml(file_path))
        config.validate()
        return config

    @staticmethod
    def load_scenario(file_path: Union[str, Path]) -> ScenarioConfig:
        """
        Load ScenarioConfig from YAML file

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If validation fails
        """
        config = ScenarioConfig.from_dict(ConfigLoader._read_yaml(file_path))
        config.validate()
        return config

    @staticmethod
    def save_ride(config: RideConfig, file_path: Union[str, Path]):
        """
        Save RideConfig to YAML file
        """
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        data = config.to_dict()

        with open(file_path, 'w', encoding='utf-8') as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)


# Convenience functions
def load_ride_config(file_path: Union[str, Path]) -> RideConfig:
    """Load RideConfig from YAML file"""
    return ConfigLoader.load_ride(file_path)


def load_scenario(file_path: Union[str, Path]) -> ScenarioConfig:
    """Load ScenarioConfig from YAML file"""
    return ConfigLoader.load_scenario(file_path)


def save_ride_config(config: RideConfig, file_path: Union[str, Path]):
    """Save RideConfig to YAML file"""
    ConfigLoader.save_ride(config, file_path)
