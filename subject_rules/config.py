"""
Configuration Management for subject-rules
Handles environment-based configuration and evaluator tuning.
"""
import os
import json
import logging
from typing import Optional, Dict, Any
from pathlib import Path
from dataclasses import dataclass, field
from dotenv import load_dotenv

# Load .env file
load_dotenv()

from subject_rules.models import Operator
from subject_rules.exceptions import ConfigurationError

ENV_PREFIX = "SUBJECT_RULES_"
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class SystemConfig:
    """System-wide configuration settings."""
    environment: str = "development"
    log_level: str = "INFO"


@dataclass
class EvaluatorConfig:
    """Rule evaluation settings."""
    capability_marker: str = "()"
    path_separator: str = "."
    list_separator: str = ","
    default_operator: str = Operator.EQUALS.value
    max_collection_depth: int = 32


@dataclass
class SubjectRulesConfig:
    """Complete configuration for subject-rules."""
    system: SystemConfig = field(default_factory=SystemConfig)
    evaluator: EvaluatorConfig = field(default_factory=EvaluatorConfig)

    def validate(self) -> None:
        """
        Validate configuration settings.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        if self.system.log_level.upper() not in VALID_LOG_LEVELS:
            raise ConfigurationError(
                f"Invalid log level: {self.system.log_level}",
                component="ConfigManager"
            )

        if not self.evaluator.capability_marker:
            raise ConfigurationError(
                "Capability marker must be a non-empty string",
                component="ConfigManager"
            )

        if not self.evaluator.path_separator:
            raise ConfigurationError(
                "Path separator must be a non-empty string",
                component="ConfigManager"
            )

        if self.evaluator.path_separator in self.evaluator.capability_marker:
            raise ConfigurationError(
                "Path separator cannot appear in the capability marker",
                component="ConfigManager",
                context={
                    "path_separator": self.evaluator.path_separator,
                    "capability_marker": self.evaluator.capability_marker
                }
            )

        if not self.evaluator.list_separator:
            raise ConfigurationError(
                "List separator must be a non-empty string",
                component="ConfigManager"
            )

        if Operator.parse(self.evaluator.default_operator) is None:
            raise ConfigurationError(
                f"Invalid default operator: {self.evaluator.default_operator}",
                component="ConfigManager",
                context={"supported": [op.value for op in Operator]}
            )

        if self.evaluator.max_collection_depth < 1:
            raise ConfigurationError(
                f"Max collection depth must be positive, got {self.evaluator.max_collection_depth}",
                component="ConfigManager"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "system": {
                "environment": self.system.environment,
                "log_level": self.system.log_level
            },
            "evaluator": {
                "capability_marker": self.evaluator.capability_marker,
                "path_separator": self.evaluator.path_separator,
                "list_separator": self.evaluator.list_separator,
                "default_operator": self.evaluator.default_operator,
                "max_collection_depth": self.evaluator.max_collection_depth
            }
        }


class ConfigManager:
    """
    Manages configuration loading from environment variables and files.
    Implements fail-fast principle for invalid configurations.
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration manager.

        Args:
            config_path: Optional path to JSON config file
        """
        self.config_path = config_path
        self._config: Optional[SubjectRulesConfig] = None

    def load(self) -> SubjectRulesConfig:
        """
        Load configuration from environment and optional file.
        Priority: Environment Variables > Config File > Defaults

        Returns:
            SubjectRulesConfig: Validated configuration

        Raises:
            ConfigurationError: If configuration is invalid
        """
        config = SubjectRulesConfig()

        # Load from file if provided
        if self.config_path:
            config = self._load_from_file(self.config_path)

        # Override with environment variables
        config = self._load_from_environment(config)

        # Validate configuration
        config.validate()

        self._config = config
        return config

    def _load_from_file(self, file_path: str) -> SubjectRulesConfig:
        """
        Load configuration from JSON file.

        Args:
            file_path: Path to configuration file

        Returns:
            SubjectRulesConfig: Configuration object

        Raises:
            ConfigurationError: If file cannot be loaded
        """
        path = Path(file_path)
        if not path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {file_path}",
                component="ConfigManager"
            )

        try:
            with open(path, 'r') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in configuration file: {e}",
                component="ConfigManager"
            )
        except OSError as e:
            raise ConfigurationError(
                f"Error loading configuration file: {e}",
                component="ConfigManager"
            )

        config = SubjectRulesConfig()

        if 'system' in data:
            sys_data = data['system']
            config.system.environment = sys_data.get('environment', 'development')
            config.system.log_level = str(sys_data.get('log_level', 'INFO')).upper()

        if 'evaluator' in data:
            ev_data = data['evaluator']
            config.evaluator.capability_marker = ev_data.get('capability_marker', '()')
            config.evaluator.path_separator = ev_data.get('path_separator', '.')
            config.evaluator.list_separator = ev_data.get('list_separator', ',')
            config.evaluator.default_operator = ev_data.get('default_operator', Operator.EQUALS.value)
            config.evaluator.max_collection_depth = ev_data.get('max_collection_depth', 32)

        return config

    def _load_from_environment(self, config: SubjectRulesConfig) -> SubjectRulesConfig:
        """
        Override configuration with environment variables.

        Args:
            config: Base configuration to override

        Returns:
            SubjectRulesConfig: Configuration with environment overrides
        """
        config.system.environment = os.getenv(f'{ENV_PREFIX}ENVIRONMENT', config.system.environment)

        log_level = os.getenv(f'{ENV_PREFIX}LOG_LEVEL')
        if log_level:
            config.system.log_level = log_level.upper()

        marker = os.getenv(f'{ENV_PREFIX}CAPABILITY_MARKER')
        if marker:
            config.evaluator.capability_marker = marker

        path_separator = os.getenv(f'{ENV_PREFIX}PATH_SEPARATOR')
        if path_separator:
            config.evaluator.path_separator = path_separator

        list_separator = os.getenv(f'{ENV_PREFIX}LIST_SEPARATOR')
        if list_separator:
            config.evaluator.list_separator = list_separator

        default_operator = os.getenv(f'{ENV_PREFIX}DEFAULT_OPERATOR')
        if default_operator:
            config.evaluator.default_operator = default_operator

        max_depth = os.getenv(f'{ENV_PREFIX}MAX_COLLECTION_DEPTH')
        if max_depth:
            try:
                config.evaluator.max_collection_depth = int(max_depth)
            except ValueError:
                raise ConfigurationError(
                    f"Invalid max collection depth: {max_depth}",
                    component="ConfigManager"
                )

        return config

    def get_config(self) -> SubjectRulesConfig:
        """
        Get current configuration.

        Returns:
            SubjectRulesConfig: Current configuration

        Raises:
            ConfigurationError: If configuration not loaded
        """
        if self._config is None:
            raise ConfigurationError(
                "Configuration not loaded. Call load() first.",
                component="ConfigManager"
            )
        return self._config


# Singleton instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager(config_path: Optional[str] = None) -> ConfigManager:
    """
    Get singleton ConfigManager instance.

    Args:
        config_path: Optional path to configuration file

    Returns:
        ConfigManager: Singleton instance
    """
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager(config_path)
    return _config_manager


def load_config(config_path: Optional[str] = None) -> SubjectRulesConfig:
    """
    Load and validate configuration.

    Args:
        config_path: Optional path to configuration file

    Returns:
        SubjectRulesConfig: Validated configuration

    Raises:
        ConfigurationError: If configuration is invalid
    """
    manager = get_config_manager(config_path)
    config = manager.load()
    logging.getLogger(__name__).debug("Loaded configuration: %s", config.to_dict())
    return config
