#!/usr/bin/env python3

"""
Configuration management for the transcriptome builder.

Centralized configuration with support for file-based configuration
and environment variable overrides.
"""

import os
import json
from dataclasses import dataclass, asdict
from typing import Optional, Dict, Any

import yaml

from .exceptions import ConfigurationError


FEATURE_CHOICES = ('exon', 'CDS')
ATTRIBUTE_MODES = ('tokenized', 'legacy')
ERROR_POLICIES = ('fail', 'skip')
EXECUTOR_TYPES = ('process', 'thread')


def _parse_bool(value: str) -> bool:
    return value.lower() in ('true', '1', 'yes')


def read_config_file(config_path: str) -> Dict[str, Any]:
    """Read a JSON or YAML configuration file into a dictionary."""
    if not os.path.exists(config_path):
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, 'r') as f:
            if config_path.lower().endswith(('.yaml', '.yml')):
                config_data = yaml.safe_load(f)
            else:
                config_data = json.load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML configuration file format: {e}")
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid configuration file format: {e}")
    except OSError as e:
        raise ConfigurationError(f"Error loading configuration: {e}")

    if not isinstance(config_data, dict):
        raise ConfigurationError(f"Configuration file must contain a mapping: {config_path}")

    return config_data


@dataclass
class PipelineConfig:
    """Centralized configuration for the transcriptome builder."""

    # Annotation parsing
    feature: str = 'exon'
    attribute_mode: str = 'tokenized'
    strip_version_suffix: bool = False

    # Error policy
    error_policy: str = 'fail'
    strict_chromosomes: bool = False
    allow_fuzzy_chromosome_match: bool = True
    check_overlaps: bool = True

    # Performance settings
    parallel_workers: int = 1
    executor_type: str = 'process'
    chunk_size: int = 10000
    memory_limit_mb: int = 4096
    enable_memory_monitoring: bool = True

    # Output settings
    generate_reports: bool = True
    debug_mode: bool = False

    @classmethod
    def from_file(cls, config_path: str) -> 'PipelineConfig':
        """Load configuration from file (JSON or YAML)."""
        return cls.from_dict(read_config_file(config_path))

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'PipelineConfig':
        """Create configuration from dictionary."""
        # Filter out unknown keys
        known_keys = set(cls.__dataclass_fields__.keys())
        filtered_dict = {k: v for k, v in config_dict.items() if k in known_keys}

        try:
            return cls(**filtered_dict)
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration parameters: {e}")

    @classmethod
    def from_env(cls) -> 'PipelineConfig':
        """Load configuration from environment variables."""
        config = cls()

        env_mappings = {
            'TRANSCRIPTOME_FEATURE': ('feature', str),
            'TRANSCRIPTOME_ATTRIBUTE_MODE': ('attribute_mode', str),
            'TRANSCRIPTOME_ERROR_POLICY': ('error_policy', str),
            'TRANSCRIPTOME_PARALLEL_WORKERS': ('parallel_workers', int),
            'TRANSCRIPTOME_EXECUTOR_TYPE': ('executor_type', str),
            'TRANSCRIPTOME_CHUNK_SIZE': ('chunk_size', int),
            'TRANSCRIPTOME_MEMORY_LIMIT_MB': ('memory_limit_mb', int),
            'TRANSCRIPTOME_STRICT_CHROMOSOMES': ('strict_chromosomes', _parse_bool),
            'TRANSCRIPTOME_DEBUG_MODE': ('debug_mode', _parse_bool),
        }

        for env_var, (field_name, converter) in env_mappings.items():
            env_value = os.getenv(env_var)
            if env_value:
                try:
                    setattr(config, field_name, converter(env_value))
                except (ValueError, TypeError) as e:
                    raise ConfigurationError(f"Invalid environment variable {env_var}: {e}")

        config.validate()
        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return asdict(self)

    def save_to_file(self, config_path: str) -> None:
        """Save configuration to file."""
        config_dict = self.to_dict()

        try:
            with open(config_path, 'w') as f:
                if config_path.lower().endswith(('.yaml', '.yml')):
                    yaml.safe_dump(config_dict, f, default_flow_style=False)
                else:
                    json.dump(config_dict, f, indent=2)
        except OSError as e:
            raise ConfigurationError(f"Error saving configuration: {e}")

    @property
    def skip_invalid(self) -> bool:
        return self.error_policy == 'skip'

    def validate(self) -> None:
        """Validate configuration parameters."""
        if self.feature not in FEATURE_CHOICES:
            raise ConfigurationError(f"feature must be one of {FEATURE_CHOICES}, got {self.feature!r}")

        if self.attribute_mode not in ATTRIBUTE_MODES:
            raise ConfigurationError(f"attribute_mode must be one of {ATTRIBUTE_MODES}, got {self.attribute_mode!r}")

        if self.error_policy not in ERROR_POLICIES:
            raise ConfigurationError(f"error_policy must be one of {ERROR_POLICIES}, got {self.error_policy!r}")

        if self.executor_type not in EXECUTOR_TYPES:
            raise ConfigurationError(f"executor_type must be one of {EXECUTOR_TYPES}, got {self.executor_type!r}")

        if self.parallel_workers < 1:
            raise ConfigurationError("parallel_workers must be >= 1")

        if self.chunk_size < 1:
            raise ConfigurationError("chunk_size must be >= 1")

        if self.memory_limit_mb < 100:
            raise ConfigurationError("memory_limit_mb must be >= 100")

    def __post_init__(self):
        """Validate configuration after initialization."""
        self.validate()


def load_config(config_path: Optional[str] = None,
                use_env: bool = True) -> PipelineConfig:
    """
    Load configuration with priority: file > environment > defaults.

    Args:
        config_path: Path to configuration file (optional)
        use_env: Whether to load environment variables

    Returns:
        PipelineConfig: Loaded configuration
    """
    config = PipelineConfig()

    if use_env:
        env_config = PipelineConfig.from_env()
        # Merge non-default values from environment
        for field_name in PipelineConfig.__dataclass_fields__:
            env_value = getattr(env_config, field_name)
            if env_value != getattr(config, field_name):
                setattr(config, field_name, env_value)

    if config_path:
        # Only keys present in the file override environment values
        merged = config.to_dict()
        merged.update(read_config_file(config_path))
        config = PipelineConfig.from_dict(merged)

    return config
