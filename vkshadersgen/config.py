"""Configuration management with type safety and validation."""

import argparse
import json
import os
from pathlib import Path
from typing import Dict, Any, Optional, Union

from .types import Config, FeatureFlags
from .exceptions import ConfigurationError
from .logging_config import get_logger

logger = get_logger('vkshadersgen.config')

# Environment variables mirroring the compile definitions of the parent build
FEATURE_ENV_VARS = {
    "bfloat16": "GGML_VULKAN_BFLOAT16_GLSLC_SUPPORT",
    "coopmat": "GGML_VULKAN_COOPMAT_GLSLC_SUPPORT",
    "coopmat2": "GGML_VULKAN_COOPMAT2_GLSLC_SUPPORT",
    "integer_dot": "GGML_VULKAN_INTEGER_DOT_GLSLC_SUPPORT",
    "debug_info": "GGML_VULKAN_SHADER_DEBUG_INFO",
}

FEATURES_FILE_ENV_VAR = "GGML_VULKAN_SHADERS_FEATURES"

_TRUTHY = {"1", "on", "true", "yes"}
_FALSY = {"", "0", "off", "false", "no"}


def default_config() -> Config:
    """Return default configuration as a validated Config object."""
    return Config()


def default_features() -> FeatureFlags:
    """Return the feature set of a compiler with no optional extensions."""
    return FeatureFlags()


def merge_config_dicts(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge configuration dictionaries."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_config_dicts(result[key], value)
        else:
            result[key] = value

    return result


def parse_bool(value: str) -> Optional[bool]:
    """Interpret a CMake/env style boolean, None if unrecognized."""
    normalized = value.strip().lower()
    if normalized in _TRUTHY:
        return True
    if normalized in _FALSY:
        return False
    return None


def load_features(path: Optional[Union[str, Path]] = None) -> FeatureFlags:
    """Load compiler feature flags from a JSON file and the environment.

    The file (``path`` or ``$GGML_VULKAN_SHADERS_FEATURES``) is merged over
    the defaults, then each ``GGML_VULKAN_*`` variable that is set
    overrides its flag.
    """
    if path is None:
        path = os.getenv(FEATURES_FILE_ENV_VAR) or None

    features_dict = default_features().to_dict()

    if path is not None:
        features_path = Path(path)
        if not features_path.exists():
            raise ConfigurationError(f"Feature file not found: {features_path}")
        try:
            with open(features_path, 'r', encoding='utf-8') as f:
                override_dict = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in feature file {features_path}: {e}")
        if not isinstance(override_dict, dict):
            raise ConfigurationError(f"Feature file {features_path} must contain a JSON object")
        logger.debug(f"Loading feature flags from {features_path}")
        features_dict = merge_config_dicts(features_dict, override_dict)

    for flag, env_var in FEATURE_ENV_VARS.items():
        raw = os.getenv(env_var)
        if raw is None:
            continue
        value = parse_bool(raw)
        if value is None:
            logger.warning(f"Invalid {env_var} value {raw!r}, using default")
            continue
        features_dict[flag] = value

    try:
        features = FeatureFlags.from_dict(features_dict)
    except Exception as e:
        raise ConfigurationError(f"Invalid feature flags: {e}")

    logger.debug(f"Feature flags: {features.to_dict()}")
    return features


def load_config(args: argparse.Namespace, features: Optional[FeatureFlags] = None) -> Config:
    """Build a validated Config from parsed command-line arguments."""
    if features is None:
        features = load_features()

    try:
        return Config(
            glslc=args.glslc,
            input_dir=args.input_dir,
            output_dir=args.output_dir,
            target_hpp=args.target_hpp,
            target_cpp=args.target_cpp,
            target_cmake=args.target_cmake,
            no_embed=args.no_embed,
            features=features,
        )
    except ValueError as e:
        raise ConfigurationError(str(e))
