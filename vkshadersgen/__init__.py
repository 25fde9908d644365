"""vkshadersgen - build-time generator for the ggml Vulkan shader variants."""

from .types import Config, FeatureFlags, MatMulIdMode, VariantSpec
from .naming import TYPE_NAMES
from .registry import VariantRegistry
from .catalog import build_catalog
from .cmake import CMakeLists
from .embed import write_embed_files
from .storage import read_binary_file, write_file_if_changed
from .config import load_config, load_features
from .logging_config import setup_logging
from .runtime import generate
from .cli import main

__version__ = "0.1.0"

__all__ = [
    # Entry points
    "main",
    "generate",

    # Variant catalog
    "build_catalog",
    "VariantRegistry",
    "VariantSpec",
    "MatMulIdMode",
    "TYPE_NAMES",

    # Emitters
    "CMakeLists",
    "write_embed_files",

    # Storage
    "read_binary_file",
    "write_file_if_changed",

    # Config
    "Config",
    "FeatureFlags",
    "load_config",
    "load_features",
    "setup_logging",
]
