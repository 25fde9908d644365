"""Generator run orchestration: build script phase and embed phase."""

from pathlib import Path
from typing import List, Sequence

from .types import Config, VariantSpec
from .exceptions import ConfigurationError, StorageError
from .registry import VariantRegistry
from .catalog import process_shaders
from .cmake import CMakeLists
from .embed import write_embed_files
from .logging_config import get_logger

logger = get_logger('vkshadersgen.runtime')


def prepare_directories(config: Config) -> None:
    """Check the input directory and create missing output directories."""
    input_dir = Path(config.input_dir)
    if not input_dir.exists():
        raise ConfigurationError(f"Input directory does not exist: {input_dir}")

    output_dir = Path(config.output_dir)
    try:
        if not output_dir.exists():
            logger.debug(f"Creating output directory {output_dir}")
            output_dir.mkdir(parents=True, exist_ok=True)

        if config.target_cmake is not None:
            cmake_parent = Path(config.target_cmake).parent
            if not cmake_parent.exists():
                cmake_parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StorageError(f"Failed to create directory: {e}")


def generate(config: Config, argv: Sequence[str]) -> List[VariantSpec]:
    """Run the generator once.

    With ``target_cmake`` set this is phase 1: the CMake sub-project is
    written, plus stub host artifacts when ``no_embed`` is set. Without it
    this is phase 2: the compiled binaries are embedded into the header and
    source. ``argv`` is echoed into the build script, and ``argv[0]`` is the
    command the build script re-invokes for phase 2.
    """
    prepare_directories(config)

    cmake = None
    if config.target_cmake is not None:
        cmake = CMakeLists(config.glslc)
        cmake.add_header(argv)

    registry = VariantRegistry(config.input_dir, config.output_dir, config.features)
    process_shaders(registry)
    variants = registry.variants

    if cmake is not None:
        cmake.add_build_commands(variants)

    if config.target_cmake is None or config.no_embed:
        write_embed_files(
            variants,
            config.target_hpp,
            config.target_cpp,
            config.output_dir,
            config.no_embed,
            config.features,
        )

    if cmake is not None:
        if config.no_embed:
            cmake.add_target_build_only()
        else:
            cmake.add_target_embed(argv[0], config.input_dir, config.output_dir,
                                   config.target_hpp, config.target_cpp)
        cmake.write(config.target_cmake)

    return variants
