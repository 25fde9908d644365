"""Command-line interface for vulkan-shaders-gen."""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from .config import default_config, load_config
from .exceptions import ShaderGenError
from .runtime import generate
from .logging_config import get_logger, setup_logging

logger = get_logger('vkshadersgen.cli')

DESCRIPTION = "Compiles Vulkan compute shaders to SPIR-V and embeds it into C++ source files"

EPILOG = """\
This executable runs at build time. Typically it is invoked by CMake like this:
  1. Run with --target-cmake to generate CMakeLists.txt that contains build
     commands for the shaders.
  2. Configure and build the generated CMake sub-project to compile the shaders
     into SPIR-V files.
  3. Run without --target-cmake to generate C++ source files that embed the
     SPIR-V binaries. This invocation is part of the generated sub-project.

If --no-embed is used, step 1 will generate stub C++ source files, and
step 3 is skipped. This allows fast iteration on shader code without
recompiling C++ code, but can't be deployed.
"""


def build_parser(prog: Optional[str] = None) -> argparse.ArgumentParser:
    defaults = default_config()
    parser = argparse.ArgumentParser(
        prog=prog,
        description=DESCRIPTION,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--glslc", default=defaults.glslc, metavar="<path>",
                        help="Path to glslc executable (default: glslc)")
    parser.add_argument("--input-dir", default=defaults.input_dir, metavar="<path>",
                        help="Input directory containing .comp shader files")
    parser.add_argument("--output-dir", default=defaults.output_dir, metavar="<path>",
                        help="Output directory for compiled .spv files")
    parser.add_argument("--target-hpp", default=defaults.target_hpp, metavar="<path>",
                        help="Output C++ header file path")
    parser.add_argument("--target-cpp", default=defaults.target_cpp, metavar="<path>",
                        help="Output C++ source file path")
    parser.add_argument("--target-cmake", default=None, metavar="<path>",
                        help="Output CMakeLists.txt file path")
    parser.add_argument("--no-embed", action="store_true",
                        help="Do not embed SPIR-V binaries into C++ source")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point, ``argv`` includes the program name."""
    if argv is None:
        argv = sys.argv
    argv = list(argv)

    parser = build_parser(prog=Path(argv[0]).name if argv else None)
    args = parser.parse_args(argv[1:])

    setup_logging()

    try:
        config = load_config(args)
        generate(config, argv)
    except ShaderGenError as e:
        logger.error(f"Error: {e}")
        return 1
    except Exception as e:
        logger.exception(f"Error: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
