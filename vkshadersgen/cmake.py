"""Emitter for the CMake sub-project that compiles every shader variant."""

from pathlib import Path
from typing import List, Sequence, Union

from .types import VariantSpec
from .storage import write_file_if_changed
from .logging_config import get_logger

logger = get_logger('vkshadersgen.cmake')

PathLike = Union[str, Path]


def cmake_escape(value: str) -> str:
    """Prefix backslashes and double quotes with a backslash."""
    return value.replace('\\', '\\\\').replace('"', '\\"')


def quote_path(path: PathLike) -> str:
    return '"' + cmake_escape(str(path)) + '"'


class CMakeLists:
    """Accumulates the generated CMakeLists.txt in memory."""

    def __init__(self, glslc: str = "glslc"):
        self.glslc = glslc
        self.parts: List[str] = []
        self.out_filepaths: List[str] = []

    def add_header(self, argv: Sequence[str]) -> None:
        out = self.parts
        out.append("# Generated with " + "".join(f"{arg} " for arg in argv) + "\n\n")
        out.append("cmake_minimum_required(VERSION 3.14)\n")
        out.append("project(ggml-vulkan-shaders)\n\n")
        out.append(f"set(GLSLC \"{self.glslc}\")\n\n")
        out.append("function(compile_shader name in_file out_file flags)\n")
        out.append("  add_custom_command(\n")
        out.append("    OUTPUT ${out_file}\n")
        out.append("    COMMAND ${GLSLC} ${flags} ${ARGN} -MD -MF ${out_file}.d ${in_file} -o ${out_file}\n")
        out.append("    DEPENDS ${in_file}\n")
        out.append("    DEPFILE ${out_file}.d\n")
        out.append("    COMMENT \"Building Vulkan shader ${name}.spv\"\n")
        out.append("  )\n")
        out.append("endfunction()\n\n")

    def add_build_command(self, variant: VariantSpec) -> None:
        flags = "".join(f"\"{cmake_escape(flag)}\" " for flag in variant.flags)
        self.parts.append(
            f"compile_shader({variant.name} {quote_path(variant.template_path)} "
            f"{quote_path(variant.output_path)} {flags})\n"
        )
        self.out_filepaths.append(variant.output_path)

    def add_build_commands(self, variants: Sequence[VariantSpec]) -> None:
        for variant in variants:
            self.add_build_command(variant)

    def add_target_embed(
        self,
        shaders_gen_executable: PathLike,
        input_dir: PathLike,
        output_dir: PathLike,
        target_hpp: PathLike,
        target_cpp: PathLike
    ) -> None:
        """Re-run the generator in embed mode once every binary is built."""
        out = self.parts
        out.append("\nadd_custom_command(\n")
        out.append(f"  OUTPUT {quote_path(target_hpp)} {quote_path(target_cpp)}\n")
        out.append(
            f"  COMMAND {quote_path(shaders_gen_executable)}"
            f" --glslc {self.glslc}"
            f" --input-dir {quote_path(input_dir)}"
            f" --output-dir {quote_path(output_dir)}"
            f" --target-hpp {quote_path(target_hpp)}"
            f" --target-cpp {quote_path(target_cpp)}\n"
        )
        out.append("  DEPENDS\n")
        for spv_path in self.out_filepaths:
            out.append(f"    {quote_path(spv_path)}\n")
        out.append("  COMMENT \"Embedding Vulkan shaders into C++ source\"\n")
        out.append(")\n")

        out.append("\nadd_custom_target(vulkan-shaders ALL DEPENDS\n")
        out.append(f"  {quote_path(target_hpp)}\n")
        out.append(f"  {quote_path(target_cpp)}\n")
        out.append(")\n")

    def add_target_build_only(self) -> None:
        out = self.parts
        out.append("\nadd_custom_target(vulkan-shaders ALL DEPENDS\n")
        for spv_path in self.out_filepaths:
            out.append(f"  {quote_path(spv_path)}\n")
        out.append(")\n")

    def render(self) -> str:
        return "".join(self.parts)

    def write(self, target_filepath: PathLike) -> bool:
        written = write_file_if_changed(target_filepath, self.render())
        logger.info(f"{'Wrote' if written else 'Unchanged'} {target_filepath} ({len(self.out_filepaths)} shaders)")
        return written
