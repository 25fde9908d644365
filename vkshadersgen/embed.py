"""Emitter for the C++ header and source that expose the compiled shaders."""

from pathlib import Path
from typing import Iterator, List, Sequence, Tuple, Union

import numpy as np

from .types import EmittedBlob, FeatureFlags, VariantSpec
from .naming import BINARY_OP_NAMES, TYPE_NAMES, is_legacy_quant
from .storage import read_binary_file, write_binary_file, write_file_if_changed
from .logging_config import get_logger

logger = get_logger('vkshadersgen.embed')

PathLike = Union[str, Path]

BYTES_PER_LINE = 12
_TABLE_SUFFIXES = ("_f32", "_f16")


def format_byte_array(data: np.ndarray) -> str:
    """Render bytes as ``0x..,`` entries, a newline after every 12th."""
    out = []
    values = data.tolist()
    for start in range(0, len(values), BYTES_PER_LINE):
        chunk = values[start:start + BYTES_PER_LINE]
        out.append("".join(f"0x{b:x}," for b in chunk))
        if len(chunk) == BYTES_PER_LINE:
            out.append("\n")
    return "".join(out)


def collect_blobs(variants: Sequence[VariantSpec], no_embed: bool) -> Iterator[EmittedBlob]:
    """Yield the blobs to emit, sorted by variant name.

    In embed mode variants whose binary cannot be read are skipped.
    """
    for variant in sorted(variants, key=lambda v: v.name):
        if no_embed:
            yield EmittedBlob(name=variant.name, filename=Path(variant.output_path).name)
            continue

        data = read_binary_file(variant.output_path)
        if data.size == 0:
            logger.warning(f"Skipping {variant.name}: no binary at {variant.output_path}")
            continue
        yield EmittedBlob(name=variant.name, data=data)


def _nested_table(op: str, symbol: str, depth: int = 0, prefix: str = "") -> str:
    """Brace initializer for the [2][2][2][2] binary-op tables.

    Indices are (src0 f16, src1 f16, dst f16, rte).
    """
    if depth == 3:
        cells = "".join(f"{op}{prefix}{'_rte' if rte else ''}_{symbol}," for rte in (0, 1))
        return "{" + cells + "}, "
    inner = "".join(_nested_table(op, symbol, depth + 1, prefix + suffix) for suffix in _TABLE_SUFFIXES)
    return "{" + inner + ("};\n" if depth == 0 else "}, ")


def binary_op_tables(hdr: List[str], src: List[str]) -> None:
    for op in BINARY_OP_NAMES:
        hdr.append(f"extern const void * {op}_data[2][2][2][2];\n")
        hdr.append(f"extern const uint64_t {op}_len[2][2][2][2];\n")

        src.append(f"const void * {op}_data[2][2][2][2] = " + _nested_table(op, "data"))
        src.append(f"const uint64_t {op}_len[2][2][2][2] = " + _nested_table(op, "len"))


def dmmv_btypes(features: FeatureFlags) -> List[str]:
    btypes = ["f16", "f32"]
    if features.integer_dot:
        btypes.append("q8_1")
    return btypes


def dmmv_tables(hdr: List[str], src: List[str], features: FeatureFlags) -> None:
    """Mat-vec pipelines per (type, b-type): base, subgroup, subgroup no-shmem."""
    for btype in dmmv_btypes(features):
        for tname in TYPE_NAMES:
            if btype == "q8_1" and not is_legacy_quant(tname):
                continue
            arr = f"arr_dmmv_{tname}_{btype}_f32"
            mmv = f"mul_mat_vec_{tname}_{btype}_f32"
            hdr.append(f"extern const void * {arr}_data[3];\n")
            hdr.append(f"extern const uint64_t {arr}_len[3];\n")
            src.append(f"const void * {arr}_data[3] = {{{mmv}_data, {mmv}_subgroup_data, {mmv}_subgroup_no_shmem_data}};\n")
            src.append(f"const uint64_t {arr}_len[3] =  {{{mmv}_len,  {mmv}_subgroup_len, {mmv}_subgroup_no_shmem_len}};\n")


def render_embed_files(
    variants: Sequence[VariantSpec],
    target_hpp: PathLike,
    output_dir: PathLike,
    no_embed: bool,
    features: FeatureFlags
) -> Tuple[str, str]:
    """Return the (header, source) text for the given variants."""
    hdr = ["#include <cstdint>\n\n"]
    src = [f"#include \"{Path(target_hpp).name}\"\n\n"]

    if no_embed:
        hdr.append(f"#define GGML_VK_SHADER_DIR \"{Path(output_dir).as_posix()}\"\n\n")

    count = 0
    for blob in collect_blobs(variants, no_embed):
        count += 1
        if no_embed:
            hdr.append(f"inline constexpr char const * {blob.name}_data = \"{blob.filename}\";\n")
            hdr.append(f"const uint64_t {blob.name}_len = 0;\n\n")
            continue

        hdr.append(f"extern const unsigned char {blob.name}_data[{blob.length}];\n")
        hdr.append(f"const uint64_t {blob.name}_len = {blob.length};\n\n")

        src.append(f"const unsigned char {blob.name}_data[{blob.length}] = {{\n")
        src.append(format_byte_array(blob.data))
        src.append("\n};\n\n")

    logger.debug(f"Emitting {count} of {len(variants)} shaders")

    binary_op_tables(hdr, src)
    dmmv_tables(hdr, src, features)
    return "".join(hdr), "".join(src)


def write_embed_files(
    variants: Sequence[VariantSpec],
    target_hpp: PathLike,
    target_cpp: PathLike,
    output_dir: PathLike,
    no_embed: bool,
    features: FeatureFlags
) -> None:
    """Write the header and source artifacts.

    The header is only rewritten when it changes. The source is compared
    too in stub mode; in embed mode it is always written.
    """
    header, source = render_embed_files(variants, target_hpp, output_dir, no_embed, features)

    write_file_if_changed(target_hpp, header)
    if no_embed:
        write_file_if_changed(target_cpp, source)
    else:
        write_binary_file(target_cpp, source)
    logger.info(f"Wrote {target_hpp} and {target_cpp}")
