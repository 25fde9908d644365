"""Type catalog and shader variant naming utilities."""

from typing import Dict, List

TYPE_NAMES: List[str] = [
    "f32",
    "f16",
    "q4_0",
    "q4_1",
    "q5_0",
    "q5_1",
    "q8_0",
    "q2_k",
    "q3_k",
    "q4_k",
    "q5_k",
    "q6_k",
    "iq1_s",
    "iq1_m",
    "iq2_xxs",
    "iq2_xs",
    "iq2_s",
    "iq3_xxs",
    "iq3_s",
    "iq4_xs",
    "iq4_nl",
    "mxfp4",
    "bf16",
]

LEGACY_QUANT_TYPES = ("q4_0", "q4_1", "q5_0", "q5_1", "q8_0")
FLOAT_TYPES = ("f32", "f16", "bf16")
BINARY_OP_NAMES = ("add", "sub", "mul", "div", "add_rms")

# Matmul A-operand load widths for quantized types, everything else loads 2
_LOAD_VEC_QUANT_8 = ("q4_0", "q4_1", "iq1_s", "iq1_m", "iq2_xxs", "iq2_xs", "iq2_s")
_LOAD_VEC_QUANT_4 = ("q5_0", "q5_1", "q8_0", "iq3_xxs", "iq3_s", "iq4_nl", "mxfp4")


def is_float_type(type_name: str) -> bool:
    return type_name in FLOAT_TYPES


def is_legacy_quant(type_name: str) -> bool:
    return type_name in LEGACY_QUANT_TYPES


def is_k_quant(type_name: str) -> bool:
    return type_name.endswith("_k")


def is_iq_quant(type_name: str) -> bool:
    return type_name.startswith("iq")


def data_a_key(type_name: str) -> str:
    """Define selecting the A-operand data layout, e.g. DATA_A_Q4_0."""
    return "DATA_A_" + type_name.upper()


def variant_name(base: str, fp16: bool = True, coopmat: bool = False,
                 coopmat2: bool = False, f16acc: bool = False) -> str:
    """Compose the final variant name from a base name and flavor bits.

    Suffixes are appended in a fixed order: ``_f16acc``, then ``_cm1`` or
    ``_cm2``, then ``_fp32`` for the single precision path without
    cooperative matrix v2.
    """
    name = base
    if f16acc:
        name += "_f16acc"
    if coopmat:
        name += "_cm1"
    if coopmat2:
        name += "_cm2"
    elif not fp16:
        name += "_fp32"
    return name


def target_env_flag(name: str) -> str:
    if "_cm2" in name:
        return "--target-env=vulkan1.3"
    return "--target-env=vulkan1.2"


def wants_optimization(name: str, coopmat: bool) -> bool:
    """spirv-opt is disabled for coopmat and bf16 shaders."""
    return not (coopmat or "bf16" in name)


def merge_defines(base: Dict[str, str], extra: Dict[str, str]) -> Dict[str, str]:
    """Merge two define maps, keeping the base value on conflicts."""
    result = dict(base)
    for key, value in extra.items():
        result.setdefault(key, value)
    return result


def sorted_defines(defines: Dict[str, str]) -> Dict[str, str]:
    return {key: defines[key] for key in sorted(defines)}


def float_type(type_name: str, fp16: bool, coopmat: bool, coopmat2: bool) -> str:
    """FLOAT_TYPE used by the matmul shaders for a given A type and flavor."""
    if type_name == "bf16":
        # scalar path promotes to float
        if not coopmat and not coopmat2:
            return "float"
        return "bfloat16_t"
    if coopmat2 or fp16:
        return "float16_t"
    return "float"


def base_load_vec(fp16: bool, coopmat2: bool) -> str:
    if coopmat2:
        return "1"
    return "8" if fp16 else "4"


def load_vec_quant(type_name: str) -> str:
    if type_name in _LOAD_VEC_QUANT_8:
        return "8"
    if type_name in _LOAD_VEC_QUANT_4:
        return "4"
    return "2"


def load_vec_a(type_name: str, fp16: bool, coopmat2: bool, aligned: bool) -> str:
    """LOAD_VEC_A for the per-type matmul shaders."""
    if coopmat2 or is_float_type(type_name):
        return base_load_vec(fp16, coopmat2) if aligned else "1"
    return load_vec_quant(type_name)


def aligned_b_type_f32(fp16: bool, coopmat2: bool) -> str:
    if coopmat2:
        return "float"
    return "mat2x4" if fp16 else "vec4"


def aligned_b_type_f16(fp16: bool, coopmat2: bool) -> str:
    if coopmat2:
        return "float16_t"
    return "f16mat2x4" if fp16 else "f16vec4"


def mul_mat_vec_template(type_name: str) -> str:
    if is_k_quant(type_name) or type_name.startswith(("iq1_", "iq2_", "iq3_")):
        return f"mul_mat_vec_{type_name}.comp"
    return "mul_mat_vec.comp"


def binary_op_suffix(src0_f16: bool, src1_f16: bool, dst_f16: bool) -> str:
    return "".join("_f16" if f16 else "_f32" for f16 in (src0_f16, src1_f16, dst_f16))
