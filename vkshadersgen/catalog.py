"""The catalog of Vulkan compute shader variants.

Every entry spells out its define set literally; the resulting names are
the symbols the host code links against, so they are part of the external
contract and must not change.
"""

from pathlib import Path
from typing import List, Optional, Union

from .types import FeatureFlags, MatMulIdMode, VariantSpec
from .registry import VariantRegistry
from .naming import (
    BINARY_OP_NAMES,
    TYPE_NAMES,
    aligned_b_type_f16,
    aligned_b_type_f32,
    base_load_vec,
    binary_op_suffix,
    data_a_key,
    float_type,
    is_k_quant,
    is_legacy_quant,
    load_vec_a,
    merge_defines,
    mul_mat_vec_template,
)
from .logging_config import get_logger

logger = get_logger('vkshadersgen.catalog')

ACC_TYPE_MAX_F16 = "\"float16_t(65504.0)\""

UNARY_OPS = ["exp", "gelu", "gelu_erf", "gelu_quick", "silu", "relu", "tanh", "sigmoid", "hardsigmoid", "hardswish"]
GATED_OPS = ["geglu", "reglu", "swiglu", "swiglu_oai", "geglu_erf", "geglu_quick"]
ROPE_MODES = ["norm", "neox", "multi", "vision"]
QUANT_COPY_TYPES = ["q4_0", "q4_1", "q5_0", "q5_1", "q8_0", "iq4_nl"]
SET_ROWS_TYPES = ["f32", "f16", "bf16", "q4_0", "q4_1", "q5_0", "q5_1", "q8_0", "iq4_nl"]


def _type_str(f16: bool) -> str:
    return "float16_t" if f16 else "float"


def matmul_shaders(reg: VariantRegistry, fp16: bool, mode: MatMulIdMode,
                   coopmat: bool, coopmat2: bool, f16acc: bool) -> None:
    """Register the matrix multiply shaders of one flavor."""
    load_vec = base_load_vec(fp16, coopmat2)
    b_type_f32 = aligned_b_type_f32(fp16, coopmat2)
    b_type_f16 = aligned_b_type_f16(fp16, coopmat2)
    flavor = dict(fp16=fp16, coopmat=coopmat, coopmat2=coopmat2, f16acc=f16acc)

    base = {"FLOAT_TYPE_VEC2": "f16vec2" if (coopmat2 or fp16) else "vec2"}
    shader_name = "matmul"
    if mode == MatMulIdMode.DEFAULT:
        base["MUL_MAT_ID"] = "1"
        shader_name = "matmul_id"
    elif mode == MatMulIdMode.SUBGROUP:
        base["MUL_MAT_ID"] = "1"
        base["MUL_MAT_ID_USE_SUBGROUPS"] = "1"
        shader_name = "matmul_id_subgroup"

    if fp16:
        base["FLOAT16"] = "1"

    base["ACC_TYPE"] = "float16_t" if f16acc else "float"
    if f16acc:
        base["ACC_TYPE_MAX"] = ACC_TYPE_MAX_F16

    if coopmat:
        base["COOPMAT"] = "1"

    source = "mul_mm_cm2.comp" if coopmat2 else "mul_mm.comp"

    def ftype(type_name: str) -> str:
        return float_type(type_name, fp16, coopmat, coopmat2)

    # Shaders with f16 B_TYPE
    reg.register(shader_name + "_f32_f16", source, merge_defines(base, {
        "FLOAT_TYPE": ftype("f16"), "DATA_A_F32": "1", "B_TYPE": "float16_t", "D_TYPE": "float"}), **flavor)
    reg.register(shader_name + "_f32_f16_aligned", source, merge_defines(base, {
        "FLOAT_TYPE": ftype("f16"), "DATA_A_F32": "1", "LOAD_VEC_A": load_vec, "LOAD_VEC_B": load_vec,
        "B_TYPE": b_type_f16, "B_TYPE32": b_type_f32, "D_TYPE": "float", "ALIGNED": "1"}), **flavor)

    reg.register(shader_name + "_f16_aligned", source, merge_defines(base, {
        "FLOAT_TYPE": ftype("f16"), "DATA_A_F16": "1", "LOAD_VEC_A": load_vec, "LOAD_VEC_B": load_vec,
        "B_TYPE": b_type_f16, "B_TYPE32": b_type_f32, "D_TYPE": "float", "ALIGNED": "1"}), **flavor)
    reg.register(shader_name + "_f16", source, merge_defines(base, {
        "FLOAT_TYPE": ftype("f16"), "DATA_A_F16": "1", "B_TYPE": "float16_t", "D_TYPE": "float"}), **flavor)

    # bf16, only the scalar (promote to fp32) shaders unless glslc supports bfloat16
    if reg.features.bfloat16 or not (coopmat or coopmat2):
        to_float_type = "uintBitsToBFloat16EXT" if (coopmat or coopmat2) else "bf16_to_fp32"
        reg.register(shader_name + "_bf16_aligned", source, merge_defines(base, {
            "FLOAT_TYPE": ftype("bf16"), "TO_FLOAT_TYPE": to_float_type, "DATA_A_BF16": "1",
            "LOAD_VEC_A": "1" if coopmat2 else "4", "LOAD_VEC_B": "4",
            "B_TYPE": "bfloat16_t" if coopmat2 else "u16vec4", "B_TYPE32": "vec4", "D_TYPE": "float",
            "B_IS_FLOAT": "1", "DATA_B_BF16": "1", "ALIGNED": "1"}), **flavor)
        reg.register(shader_name + "_bf16", source, merge_defines(base, {
            "FLOAT_TYPE": ftype("bf16"), "TO_FLOAT_TYPE": to_float_type, "DATA_A_BF16": "1",
            "LOAD_VEC_A": "1", "B_TYPE": "bfloat16_t" if coopmat2 else "uint16_t", "D_TYPE": "float",
            "B_IS_FLOAT": "1", "DATA_B_BF16": "1"}), **flavor)

    for tname in TYPE_NAMES:
        if tname == "bf16":
            continue

        a_key = data_a_key(tname)
        unaligned_vec = load_vec_a(tname, fp16, coopmat2, aligned=False)
        aligned_vec = load_vec_a(tname, fp16, coopmat2, aligned=True)

        # don't generate f32 variants for coopmat2
        if not coopmat2:
            reg.register(f"{shader_name}_{tname}_f32", source, merge_defines(base, {
                "FLOAT_TYPE": ftype(tname), a_key: "1", "LOAD_VEC_A": unaligned_vec,
                "B_TYPE": "float", "D_TYPE": "float"}), **flavor)
            reg.register(f"{shader_name}_{tname}_f32_aligned", source, merge_defines(base, {
                "FLOAT_TYPE": ftype(tname), a_key: "1", "LOAD_VEC_A": aligned_vec, "LOAD_VEC_B": load_vec,
                "B_TYPE": b_type_f32, "B_TYPE32": b_type_f32, "D_TYPE": "float", "ALIGNED": "1"}), **flavor)

        if tname not in ("f16", "f32"):
            reg.register(f"{shader_name}_{tname}_f16", source, merge_defines(base, {
                "FLOAT_TYPE": ftype(tname), a_key: "1", "LOAD_VEC_A": unaligned_vec,
                "B_TYPE": "float16_t", "D_TYPE": "float"}), **flavor)
            reg.register(f"{shader_name}_{tname}_f16_aligned", source, merge_defines(base, {
                "FLOAT_TYPE": ftype(tname), a_key: "1", "LOAD_VEC_A": aligned_vec, "LOAD_VEC_B": load_vec,
                "B_TYPE": b_type_f16, "B_TYPE32": b_type_f32, "D_TYPE": "float", "ALIGNED": "1"}), **flavor)

        if (reg.features.integer_dot and not coopmat and not coopmat2
                and mode == MatMulIdMode.NONE and is_legacy_quant(tname)):
            reg.register(f"{shader_name}_{tname}_q8_1", "mul_mmq.comp", merge_defines(base, {
                "FLOAT_TYPE": ftype(tname), a_key: "1", "D_TYPE": "float"}), **flavor)


def matmul_family(reg: VariantRegistry) -> None:
    for mode in MatMulIdMode:
        # fp32
        matmul_shaders(reg, False, mode, False, False, False)

        # fp16, fp32acc and fp16acc
        matmul_shaders(reg, True, mode, False, False, False)
        matmul_shaders(reg, True, mode, False, False, True)

        if mode != MatMulIdMode.DEFAULT:
            if reg.features.coopmat:
                matmul_shaders(reg, True, mode, True, False, False)
                matmul_shaders(reg, True, mode, True, False, True)

            if reg.features.coopmat2:
                matmul_shaders(reg, True, mode, False, True, False)
                matmul_shaders(reg, True, mode, False, True, True)


def flash_attn_family(reg: VariantRegistry, base: dict) -> None:
    for f16acc in (False, True):
        fa_base = dict(base)
        fa_base["ACC_TYPE"] = "float16_t" if f16acc else "float"
        fa_base["ACC_TYPEV4"] = "f16vec4" if f16acc else "vec4"
        if f16acc:
            fa_base["ACC_TYPE_MAX"] = ACC_TYPE_MAX_F16

        for tname in TYPE_NAMES:
            if tname in ("f32", "bf16"):
                continue

            name = "flash_attn_f32_f16_" + tname
            upper = tname.upper()
            blocked = tname in ("q4_0", "q8_0")

            if reg.features.coopmat2:
                if tname == "f16":
                    defines = {"Q_TYPE": "float", "D_TYPE": "float"}
                else:
                    defines = {data_a_key(tname): "1", "Q_TYPE": "float", "D_TYPE": "float",
                               "DEQUANTFUNC": "dequantFunc" + upper, "BLOCK_SIZE": "QUANT_K_" + upper}
                reg.register(name, "flash_attn_cm2.comp", merge_defines(fa_base, defines),
                             fp16=True, coopmat=False, coopmat2=True, f16acc=f16acc)

            if reg.features.coopmat:
                if tname == "f16":
                    reg.register(name, "flash_attn_cm1.comp", merge_defines(fa_base, {
                        "Q_TYPE": "float", "D_TYPE": "float", "COOPMAT": "1"}),
                        fp16=True, coopmat=True, coopmat2=False, f16acc=f16acc)
                elif blocked:
                    reg.register(name, "flash_attn_cm1.comp", merge_defines(fa_base, {
                        data_a_key(tname): "1", "Q_TYPE": "float", "D_TYPE": "float",
                        "BLOCK_SIZE": "QUANT_K_" + upper, "COOPMAT": "1"}),
                        fp16=True, coopmat=True, coopmat2=False, f16acc=f16acc)

            if tname == "f16":
                reg.register(name, "flash_attn.comp", merge_defines(fa_base, {
                    "Q_TYPE": "float", "D_TYPE": "float"}),
                    fp16=True, coopmat=False, coopmat2=False, f16acc=f16acc)
            elif blocked:
                reg.register(name, "flash_attn.comp", merge_defines(fa_base, {
                    data_a_key(tname): "1", "Q_TYPE": "float", "D_TYPE": "float",
                    "BLOCK_SIZE": "QUANT_K_" + upper}),
                    fp16=True, coopmat=False, coopmat2=False, f16acc=f16acc)


def mul_mat_vec_family(reg: VariantRegistry, base: dict) -> None:
    """Mat-vec, dequant and get_rows shaders for every type."""
    b_types = {
        "f32": {"B_TYPE": "float", "B_TYPE_VEC2": "vec2", "B_TYPE_VEC4": "vec4"},
        "f16": {"B_TYPE": "float16_t", "B_TYPE_VEC2": "f16vec2", "B_TYPE_VEC4": "f16vec4"},
    }

    for tname in TYPE_NAMES:
        a_key = data_a_key(tname)
        shader = mul_mat_vec_template(tname)

        for suffix, extra in (("", {}),
                              ("_subgroup", {"USE_SUBGROUP_ADD": "1"}),
                              ("_subgroup_no_shmem", {"USE_SUBGROUP_ADD_NO_SHMEM": "1"})):
            for btype in ("f32", "f16"):
                defines = {a_key: "1", **b_types[btype], "D_TYPE": "float", **extra}
                reg.register(f"mul_mat_vec_{tname}_{btype}_f32{suffix}", shader, merge_defines(base, defines))

        reg.register(f"mul_mat_vec_id_{tname}_f32", shader, merge_defines(base, {
            "MUL_MAT_ID": "1", a_key: "1", **b_types["f32"], "D_TYPE": "float"}))

        # mul mat vec with integer dot product
        if reg.features.integer_dot and is_legacy_quant(tname):
            q8_defines = {a_key: "1", "D_TYPE": "float", "FLOAT_TYPE": "float",
                          "FLOAT_TYPE_VEC2": "vec2", "ACC_TYPE": "float"}
            reg.register(f"mul_mat_vec_{tname}_q8_1_f32", "mul_mat_vecq.comp",
                         merge_defines(base, q8_defines))
            reg.register(f"mul_mat_vec_{tname}_q8_1_f32_subgroup", "mul_mat_vecq.comp",
                         merge_defines(base, {**q8_defines, "USE_SUBGROUP_ADD": "1"}))
            reg.register(f"mul_mat_vec_{tname}_q8_1_f32_subgroup_no_shmem", "mul_mat_vecq.comp",
                         merge_defines(base, {**q8_defines, "USE_SUBGROUP_ADD_NO_SHMEM": "1"}))

        # Dequant shaders
        if tname not in ("f16", "bf16"):
            reg.register("dequant_" + tname, f"dequant_{tname}.comp",
                         merge_defines(base, {a_key: "1", "D_TYPE": "float16_t"}))

        if not is_k_quant(tname):
            shader = "get_rows.comp" if tname in ("f32", "f16", "bf16") else "get_rows_quant.comp"
            get_rows = {a_key: "1", "B_TYPE": "int", "D_TYPE": "float16_t"}
            if tname == "f16":
                get_rows["OPTIMIZATION_ERROR_WORKAROUND"] = "1"
            reg.register("get_rows_" + tname, shader, merge_defines(base, get_rows))
            reg.register(f"get_rows_{tname}_f32", shader, merge_defines(base, {
                a_key: "1", "B_TYPE": "int", "D_TYPE": "float"}))

    p021 = {"A_TYPE": "float16_t", "A_TYPE_VEC4": "f16vec4", "B_TYPE": "float",
            "B_TYPE_VEC4": "vec4", "D_TYPE": "float"}
    reg.register("mul_mat_vec_p021_f16_f32_subgroup_add", "mul_mat_vec_p021.comp",
                 {**p021, "USE_SUBGROUP_ADD": "1"})
    reg.register("mul_mat_vec_p021_f16_f32", "mul_mat_vec_p021.comp", p021)
    reg.register("mul_mat_vec_nc_f16_f32", "mul_mat_vec_nc.comp", dict(p021))


def norm_family(reg: VariantRegistry, base: dict) -> None:
    reg.register("norm_f32", "norm.comp", merge_defines(base, {"A_TYPE": "float", "D_TYPE": "float"}))
    reg.register("group_norm_f32", "group_norm.comp", merge_defines(base, {"A_TYPE": "float", "D_TYPE": "float"}))
    reg.register("rms_norm_f32", "rms_norm.comp",
                 merge_defines(base, {"A_TYPE": "float", "B_TYPE": "float", "D_TYPE": "float"}))
    reg.register("rms_norm_partials_f32", "rms_norm_partials.comp",
                 merge_defines(base, {"A_TYPE": "float", "B_TYPE": "float", "D_TYPE": "float"}))
    reg.register("rms_norm_back_f32", "rms_norm_back.comp",
                 merge_defines(base, {"A_TYPE": "float", "B_TYPE": "float", "D_TYPE": "float"}))
    reg.register("l2_norm_f32", "l2_norm.comp", merge_defines(base, {"A_TYPE": "float", "D_TYPE": "float"}))


def copy_family(reg: VariantRegistry) -> None:
    workaround = {"OPTIMIZATION_ERROR_WORKAROUND": "1"}
    for prefix, template in (("cpy", "copy.comp"), ("contig_cpy", "contig_copy.comp")):
        reg.register(f"{prefix}_f32_f32", template, {"A_TYPE": "float", "D_TYPE": "float"})
        if prefix == "contig_cpy":
            reg.register("contig_cpy_f32_i32", template, {"A_TYPE": "float", "D_TYPE": "int"})
            reg.register("contig_cpy_i32_f32", template, {"A_TYPE": "int", "D_TYPE": "float"})
        reg.register(f"{prefix}_f32_f16", template, {"A_TYPE": "float", "D_TYPE": "float16_t"})
        reg.register(f"{prefix}_f16_f16", template, {"A_TYPE": "float16_t", "D_TYPE": "float16_t", **workaround})
        reg.register(f"{prefix}_f16_f32", template, {"A_TYPE": "float16_t", "D_TYPE": "float", **workaround})
        reg.register(f"{prefix}_f32_bf16", template, {"A_TYPE": "float", "D_TYPE": "uint16_t", "DATA_D_BF16": "1"})
    reg.register("cpy_f32_i32", "copy.comp", {"A_TYPE": "float", "D_TYPE": "int"})
    reg.register("cpy_i32_f32", "copy.comp", {"A_TYPE": "int", "D_TYPE": "float"})

    for t in QUANT_COPY_TYPES:
        quant = {data_a_key(t): "1", "D_TYPE": "float", "FLOAT_TYPE": "float"}
        reg.register(f"cpy_f32_{t}", "copy_to_quant.comp", quant)
        reg.register(f"cpy_f32_{t}_rte", "copy_to_quant.comp", {**quant, "RTE16": "1"})
        reg.register(f"cpy_{t}_f32", "copy_from_quant.comp", dict(quant))

    for t in SET_ROWS_TYPES:
        set_rows = {"SET_ROWS": "1", data_a_key(t): "1", "B_TYPE": "uvec2", "D_TYPE": "float", "FLOAT_TYPE": "float"}
        reg.register(f"set_rows_{t}", "copy_to_quant.comp", set_rows)
        reg.register(f"set_rows_{t}_rte", "copy_to_quant.comp", {**set_rows, "RTE16": "1"})


def binary_op_family(reg: VariantRegistry) -> None:
    """add/sub/mul/div/add_rms over src0, src1, dst precision and rte."""
    for op in BINARY_OP_NAMES:
        source = "add" if op == "add_rms" else op
        for src0_f16 in (False, True):
            for src1_f16 in (False, True):
                for dst_f16 in (False, True):
                    for rte in (False, True):
                        name = op + binary_op_suffix(src0_f16, src1_f16, dst_f16) + ("_rte" if rte else "")
                        reg.register(name, source + ".comp", {
                            "A_TYPE": _type_str(src0_f16), "B_TYPE": _type_str(src1_f16),
                            "D_TYPE": _type_str(dst_f16), "FLOAT_TYPE": "float",
                            "RTE16": "1" if rte else "0", "ADD_RMS": "1" if op == "add_rms" else "0"})


def misc_family(reg: VariantRegistry) -> None:
    f32_binary = {"A_TYPE": "float", "B_TYPE": "float", "D_TYPE": "float", "FLOAT_TYPE": "float"}
    f32_unary = {"A_TYPE": "float", "D_TYPE": "float", "FLOAT_TYPE": "float"}

    reg.register("sub_f32", "sub.comp", dict(f32_binary))
    reg.register("acc_f32", "acc.comp", dict(f32_binary))

    reg.register("split_k_reduce", "mul_mat_split_k_reduce.comp", {})
    reg.register("fa_split_k_reduce", "flash_attn_split_k_reduce.comp", {})

    reg.register("quantize_q8_1", "quantize_q8_1.comp", {})
    reg.register("quantize_q8_1_subgroup", "quantize_q8_1.comp", {"USE_SUBGROUPS": "1"})
    reg.register("quantize_q8_1_x4", "quantize_q8_1.comp", {"QBLOCK_X4": "1"})
    reg.register("quantize_q8_1_x4_subgroup", "quantize_q8_1.comp", {"QBLOCK_X4": "1", "USE_SUBGROUPS": "1"})

    reg.register("mul_f32", "mul.comp", dict(f32_binary))
    reg.register("div_f32", "div.comp", dict(f32_binary))

    reg.register("repeat_f32", "repeat.comp", {"A_TYPE": "float", "D_TYPE": "float"})
    reg.register("repeat_back_f32", "repeat_back.comp", {"A_TYPE": "float", "D_TYPE": "float"})

    reg.register("scale_f32", "scale.comp", dict(f32_unary))
    reg.register("sqr_f32", "square.comp", dict(f32_unary))
    reg.register("sqrt_f32", "sqrt.comp", dict(f32_unary))
    reg.register("sin_f32", "sin.comp", dict(f32_unary))
    reg.register("cos_f32", "cos.comp", dict(f32_unary))
    reg.register("clamp_f32", "clamp.comp", dict(f32_unary))

    reg.register("pad_f32", "pad.comp", {"A_TYPE": "float", "D_TYPE": "float"})

    reg.register("concat_f32", "concat.comp", {"A_TYPE": "float", "B_TYPE": "float", "D_TYPE": "float"})
    reg.register("concat_f16", "concat.comp", {"A_TYPE": "float16_t", "B_TYPE": "float16_t", "D_TYPE": "float16_t",
                                               "OPTIMIZATION_ERROR_WORKAROUND": "1"})
    reg.register("concat_i32", "concat.comp", {"A_TYPE": "int", "B_TYPE": "int", "D_TYPE": "int"})

    reg.register("upscale_f32", "upscale.comp", {"A_TYPE": "float", "B_TYPE": "float", "D_TYPE": "float"})


def activation_family(reg: VariantRegistry) -> None:
    for op in UNARY_OPS:
        reg.register(f"{op}_f16", f"{op}.comp", {"A_TYPE": "float16_t", "D_TYPE": "float16_t"})
        reg.register(f"{op}_f32", f"{op}.comp", {"A_TYPE": "float", "D_TYPE": "float"})

    for rte in (False, True):
        suffix = "_rte" if rte else ""
        rte16 = "1" if rte else "0"
        for op in GATED_OPS:
            reg.register(f"{op}_f16{suffix}", f"{op}.comp",
                         {"A_TYPE": "float16_t", "D_TYPE": "float16_t", "RTE16": rte16})
            reg.register(f"{op}_f32{suffix}", f"{op}.comp",
                         {"A_TYPE": "float", "D_TYPE": "float", "RTE16": rte16})

    reg.register("leaky_relu_f32", "leaky_relu.comp", {"A_TYPE": "float", "D_TYPE": "float"})
    reg.register("silu_back_f32", "silu_back.comp", {"A_TYPE": "float", "B_TYPE": "float", "D_TYPE": "float"})

    reg.register("diag_mask_inf_f32", "diag_mask_inf.comp", {"A_TYPE": "float", "D_TYPE": "float"})


def softmax_rope_family(reg: VariantRegistry, base: dict) -> None:
    reg.register("soft_max_f32", "soft_max.comp",
                 merge_defines(base, {"A_TYPE": "float", "B_TYPE": "float", "D_TYPE": "float"}))
    reg.register("soft_max_f32_f16", "soft_max.comp",
                 merge_defines(base, {"A_TYPE": "float", "B_TYPE": "float16_t", "D_TYPE": "float"}))
    reg.register("soft_max_back_f32", "soft_max_back.comp",
                 merge_defines(base, {"A_TYPE": "float", "B_TYPE": "float", "D_TYPE": "float"}))

    for mode in ROPE_MODES:
        template = f"rope_{mode}.comp"
        reg.register(f"rope_{mode}_f32", template, {"A_TYPE": "float", "D_TYPE": "float"})
        reg.register(f"rope_{mode}_f16", template, {"A_TYPE": "float16_t", "D_TYPE": "float16_t"})
        reg.register(f"rope_{mode}_f16_rte", template, {"A_TYPE": "float16_t", "D_TYPE": "float16_t", "RTE16": "1"})


def reduction_family(reg: VariantRegistry, base: dict) -> None:
    reg.register("argsort_f32", "argsort.comp", {"A_TYPE": "float"})

    reg.register("argmax_f32", "argmax.comp", merge_defines(base, {"A_TYPE": "float", "D_TYPE": "int"}))
    reg.register("sum_rows_f32", "sum_rows.comp", merge_defines(base, {"A_TYPE": "float", "D_TYPE": "float"}))
    reg.register("count_equal_i32", "count_equal.comp",
                 merge_defines(base, {"A_TYPE": "int", "B_TYPE": "int", "D_TYPE": "int"}))


def conv_family(reg: VariantRegistry, base: dict) -> None:
    for prefix, template in (("im2col", "im2col.comp"), ("im2col_3d", "im2col_3d.comp")):
        reg.register(f"{prefix}_f32", template, merge_defines(base, {"A_TYPE": "float", "D_TYPE": "float"}))
        reg.register(f"{prefix}_f32_f16", template, merge_defines(base, {"A_TYPE": "float", "D_TYPE": "float16_t"}))
        reg.register(f"{prefix}_f32_f16_rte", template,
                     merge_defines(base, {"A_TYPE": "float", "D_TYPE": "float16_t", "RTE16": "1"}))

    reg.register("timestep_embedding_f32", "timestep_embedding.comp",
                 merge_defines(base, {"A_TYPE": "float", "D_TYPE": "float"}))

    reg.register("conv_transpose_1d_f32", "conv_transpose_1d.comp",
                 {"A_TYPE": "float", "B_TYPE": "float", "D_TYPE": "float"})

    reg.register("pool2d_f32", "pool2d.comp", merge_defines(base, {"A_TYPE": "float", "D_TYPE": "float"}))

    reg.register("rwkv_wkv6_f32", "wkv6.comp", merge_defines(base, {"A_TYPE": "float"}))
    reg.register("rwkv_wkv7_f32", "wkv7.comp", merge_defines(base, {"A_TYPE": "float"}))

    reg.register("opt_step_adamw_f32", "opt_step_adamw.comp", merge_defines(base, {"A_TYPE": "float"}))
    reg.register("opt_step_sgd_f32", "opt_step_sgd.comp", merge_defines(base, {"A_TYPE": "float"}))

    for unroll, suffix in (("[[unroll]]", "_unroll"), ("", "")):
        for a_type, tag in (("float", "f32"), ("float16_t", "f16_f32")):
            reg.register(f"conv2d_{tag}{suffix}", "conv2d_mm.comp", {
                "A_TYPE": a_type, "B_TYPE": "float", "D_TYPE": "float",
                "USE_COLLECTIVES": "1", "UNROLL": unroll})

    if reg.features.coopmat2:
        for a_type, tag in (("float", "f32"), ("float16_t", "f16_f32")):
            reg.register(f"conv2d_{tag}", "conv2d_mm.comp", {
                "A_TYPE": a_type, "B_TYPE": "float", "D_TYPE": "float",
                "USE_COLLECTIVES": "1", "UNROLL": "[[unroll]]", "COOPMAT2": "1"},
                fp16=True, coopmat=False, coopmat2=True)

    for a_type, tag in (("float", "f32"), ("float16_t", "f16_f32")):
        for layout in ("WHCN", "CWHN"):
            reg.register(f"conv2d_dw_{layout.lower()}_{tag}", "conv2d_dw.comp", merge_defines(base, {
                "A_TYPE": a_type, "B_TYPE": "float", "D_TYPE": "float", layout: "1"}))


def add_family(reg: VariantRegistry, base: dict) -> None:
    reg.register("roll_f32", "roll.comp", merge_defines(base, {"A_TYPE": "float", "D_TYPE": "float"}))

    reg.register("add_id_f32", "add_id.comp",
                 merge_defines(base, {"A_TYPE": "float", "B_TYPE": "float", "D_TYPE": "float"}))

    multi_add = {"A_TYPE": "float", "B_TYPE": "float", "D_TYPE": "float", "FLOAT_TYPE": "float", "RTE16": "1"}
    reg.register("multi_add_f32", "multi_add.comp", {**multi_add, "ADD_RMS": "0"})
    reg.register("multi_add_rms_f32", "multi_add.comp", {**multi_add, "ADD_RMS": "1"})


def process_shaders(reg: VariantRegistry) -> VariantRegistry:
    """Register every shader variant of the catalog into ``reg``."""
    logger.info("Generating and compiling shaders to SPIR-V")
    base = {"FLOAT_TYPE": "float"}

    matmul_family(reg)
    flash_attn_family(reg, base)
    mul_mat_vec_family(reg, base)
    norm_family(reg, base)
    copy_family(reg)
    binary_op_family(reg)
    misc_family(reg)
    activation_family(reg)
    softmax_rope_family(reg, base)
    reduction_family(reg, base)
    conv_family(reg, base)
    add_family(reg, base)

    logger.debug(f"Registered {len(reg)} shader variants")
    return reg


def build_catalog(
    input_dir: Union[str, Path] = "vulkan-shaders",
    output_dir: Union[str, Path] = "/tmp",
    features: Optional[FeatureFlags] = None
) -> List[VariantSpec]:
    """Return the full variant list for the given compiler features."""
    reg = VariantRegistry(input_dir, output_dir, features)
    return process_shaders(reg).variants
