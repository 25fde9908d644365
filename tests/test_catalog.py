"""Tests for the shader variant catalog."""

import pytest

from vkshadersgen.catalog import build_catalog
from vkshadersgen.naming import BINARY_OP_NAMES
from vkshadersgen.types import FeatureFlags


ALL_FEATURES = FeatureFlags(bfloat16=True, coopmat=True, coopmat2=True, integer_dot=True)


def by_name(variants):
    return {v.name: v for v in variants}


@pytest.fixture(scope="module")
def default_catalog():
    return by_name(build_catalog("in", "out"))


@pytest.fixture(scope="module")
def full_catalog():
    return by_name(build_catalog("in", "out", ALL_FEATURES))


def test_catalog_is_deterministic():
    first = build_catalog("in", "out", ALL_FEATURES)
    second = build_catalog("in", "out", ALL_FEATURES)
    assert [v.name for v in first] == [v.name for v in second]
    assert [v.flags for v in first] == [v.flags for v in second]


def test_catalog_names_are_unique():
    for features in (FeatureFlags(), ALL_FEATURES):
        names = [v.name for v in build_catalog("in", "out", features)]
        assert len(names) == len(set(names))


def test_matmul_comes_first():
    variants = build_catalog("in", "out")
    assert [v.name for v in variants[:4]] == [
        "matmul_f32_f16_fp32",
        "matmul_f32_f16_aligned_fp32",
        "matmul_f16_aligned_fp32",
        "matmul_f16_fp32",
    ]


def test_matmul_f32_f16_flags(default_catalog):
    variant = default_catalog["matmul_f32_f16"]
    assert variant.template_path == "in/mul_mm.comp"
    assert variant.output_path == "out/matmul_f32_f16.spv"
    assert variant.flags == [
        "-fshader-stage=compute",
        "--target-env=vulkan1.2",
        "-O",
        "-DACC_TYPE=float",
        "-DB_TYPE=float16_t",
        "-DDATA_A_F32=1",
        "-DD_TYPE=float",
        "-DFLOAT16=1",
        "-DFLOAT_TYPE=float16_t",
        "-DFLOAT_TYPE_VEC2=f16vec2",
    ]


def test_flag_invariants(full_catalog):
    for name, variant in full_catalog.items():
        assert variant.flags[0] == "-fshader-stage=compute"
        cm2 = "_cm2" in name
        assert ("--target-env=vulkan1.3" in variant.flags) == cm2
        assert ("--target-env=vulkan1.2" in variant.flags) == (not cm2)
        assert ("-O" in variant.flags) == (not variant.coopmat and "bf16" not in name)
        assert "-g" not in variant.flags

        rendered = [f for f in variant.flags if f.startswith("-D")]
        assert rendered == [f"-D{k}={v}" for k, v in sorted(variant.defines.items())]


def test_suffix_order(full_catalog):
    for name in full_catalog:
        if "_f16acc" in name and "_cm" in name:
            assert name.index("_f16acc") < name.index("_cm")
        if "_fp32" in name:
            assert name.endswith("_fp32")
            assert "_cm" not in name


def test_debug_info_adds_g_flag():
    variants = build_catalog("in", "out", FeatureFlags(debug_info=True))
    assert all("-g" in v.flags for v in variants)


def test_fp32_flavor_loads(default_catalog):
    aligned = default_catalog["matmul_f32_f32_aligned_fp32"]
    assert aligned.defines["LOAD_VEC_A"] == "4"
    assert aligned.defines["B_TYPE"] == "vec4"
    assert aligned.defines["FLOAT_TYPE"] == "float"
    assert aligned.defines["FLOAT_TYPE_VEC2"] == "vec2"
    assert "FLOAT16" not in aligned.defines


def test_fp16_flavor_loads(default_catalog):
    assert default_catalog["matmul_f32_f32"].defines["LOAD_VEC_A"] == "1"

    aligned = default_catalog["matmul_f32_f32_aligned"]
    assert aligned.defines["LOAD_VEC_A"] == "8"
    assert aligned.defines["B_TYPE"] == "mat2x4"

    assert default_catalog["matmul_q4_0_f32"].defines["LOAD_VEC_A"] == "8"

    q2k = default_catalog["matmul_q2_k_f32_aligned"]
    assert q2k.defines["LOAD_VEC_A"] == "2"
    assert q2k.defines["LOAD_VEC_B"] == "8"
    assert q2k.defines["DATA_A_Q2_K"] == "1"


def test_f16acc_defines(default_catalog):
    variant = default_catalog["matmul_f16_f16acc"]
    assert variant.defines["ACC_TYPE"] == "float16_t"
    assert variant.defines["ACC_TYPE_MAX"] == '"float16_t(65504.0)"'


def test_matmul_id_modes(default_catalog):
    assert default_catalog["matmul_id_f16"].defines["MUL_MAT_ID"] == "1"
    assert "MUL_MAT_ID_USE_SUBGROUPS" not in default_catalog["matmul_id_f16"].defines
    assert default_catalog["matmul_id_subgroup_f16"].defines["MUL_MAT_ID_USE_SUBGROUPS"] == "1"
    assert "MUL_MAT_ID" not in default_catalog["matmul_f16"].defines


def test_cooperative_variants_follow_features(default_catalog, full_catalog):
    for name in default_catalog:
        assert "_cm1" not in name and "_cm2" not in name

    assert "matmul_f16_cm1" in full_catalog
    assert "matmul_f16_f16acc_cm2" in full_catalog
    assert "matmul_id_subgroup_f16_cm1" in full_catalog
    # the plain matmul_id mode has no cooperative flavor
    assert "matmul_id_f16_cm1" not in full_catalog
    assert "matmul_id_f16_cm2" not in full_catalog
    assert full_catalog["matmul_f16_cm1"].defines["COOPMAT"] == "1"


def test_coopmat2_skips_f32_b_type(full_catalog):
    assert "matmul_q4_0_f16_cm2" in full_catalog
    assert "matmul_q4_0_f32_cm2" not in full_catalog

    cm2 = full_catalog["matmul_q4_0_f16_aligned_cm2"]
    assert cm2.template_path == "in/mul_mm_cm2.comp"
    assert cm2.defines["LOAD_VEC_A"] == "1"
    assert cm2.defines["B_TYPE"] == "float16_t"


def test_bf16_scalar_variants_always_present(default_catalog):
    variant = default_catalog["matmul_bf16"]
    assert variant.defines["FLOAT_TYPE"] == "float"
    assert variant.defines["TO_FLOAT_TYPE"] == "bf16_to_fp32"
    assert variant.defines["B_TYPE"] == "uint16_t"
    assert "-O" not in variant.flags
    assert "matmul_bf16_aligned_fp32" in default_catalog


def test_bf16_cooperative_variants_need_bfloat16():
    without = by_name(build_catalog("in", "out", FeatureFlags(coopmat=True, coopmat2=True)))
    assert "matmul_bf16" in without
    assert "matmul_bf16_cm1" not in without
    assert "matmul_bf16_cm2" not in without

    with_bf16 = by_name(build_catalog("in", "out", FeatureFlags(bfloat16=True, coopmat=True)))
    variant = with_bf16["matmul_bf16_cm1"]
    assert variant.defines["FLOAT_TYPE"] == "bfloat16_t"
    assert variant.defines["TO_FLOAT_TYPE"] == "uintBitsToBFloat16EXT"


def test_integer_dot_variants(default_catalog, full_catalog):
    assert "matmul_q4_0_q8_1" not in default_catalog
    assert "mul_mat_vec_q4_0_q8_1_f32" not in default_catalog

    variant = full_catalog["matmul_q4_0_q8_1"]
    assert variant.template_path == "in/mul_mmq.comp"
    assert "matmul_q4_0_q8_1_fp32" in full_catalog
    assert "matmul_q4_0_q8_1_f16acc" in full_catalog
    assert "matmul_q4_0_q8_1_cm1" not in full_catalog
    assert "matmul_id_q4_0_q8_1" not in full_catalog
    assert "matmul_q4_k_q8_1" not in full_catalog

    for suffix in ("", "_subgroup", "_subgroup_no_shmem"):
        vecq = full_catalog["mul_mat_vec_q8_0_q8_1_f32" + suffix]
        assert vecq.template_path == "in/mul_mat_vecq.comp"
    assert "mul_mat_vec_iq4_nl_q8_1_f32" not in full_catalog


def test_flash_attn_variants(default_catalog, full_catalog):
    assert "flash_attn_f32_f16_f16" in default_catalog
    assert "flash_attn_f32_f16_q4_0_f16acc" in default_catalog
    assert default_catalog["flash_attn_f32_f16_q8_0"].defines["BLOCK_SIZE"] == "QUANT_K_Q8_0"
    assert "flash_attn_f32_f16_q4_1" not in default_catalog
    assert "flash_attn_f32_f16_f32" not in default_catalog

    cm2 = full_catalog["flash_attn_f32_f16_q4_1_cm2"]
    assert cm2.template_path == "in/flash_attn_cm2.comp"
    assert cm2.defines["DEQUANTFUNC"] == "dequantFuncQ4_1"
    assert cm2.defines["BLOCK_SIZE"] == "QUANT_K_Q4_1"
    assert "flash_attn_f32_f16_q4_1_cm1" not in full_catalog
    assert full_catalog["flash_attn_f32_f16_q4_0_f16acc_cm1"].defines["COOPMAT"] == "1"


def test_mul_mat_vec_variants(default_catalog):
    for suffix in ("", "_subgroup", "_subgroup_no_shmem"):
        for btype in ("f32", "f16"):
            assert f"mul_mat_vec_q4_k_{btype}_f32{suffix}" in default_catalog

    assert default_catalog["mul_mat_vec_q4_k_f32_f32"].template_path == "in/mul_mat_vec_q4_k.comp"
    assert default_catalog["mul_mat_vec_iq4_nl_f16_f32"].template_path == "in/mul_mat_vec.comp"
    assert default_catalog["mul_mat_vec_f16_f32_f32_subgroup"].defines["USE_SUBGROUP_ADD"] == "1"
    assert "mul_mat_vec_id_bf16_f32" in default_catalog
    assert "mul_mat_vec_p021_f16_f32_subgroup_add" in default_catalog
    assert "mul_mat_vec_nc_f16_f32" in default_catalog


def test_dequant_and_get_rows(default_catalog):
    assert "dequant_q4_0" in default_catalog
    assert "dequant_f32" in default_catalog
    assert "dequant_f16" not in default_catalog
    assert "dequant_bf16" not in default_catalog

    assert default_catalog["get_rows_f16"].defines["OPTIMIZATION_ERROR_WORKAROUND"] == "1"
    assert default_catalog["get_rows_q4_0_f32"].template_path == "in/get_rows_quant.comp"
    assert "get_rows_q4_k" not in default_catalog


def test_binary_op_variants(default_catalog):
    binary = [name for name in default_catalog
              if any(name.startswith(op + "_f") for op in BINARY_OP_NAMES)
              and name.count("_f") >= 3]
    assert len(binary) == len(BINARY_OP_NAMES) * 16

    variant = default_catalog["add_rms_f16_f32_f16_rte"]
    assert variant.template_path == "in/add.comp"
    assert variant.defines["ADD_RMS"] == "1"
    assert variant.defines["RTE16"] == "1"
    assert variant.defines["A_TYPE"] == "float16_t"
    assert variant.defines["B_TYPE"] == "float"


def test_conv2d_coopmat2(default_catalog, full_catalog):
    assert "conv2d_f32_unroll" in default_catalog
    assert "conv2d_f32" in default_catalog
    assert "conv2d_f32_cm2" not in default_catalog

    variant = full_catalog["conv2d_f16_f32_cm2"]
    assert variant.defines["COOPMAT2"] == "1"
    assert "--target-env=vulkan1.3" in variant.flags


def test_common_float_type_is_kept(default_catalog):
    # base FLOAT_TYPE wins over the entry value
    assert default_catalog["norm_f32"].defines["FLOAT_TYPE"] == "float"
    assert default_catalog["mul_mat_vec_q4_0_f32_f32"].defines["FLOAT_TYPE"] == "float"
