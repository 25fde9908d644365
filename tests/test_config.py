"""Tests for configuration and compiler feature loading."""

import argparse
import json

import pytest

from vkshadersgen.config import load_config, load_features, merge_config_dicts, parse_bool
from vkshadersgen.exceptions import ConfigurationError
from vkshadersgen.types import Config, FeatureFlags


def make_args(**overrides):
    values = dict(glslc="glslc", input_dir="in", output_dir="out", target_hpp="x.hpp",
                  target_cpp="x.cpp", target_cmake=None, no_embed=False)
    values.update(overrides)
    return argparse.Namespace(**values)


def test_default_config():
    config = Config()
    assert config.glslc == "glslc"
    assert config.input_dir == "vulkan-shaders"
    assert config.output_dir == "/tmp"
    assert config.target_hpp == "ggml-vulkan-shaders.hpp"
    assert config.target_cpp == "ggml-vulkan-shaders.cpp"
    assert config.target_cmake is None
    assert not config.no_embed
    assert config.features == FeatureFlags()


def test_no_embed_requires_target_cmake():
    with pytest.raises(ValueError, match="--no-embed requires --target-cmake"):
        Config(no_embed=True)
    with pytest.raises(ValueError):
        Config(no_embed=True, target_cmake="")

    assert Config(no_embed=True, target_cmake="build.cmake").no_embed


def test_load_config():
    config = load_config(make_args(target_cmake="build.cmake"), FeatureFlags(coopmat=True))
    assert config.input_dir == "in"
    assert config.target_cmake == "build.cmake"
    assert config.features.coopmat

    with pytest.raises(ConfigurationError):
        load_config(make_args(no_embed=True), FeatureFlags())


def test_parse_bool():
    for value in ("1", "ON", "true", "Yes"):
        assert parse_bool(value) is True
    for value in ("", "0", "off", "FALSE", "no"):
        assert parse_bool(value) is False
    assert parse_bool("maybe") is None


def test_load_features_defaults():
    assert load_features() == FeatureFlags()


def test_load_features_from_environment(monkeypatch):
    monkeypatch.setenv("GGML_VULKAN_COOPMAT_GLSLC_SUPPORT", "ON")
    monkeypatch.setenv("GGML_VULKAN_INTEGER_DOT_GLSLC_SUPPORT", "1")
    monkeypatch.setenv("GGML_VULKAN_BFLOAT16_GLSLC_SUPPORT", "maybe")

    features = load_features()
    assert features.coopmat
    assert features.integer_dot
    assert not features.bfloat16
    assert not features.coopmat2


def test_load_features_from_file(tmp_path, monkeypatch):
    path = tmp_path / "features.json"
    path.write_text(json.dumps({"coopmat2": True, "bfloat16": True}))

    features = load_features(path)
    assert features.coopmat2
    assert features.bfloat16
    assert not features.coopmat

    # the environment overrides the file
    monkeypatch.setenv("GGML_VULKAN_BFLOAT16_GLSLC_SUPPORT", "off")
    monkeypatch.setenv("GGML_VULKAN_SHADERS_FEATURES", str(path))
    features = load_features()
    assert features.coopmat2
    assert not features.bfloat16


def test_load_features_invalid_file(tmp_path):
    with pytest.raises(ConfigurationError, match="not found"):
        load_features(tmp_path / "missing.json")

    bad_json = tmp_path / "bad.json"
    bad_json.write_text("{not json")
    with pytest.raises(ConfigurationError, match="Invalid JSON"):
        load_features(bad_json)

    unknown = tmp_path / "unknown.json"
    unknown.write_text(json.dumps({"coopmat3": True}))
    with pytest.raises(ConfigurationError):
        load_features(unknown)

    wrong_type = tmp_path / "wrong_type.json"
    wrong_type.write_text(json.dumps({"coopmat": "yes"}))
    with pytest.raises(ConfigurationError):
        load_features(wrong_type)


def test_merge_config_dicts():
    base = {"a": 1, "nested": {"x": 1, "y": 2}}
    merged = merge_config_dicts(base, {"nested": {"y": 3}, "b": 2})
    assert merged == {"a": 1, "b": 2, "nested": {"x": 1, "y": 3}}
    assert base["nested"]["y"] == 2
