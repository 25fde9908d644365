"""Type-safe data models for shader variant generation using SerialDataclass."""

import json
from enum import Enum
from dataclasses import dataclass, field, asdict
from typing import Dict, Any, List, Optional, Type, TypeVar

import numpy as np

try:
    import dacite
except ImportError:
    raise ImportError("Please install dacite: pip install dacite")

T = TypeVar('T', bound='SerialDataclass')


class SerialDataclass:
    """Base class for dataclasses with strict dict decoding support"""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)  # type: ignore

    @classmethod
    def from_dict(cls: Type[T], data: Dict[str, Any]) -> T:
        return dacite.from_dict(data_class=cls, data=data, config=dacite.Config(strict=True))

    def __repr__(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False, indent=2)  # type:ignore


class MatMulIdMode(Enum):
    """Indirection-by-id mode of the matrix multiply shaders."""
    NONE = 0
    DEFAULT = 1
    SUBGROUP = 2


@dataclass
class FeatureFlags(SerialDataclass):
    """Capabilities of the external shader compiler and build options."""
    bfloat16: bool = False
    coopmat: bool = False
    coopmat2: bool = False
    integer_dot: bool = False
    debug_info: bool = False


@dataclass
class Config(SerialDataclass):
    """Invocation settings for a single generator run."""
    glslc: str = "glslc"
    input_dir: str = "vulkan-shaders"
    output_dir: str = "/tmp"
    target_hpp: str = "ggml-vulkan-shaders.hpp"
    target_cpp: str = "ggml-vulkan-shaders.cpp"
    target_cmake: Optional[str] = None
    no_embed: bool = False
    features: FeatureFlags = field(default_factory=FeatureFlags)

    def __post_init__(self):
        """Validate option combinations."""
        if self.target_cmake == "":
            self.target_cmake = None
        if self.no_embed and self.target_cmake is None:
            raise ValueError("--no-embed requires --target-cmake to be specified")


@dataclass(frozen=True)
class VariantSpec(SerialDataclass):
    """A single compiled specialization of a shader template."""
    name: str
    template_path: str
    output_path: str
    defines: Dict[str, str]
    flags: List[str]
    coopmat: bool = False


@dataclass
class EmittedBlob:
    """A variant as it appears in the host artifacts.

    In embed mode ``data`` holds the compiled SPIR-V bytes. In stub mode
    ``data`` is None and ``filename`` names the binary relative to the
    shader directory.
    """
    name: str
    data: Optional[np.ndarray] = None
    filename: Optional[str] = None

    @property
    def length(self) -> int:
        return 0 if self.data is None else int(self.data.size)
