"""Variant registration: turns a logical shader entry into a VariantSpec."""

from pathlib import Path
from typing import Dict, List, Optional, Union

from .types import FeatureFlags, VariantSpec
from .exceptions import RegistryError
from .naming import sorted_defines, target_env_flag, variant_name, wants_optimization
from .logging_config import get_logger

logger = get_logger('vkshadersgen.registry')

SPV_EXTENSION = ".spv"
SHADER_STAGE_FLAG = "-fshader-stage=compute"


class VariantRegistry:
    """Ordered, collision-checked collection of shader variants.

    Registration order is preserved; it is the order of the compile rules
    in the emitted build script.
    """

    def __init__(
        self,
        input_dir: Union[str, Path],
        output_dir: Union[str, Path],
        features: Optional[FeatureFlags] = None
    ):
        self.input_dir = Path(input_dir)
        self.output_dir = Path(output_dir)
        self.features = features or FeatureFlags()
        self._variants: List[VariantSpec] = []
        self._names = set()

    def register(
        self,
        base_name: str,
        template: str,
        defines: Dict[str, str],
        fp16: bool = True,
        coopmat: bool = False,
        coopmat2: bool = False,
        f16acc: bool = False
    ) -> VariantSpec:
        """Register one variant of ``template`` compiled with ``defines``."""
        name = variant_name(base_name, fp16, coopmat, coopmat2, f16acc)
        if name in self._names:
            raise RegistryError(f"Duplicate shader variant: {name}")

        flags = [SHADER_STAGE_FLAG, target_env_flag(name)]
        if wants_optimization(name, coopmat):
            flags.append("-O")
        if self.features.debug_info:
            flags.append("-g")

        ordered = sorted_defines(defines)
        flags.extend(f"-D{key}={value}" for key, value in ordered.items())

        variant = VariantSpec(
            name=name,
            template_path=str(self.input_dir / template),
            output_path=str(self.output_dir / (name + SPV_EXTENSION)),
            defines=ordered,
            flags=flags,
            coopmat=coopmat,
        )
        self._names.add(name)
        self._variants.append(variant)
        logger.debug(f"Registered {name} from {template}")
        return variant

    @property
    def variants(self) -> List[VariantSpec]:
        return list(self._variants)

    def names(self) -> List[str]:
        return [variant.name for variant in self._variants]

    def __len__(self) -> int:
        return len(self._variants)

    def __contains__(self, name: str) -> bool:
        return name in self._names

    def __iter__(self):
        return iter(self._variants)
