from dataclasses import dataclass
from typing import Tuple, Union


@dataclass(frozen=True)
class Material:
    """
    Plate material. The dispersion constant C relates drive frequency to
    wave number through k = sqrt(f / C).
    """
    name: str
    dispersion_constant: float

    def wave_number(self, freq):
        return (freq / self.dispersion_constant) ** 0.5


COPPER          = Material("Copper", 0.178)
ALUMINUM        = Material("Aluminum", 0.246)
ZINC            = Material("Zinc", 0.166)
STAINLESS_STEEL = Material("Stainless Steel", 0.238)

MATERIALS: Tuple[Material, ...] = (COPPER, ALUMINUM, ZINC, STAINLESS_STEEL)
DEFAULT_MATERIAL = ALUMINUM


def get_material(material: Union[str, Material]) -> Material:
    """Resolve a material by (case-insensitive) name, or pass a Material through."""
    if isinstance(material, Material):
        return material
    for candidate in MATERIALS:
        if candidate.name.lower() == str(material).lower():
            return candidate
    names = ", ".join(m.name for m in MATERIALS)
    raise ValueError(f"Unknown material '{material}' (expected one of: {names})")
