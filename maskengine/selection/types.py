"""
SelectMask Pro - Tipos de Seleção

Value-objects trocados entre o motor e os colaboradores externos:
- Rect: retângulo inteiro {x, y, width, height}
- Selection: máscara RGBA8 + bounds + flag active
- Opções tipadas (EdgeDetection, ColorRange, RefineEdge)

Configuração fora do intervalo documentado é ajustada (clamp) para o valor
válido mais próximo em __post_init__, nunca rejeitada.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, NamedTuple, Tuple, Union

import numpy as np

from config.settings import (
    COLOR_RANGE_MAX_FUZZINESS,
    DEFAULT_FUZZINESS,
    EDGE_DEFAULT_RADIUS,
    EDGE_DEFAULT_SENSITIVITY,
    REFINE_MAX_CONTRAST,
    REFINE_MAX_DECONTAMINATE,
    REFINE_MAX_SHIFT,
    REFINE_MAX_SMOOTH,
)
from maskengine.constants import ColorRangeKind, RefineOutput
from maskengine.logging.setup import get_logger
from maskengine.utils.pixel_buffer import compute_bounds, ensure_rgba

logger = get_logger("SelectionTypes")


def clamp_option(value: float, low: float, high: float, name: str) -> float:
    """Ajusta `value` para [low, high], registrando o ajuste em DEBUG."""
    clamped = min(max(value, low), high)
    if clamped != value:
        logger.debug(f"Opção '{name}' fora do intervalo [{low}, {high}]: {value} -> {clamped}")
    return clamped


@dataclass(frozen=True)
class Rect:
    """Retângulo inteiro em coordenadas de pixel."""
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0

    @classmethod
    def empty(cls) -> Rect:
        return cls(0, 0, 0, 0)

    @classmethod
    def from_mask(cls, mask: np.ndarray) -> Rect:
        """Bounds mínimos dos pixels com força > 0."""
        return cls(*compute_bounds(mask))

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    @property
    def area(self) -> int:
        return self.width * self.height

    def to_dict(self) -> Dict[str, int]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


class RGBA(NamedTuple):
    """Cor RGBA 8-bit."""
    r: int
    g: int
    b: int
    a: int = 255


ColorLike = Union[RGBA, Tuple[int, int, int], Tuple[int, int, int, int]]


def as_rgba(color: ColorLike) -> RGBA:
    """Normaliza tupla (r, g, b[, a]) em RGBA, saturando cada canal em [0, 255]."""
    values = [int(min(max(c, 0), 255)) for c in color]
    if len(values) == 3:
        values.append(255)
    if len(values) != 4:
        raise ValueError(f"Cor deve ter 3 ou 4 componentes, recebido {len(values)}")
    return RGBA(*values)


@dataclass(eq=False)
class Selection:
    """
    Seleção produzida pelo motor.

    A máscara é uma cópia privada marcada como somente-leitura: o buffer
    do chamador continua gravável e toda operação aloca um novo buffer. `None` (e não uma Selection vazia) representa "sem seleção".
    """
    mask: np.ndarray  # (H, W, 4) uint8, força em R/G/B
    bounds: Rect
    active: bool = True

    def __post_init__(self):
        ensure_rgba(self.mask, "selection.mask")
        self.mask = np.array(self.mask, copy=True)
        self.mask.setflags(write=False)

    @classmethod
    def from_mask(cls, mask: np.ndarray) -> Selection:
        """Cria seleção recalculando os bounds a partir da máscara."""
        return cls(mask=mask, bounds=Rect.from_mask(mask), active=True)

    @property
    def width(self) -> int:
        return int(self.mask.shape[1])

    @property
    def height(self) -> int:
        return int(self.mask.shape[0])

    @property
    def strength(self) -> np.ndarray:
        """View 2D (somente-leitura) da força da seleção."""
        return self.mask[..., 0]

    @property
    def is_empty(self) -> bool:
        return self.bounds.is_empty

    def copy_mask(self) -> np.ndarray:
        """Cópia gravável da máscara, para operações que escrevem no resultado."""
        return np.array(self.mask, copy=True)


@dataclass
class EdgeDetectionOptions:
    """
    Opções do Quick Select.

    `sensitivity` e `contiguous` são aceitos mas reservados: os limiares de
    borda (0.3) e de cor (150) são constantes nesta versão.
    """
    sensitivity: float = EDGE_DEFAULT_SENSITIVITY  # 0-100
    radius: float = EDGE_DEFAULT_RADIUS            # px >= 0
    contiguous: bool = True

    def __post_init__(self):
        self.sensitivity = clamp_option(self.sensitivity, 0, 100, "sensitivity")
        self.radius = clamp_option(self.radius, 0, float("inf"), "radius")


@dataclass
class ColorRangeOptions:
    """
    Opções do Color Range.

    Apenas `range=SAMPLED` (distância direta de cor) é avaliado. As demais
    faixas tonais são aceitas e tratadas como SAMPLED.
    """
    target_color: ColorLike = RGBA(0, 0, 0)
    fuzziness: float = DEFAULT_FUZZINESS  # 0-200
    range: ColorRangeKind = ColorRangeKind.SAMPLED
    localized: bool = False
    localized_radius: float = 0
    invert: bool = False

    def __post_init__(self):
        self.target_color = as_rgba(self.target_color)
        self.fuzziness = clamp_option(self.fuzziness, 0, COLOR_RANGE_MAX_FUZZINESS, "fuzziness")
        self.range = ColorRangeKind(self.range)
        self.localized_radius = clamp_option(self.localized_radius, 0, float("inf"), "localized_radius")


@dataclass
class RefineEdgeOptions:
    """
    Opções do Refine Edge.

    `decontaminate`, `decontaminate_amount` e `output` são informativos: o
    motor os repassa ao colaborador que materializa o resultado.
    """
    radius: float = 0                  # px >= 0
    smooth: float = 0                  # 0-100
    feather: float = 0                 # px >= 0
    contrast: float = 0                # 0-100
    shift: float = 0                   # -100..100
    decontaminate: bool = False
    decontaminate_amount: float = 0    # 0-100
    output: RefineOutput = RefineOutput.SELECTION

    def __post_init__(self):
        self.radius = clamp_option(self.radius, 0, float("inf"), "radius")
        self.smooth = clamp_option(self.smooth, 0, REFINE_MAX_SMOOTH, "smooth")
        self.feather = clamp_option(self.feather, 0, float("inf"), "feather")
        self.contrast = clamp_option(self.contrast, 0, REFINE_MAX_CONTRAST, "contrast")
        self.shift = clamp_option(self.shift, -REFINE_MAX_SHIFT, REFINE_MAX_SHIFT, "shift")
        self.decontaminate_amount = clamp_option(
            self.decontaminate_amount, 0, REFINE_MAX_DECONTAMINATE, "decontaminate_amount"
        )
        self.output = RefineOutput(self.output)

