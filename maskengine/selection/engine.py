"""
SelectMask Pro - Selection Engine

Fachada única sobre os componentes de seleção. Não guarda estado entre
chamadas: cada método delega para a função pura correspondente e devolve
uma nova Selection.

Uso:
    engine = create_selection_engine()
    edges = engine.compute_edge_map(image)
    sel = engine.quick_select(image, 120, 80, radius=10, edge_map=edges)
    sel = engine.refine_edge(sel, image, RefineEdgeOptions(radius=4, feather=1))
"""

from typing import Optional

import numpy as np

from config.settings import (
    DEFAULT_FUZZINESS,
    EDGE_DEFAULT_RADIUS,
    EDGE_DEFAULT_SENSITIVITY,
    MAGIC_WAND_DEFAULT_TOLERANCE,
)
from maskengine.constants import SelectionMode
from maskengine.logging.setup import get_logger
from maskengine.selection import algebra, edge_detector, refinement, region_selectors
from maskengine.selection.algebra import ModeLike
from maskengine.selection.types import (
    RGBA,
    ColorRangeOptions,
    EdgeDetectionOptions,
    RefineEdgeOptions,
    Selection,
)

logger = get_logger("SelectionEngine")


class SelectionEngine:
    """
    Motor de seleção e refinamento de máscaras.

    Todas as operações são síncronas e determinísticas. A única mutação
    exposta é apply_selection_as_alpha, que escreve no buffer do chamador.
    """

    def __init__(self, edge_options: Optional[EdgeDetectionOptions] = None):
        """
        Args:
            edge_options: Opções padrão do Quick Select quando o chamador
                não informa radius nem options
        """
        self.edge_options = edge_options or EdgeDetectionOptions()
        logger.debug(f"SelectionEngine inicializado (edge_options={self.edge_options})")

    # =====================================================================
    # Detecção
    # =====================================================================

    def compute_edge_map(self, image: np.ndarray) -> np.ndarray:
        return edge_detector.compute_edge_map(image)

    def compute_saliency_map(self, image: np.ndarray, edge_map: Optional[np.ndarray] = None) -> np.ndarray:
        return region_selectors.compute_saliency_map(image, edge_map)

    # =====================================================================
    # Seletores
    # =====================================================================

    def quick_select(
        self,
        image: np.ndarray,
        start_x: float,
        start_y: float,
        radius: Optional[float] = None,
        mode: ModeLike = SelectionMode.NEW,
        existing_selection: Optional[Selection] = None,
        options: Optional[EdgeDetectionOptions] = None,
        edge_map: Optional[np.ndarray] = None,
        auto_enhance: bool = False
    ) -> Selection:
        if radius is None and options is None:
            options = self.edge_options
        return region_selectors.quick_select(
            image, start_x, start_y,
            radius=radius,
            mode=mode,
            existing_selection=existing_selection,
            options=options,
            edge_map=edge_map,
            auto_enhance=auto_enhance
        )

    def select_subject(self, image: np.ndarray, edge_map: Optional[np.ndarray] = None) -> Selection:
        return region_selectors.select_subject(image, edge_map)

    def select_color_range(self, image: np.ndarray, options: ColorRangeOptions) -> Selection:
        return region_selectors.select_color_range(image, options)

    def select_color_range_at(
        self,
        image: np.ndarray,
        x: float,
        y: float,
        fuzziness: float = DEFAULT_FUZZINESS,
        invert: bool = False
    ) -> Selection:
        return region_selectors.select_color_range_at(image, x, y, fuzziness, invert)

    def sample_color(self, image: np.ndarray, x: float, y: float) -> Optional[RGBA]:
        return region_selectors.sample_color(image, x, y)

    def magic_wand_select(
        self,
        image: np.ndarray,
        x: float,
        y: float,
        tolerance: float = MAGIC_WAND_DEFAULT_TOLERANCE,
        contiguous: bool = True
    ) -> Selection:
        return region_selectors.magic_wand_select(image, x, y, tolerance, contiguous)

    def select_rectangle(
        self,
        width: int,
        height: int,
        x: float,
        y: float,
        rect_width: float,
        rect_height: float,
        feather: float = 0
    ) -> Selection:
        return region_selectors.select_rectangle(width, height, x, y, rect_width, rect_height, feather)

    def select_all(self, width: int, height: int) -> Selection:
        return region_selectors.select_all(width, height)

    def empty_selection(self, width: int, height: int) -> Selection:
        return region_selectors.empty_selection(width, height)

    # =====================================================================
    # Modificadores
    # =====================================================================

    def grow_selection(self, selection: Selection, pixels: float) -> Selection:
        return algebra.grow_selection(selection, pixels)

    def shrink_selection(self, selection: Selection, pixels: float) -> Selection:
        return algebra.shrink_selection(selection, pixels)

    def feather_selection(self, selection: Selection, radius: float) -> Selection:
        return algebra.feather_selection(selection, radius)

    def smooth_selection(self, selection: Selection, radius: float) -> Selection:
        return algebra.smooth_selection(selection, radius)

    def invert_selection(self, selection: Selection, tight_bounds: bool = False) -> Selection:
        return algebra.invert_selection(selection, tight_bounds)

    def combine_selections(self, a: Selection, b: Selection, mode: ModeLike) -> Selection:
        return algebra.combine_selections(a, b, mode)

    def apply_levels(
        self,
        selection: Selection,
        input_black: float = 0,
        input_white: float = 255,
        gamma: float = 1.0
    ) -> Selection:
        return algebra.apply_levels(selection, input_black, input_white, gamma)

    def refine_edge(
        self,
        selection: Selection,
        image: np.ndarray,
        options: Optional[RefineEdgeOptions] = None,
        edge_map: Optional[np.ndarray] = None
    ) -> Selection:
        return refinement.refine_edge(selection, image, options, edge_map)

    # =====================================================================
    # Alpha
    # =====================================================================

    def selection_from_alpha(self, image: np.ndarray) -> Selection:
        return algebra.selection_from_alpha(image)

    def apply_selection_as_alpha(self, image: np.ndarray, selection: Selection) -> None:
        algebra.apply_selection_as_alpha(image, selection)


def create_selection_engine(
    radius: float = EDGE_DEFAULT_RADIUS,
    sensitivity: float = EDGE_DEFAULT_SENSITIVITY
) -> SelectionEngine:
    """Factory function para criar o motor de seleção."""
    return SelectionEngine(
        edge_options=EdgeDetectionOptions(sensitivity=sensitivity, radius=radius)
    )
