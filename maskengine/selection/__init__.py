"""
SelectMask Pro - Selection Components

Módulos do motor de seleção:
- types: Selection, Rect e opções tipadas
- edge_detector: mapa de bordas Sobel normalizado
- morphology: dilate/erode/close, blur gaussiano, mediana
- region_selectors: Quick Select, Select Subject, Color Range, Magic Wand
- refinement: pipeline Refine Edge
- algebra: combinação, inversão e conversões de alpha
- engine: fachada SelectionEngine
"""

from .types import (
    RGBA,
    ColorRangeOptions,
    EdgeDetectionOptions,
    Rect,
    RefineEdgeOptions,
    Selection,
)
from .edge_detector import compute_edge_map
from .algebra import (
    apply_levels,
    apply_selection_as_alpha,
    combine_selections,
    feather_selection,
    grow_selection,
    invert_selection,
    selection_from_alpha,
    shrink_selection,
    smooth_selection,
)
from .region_selectors import (
    compute_saliency_map,
    empty_selection,
    magic_wand_select,
    quick_select,
    sample_color,
    select_all,
    select_color_range,
    select_color_range_at,
    select_rectangle,
    select_subject,
)
from .refinement import refine_edge
from .engine import SelectionEngine, create_selection_engine

__all__ = [
    # Tipos
    'RGBA',
    'ColorRangeOptions',
    'EdgeDetectionOptions',
    'Rect',
    'RefineEdgeOptions',
    'Selection',
    # Operações
    'compute_edge_map',
    'compute_saliency_map',
    'quick_select',
    'select_subject',
    'select_color_range',
    'select_color_range_at',
    'sample_color',
    'magic_wand_select',
    'select_rectangle',
    'select_all',
    'empty_selection',
    'grow_selection',
    'shrink_selection',
    'feather_selection',
    'smooth_selection',
    'invert_selection',
    'combine_selections',
    'apply_levels',
    'refine_edge',
    'selection_from_alpha',
    'apply_selection_as_alpha',
    # Fachada
    'SelectionEngine',
    'create_selection_engine',
]
