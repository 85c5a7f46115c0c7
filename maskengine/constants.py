from enum import Enum


class SelectionMode(str, Enum):
    """Modos de combinação de seleção."""
    NEW = "new"
    ADD = "add"
    SUBTRACT = "subtract"
    INTERSECT = "intersect"

    @classmethod
    def list(cls):
        return list(map(lambda c: c.value, cls))


class ColorRangeKind(str, Enum):
    """Faixas do Color Range. Apenas SAMPLED é avaliada por este motor."""
    SHADOWS = "shadows"
    MIDTONES = "midtones"
    HIGHLIGHTS = "highlights"
    REDS = "reds"
    YELLOWS = "yellows"
    GREENS = "greens"
    CYANS = "cyans"
    BLUES = "blues"
    MAGENTAS = "magentas"
    SAMPLED = "sampled"

    @classmethod
    def list(cls):
        return list(map(lambda c: c.value, cls))


class RefineOutput(str, Enum):
    """Destino do resultado do Refine Edge (consumido pelo compositor externo)."""
    SELECTION = "selection"
    LAYER_MASK = "layer-mask"
    NEW_LAYER = "new-layer"
    NEW_LAYER_WITH_MASK = "new-layer-with-mask"


# Canais do buffer RGBA
CHANNEL_R = 0
CHANNEL_G = 1
CHANNEL_B = 2
CHANNEL_A = 3
