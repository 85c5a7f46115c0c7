"""
SelectMask Pro - Configurações do Sistema
Configurações centralizadas para o motor de seleção e refinamento de máscaras.

Todos os limiares numéricos do motor vivem aqui. Os valores são contratos:
alterá-los muda o resultado pixel-a-pixel das operações.
"""

import os
from typing import Tuple


# ============================================================================
# DETECÇÃO DE BORDAS (Sobel)
# ============================================================================

# Pesos de luminância (ITU-R BT.601)
LUMA_WEIGHTS: Tuple[float, float, float] = (0.299, 0.587, 0.114)


# ============================================================================
# QUICK SELECT (crescimento guiado por bordas)
# ============================================================================

QUICK_SELECT_EDGE_THRESHOLD = 0.3     # Bordas acima deste valor bloqueiam o crescimento
QUICK_SELECT_COLOR_TOLERANCE = 150    # Soma |dr|+|dg|+|db| máxima em relação à semente
QUICK_SELECT_RADIUS_FACTOR = 3        # Raio máximo = radius * fator
QUICK_SELECT_FREE_DEPTH = 1           # Profundidades <= este valor são sempre aceitas
QUICK_SELECT_ENHANCE_RADIUS = 1       # Raio do median usado pelo auto-enhance

# Opções de detecção (reservadas; limiares acima são fixos nesta versão)
EDGE_DEFAULT_SENSITIVITY = 50
EDGE_DEFAULT_RADIUS = 10


# ============================================================================
# SELECT SUBJECT (saliência heurística)
# ============================================================================

SALIENCY_EDGE_WEIGHT = 0.3
SALIENCY_CENTER_WEIGHT = 0.4
SALIENCY_SATURATION_WEIGHT = 0.3
SALIENCY_CENTER_FALLOFF = 0.5         # center_bias = 1 - falloff * (dist / max_dist)

SUBJECT_SEED_THRESHOLD = 0.35         # Saliência mínima para iniciar uma região
SUBJECT_EXPAND_FACTOR = 0.8           # Expansão continua enquanto saliência >= seed * fator
SUBJECT_MIN_REGION_SIZE = 100         # Regiões menores são descartadas
SUBJECT_CLOSE_RADIUS = 3              # Fechamento morfológico final


# ============================================================================
# COLOR RANGE
# ============================================================================

COLOR_RANGE_FUZZINESS_SCALE = 2.55    # fuzziness 0-200 -> distância 0-510
COLOR_RANGE_MAX_FUZZINESS = 200
DEFAULT_FUZZINESS = int(os.environ.get('SELECTMASK_DEFAULT_FUZZINESS', 40))

# Magic Wand
MAGIC_WAND_DEFAULT_TOLERANCE = 32
MAGIC_WAND_MAX_TOLERANCE = 255


# ============================================================================
# REFINE EDGE (pipeline de refinamento)
# ============================================================================

REFINE_EDGE_ZONE_DIFF = 128           # Diferença entre vizinhos que marca transição
REFINE_SMART_EDGE_THRESHOLD = 0.5     # Borda da imagem acima disto binariza a máscara
REFINE_BINARIZE_THRESHOLD = 127       # valor > limiar -> 255
REFINE_SMOOTH_DIVISOR = 20            # raio do blur = smooth / divisor
REFINE_CONTRAST_DIVISOR = 50          # amount = contrast / divisor
REFINE_SHIFT_DIVISOR = 10             # raio do shift = |shift| / divisor

REFINE_MAX_SMOOTH = 100
REFINE_MAX_CONTRAST = 100
REFINE_MAX_SHIFT = 100
REFINE_MAX_DECONTAMINATE = 100


# ============================================================================
# MORFOLOGIA E CONVOLUÇÃO
# ============================================================================

GAUSSIAN_MIN_RADIUS = 0.5             # Abaixo disto o blur é identidade
GAUSSIAN_SUPPORT_FACTOR = 3           # Suporte do kernel = ceil(radius * fator)

MASK_FULL = 255


# ============================================================================
# CONSTANTES DE ERRO E LOGGING
# ============================================================================

VERBOSE = os.getenv("SELECTMASK_VERBOSE", "false").lower() == "true"
LOG_FILE = os.getenv("SELECTMASK_LOG_FILE") or None


# ============================================================================
# VALIDAÇÃO DE CONFIGURAÇÃO
# ============================================================================

def validate_config() -> bool:
    """
    Valida se a configuração é consistente.

    Returns:
        True se configuração é válida

    Raises:
        ValueError se houver inconsistências
    """
    total = SALIENCY_EDGE_WEIGHT + SALIENCY_CENTER_WEIGHT + SALIENCY_SATURATION_WEIGHT
    if not 0.99 <= total <= 1.01:
        raise ValueError(f"Pesos de saliência devem somar 1.0 (soma={total:.2f})")

    if not 0 < SUBJECT_EXPAND_FACTOR <= 1:
        raise ValueError("SUBJECT_EXPAND_FACTOR deve estar em (0, 1]")

    if not 0 <= DEFAULT_FUZZINESS <= COLOR_RANGE_MAX_FUZZINESS:
        raise ValueError(
            f"SELECTMASK_DEFAULT_FUZZINESS deve estar entre 0 e {COLOR_RANGE_MAX_FUZZINESS}"
        )

    return True


# Executa validação no import
if __name__ != "__main__":
    try:
        validate_config()
    except ValueError as e:
        print(f"[Config Warning] {e}")
