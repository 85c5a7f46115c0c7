"""
SelectMask Pro - Exceções do Domínio
Centraliza todas as exceções personalizadas do sistema.

Configuração fora do intervalo documentado nunca gera exceção (é ajustada
para o valor válido mais próximo). Estas exceções cobrem apenas buffers
malformados e tamanhos incompatíveis.
"""

from typing import Optional, Tuple


class MaskEngineError(Exception):
    """Exceção base para todo o domínio SelectMask."""
    pass


class ImageFormatError(MaskEngineError):
    """Buffer não está no formato RGBA8 (H, W, 4) uint8."""
    def __init__(self, message: str, shape: Optional[Tuple[int, ...]] = None):
        super().__init__(message)
        self.shape = shape


class SelectionSizeMismatchError(MaskEngineError):
    """Seleção e imagem (ou duas seleções) têm dimensões diferentes."""
    def __init__(self, message: str, expected: Tuple[int, int], actual: Tuple[int, int]):
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class ImageLoadError(MaskEngineError):
    """Erro ao carregar arquivo de imagem (CLI)."""
    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path
