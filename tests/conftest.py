"""
SelectMask Pro - Pytest Configuration and Fixtures

Fixtures compartilhadas para todos os testes.
"""

import sys
from pathlib import Path

import pytest

# Adiciona raiz do projeto ao path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from maskengine.selection.engine import create_selection_engine
from maskengine.test_utils import (
    make_framed_image,
    make_split_image,
    make_subject_image,
    make_uniform_image,
)


def pytest_configure(config):
    """Configuração adicional do pytest."""
    config.addinivalue_line("markers", "slow: marks tests as slow (skip by default)")
    config.addinivalue_line("markers", "cli: testes da interface de linha de comando")


# =============================================================================
# FIXTURES BÁSICAS
# =============================================================================

@pytest.fixture
def engine():
    """Retorna SelectionEngine com opções padrão."""
    return create_selection_engine()


@pytest.fixture
def red_image():
    """Imagem 4x4 vermelha uniforme."""
    return make_uniform_image(4, 4, (255, 0, 0, 255))


@pytest.fixture
def framed_image():
    """Imagem 5x5 com interior cinza claro e moldura preta de 1 px."""
    return make_framed_image(5)


@pytest.fixture
def subject_image():
    """Imagem 64x64 com disco saturado no centro."""
    return make_subject_image((64, 64))


@pytest.fixture
def split_image():
    """Imagem 20x20 metade preta, metade branca."""
    return make_split_image((20, 20))


@pytest.fixture
def temp_dir(tmp_path):
    """Retorna diretório temporário para testes."""
    return tmp_path
