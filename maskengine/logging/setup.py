"""
SelectMask Pro - Configuração de Logging
Fornece configuração centralizada para o módulo logging padrão do Python.

Todos os módulos do motor usam get_logger(<Componente>), que devolve um
logger filho de "SelectMask". Nada é emitido até setup_logging ser chamado
(pela CLI ou pela aplicação hospedeira).
"""

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

ROOT_LOGGER_NAME = "SelectMask"

_CONSOLE_FORMAT = '[%(levelname)s] %(message)s'
_FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(
    name: str = ROOT_LOGGER_NAME,
    verbose: bool = False,
    log_file: Optional[str] = None,
    stream: Optional[TextIO] = None
) -> logging.Logger:
    """
    Configura o logger principal.

    Chamadas repetidas não duplicam handlers: o nível (verbose) é
    atualizado e só um log_file ainda não registrado ganha handler novo,
    para que a CLI possa ser invocada várias vezes no mesmo processo.

    Args:
        name: Nome do logger
        verbose: Se True, define nível para DEBUG
        log_file: Caminho opcional para arquivo de log (sempre DEBUG)
        stream: Destino do console (padrão: sys.stdout)
    """
    logger = logging.getLogger(name)
    level = logging.DEBUG if verbose else logging.INFO
    logger.setLevel(level)

    console = next(
        (h for h in logger.handlers if getattr(h, '_selectmask_console', False)),
        None
    )
    if console is None:
        console = logging.StreamHandler(stream or sys.stdout)
        console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
        console._selectmask_console = True
        logger.addHandler(console)
    console.setLevel(level)

    if log_file:
        path = Path(log_file).resolve()
        if not any(
            isinstance(h, logging.FileHandler) and Path(h.baseFilename).resolve() == path
            for h in logger.handlers
        ):
            path.parent.mkdir(parents=True, exist_ok=True)
            fh = logging.FileHandler(path, encoding='utf-8')
            fh.setLevel(logging.DEBUG)
            fh.setFormatter(logging.Formatter(_FILE_FORMAT))
            logger.addHandler(fh)

    # Redireciona warnings do Python (ex.: numpy) para o logger
    logging.captureWarnings(True)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Retorna um logger filho com o namespace correto."""
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
