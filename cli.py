"""
SelectMask Pro - CLI (Command Line Interface)

Interface de linha de comando para executar operações de seleção sobre
arquivos de imagem. A máscara resultante é salva como PNG em escala de cinza.
"""

import sys
import argparse
from pathlib import Path

# Adiciona raiz do projeto
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from maskengine.logging.setup import setup_logging
from config.settings import (
    DEFAULT_FUZZINESS,
    EDGE_DEFAULT_RADIUS,
    LOG_FILE,
    MAGIC_WAND_DEFAULT_TOLERANCE,
    VERBOSE,
)
from maskengine.constants import SelectionMode
from maskengine.exceptions import ImageLoadError, MaskEngineError
from maskengine.selection.engine import create_selection_engine
from maskengine.selection.types import ColorRangeOptions, RefineEdgeOptions, Selection
from maskengine.utils.image_io import load_mask, load_rgba, save_mask
from maskengine.utils.pixel_buffer import compose_mask, to_strength


def _report(selection: Selection, output: Path):
    """Imprime bounds e caminho de saída."""
    b = selection.bounds
    if selection.is_empty:
        print("[OK] Seleção vazia")
    else:
        print(f"[OK] Bounds: x={b.x} y={b.y} w={b.width} h={b.height}")
    print(f"  Saída: {output.absolute()}")


def _write(selection: Selection, args) -> int:
    output = save_mask(selection.mask, args.output)
    _report(selection, output)
    return 0


def edges_command(engine, args):
    """Comando: edges (mapa de bordas como PNG)"""
    image = load_rgba(args.input)
    edges = engine.compute_edge_map(image)
    mask = compose_mask(to_strength(edges * 255))
    output = save_mask(mask, args.output)
    print(f"[OK] Mapa de bordas {image.shape[1]}x{image.shape[0]}")
    print(f"  Saída: {output.absolute()}")
    return 0


def quick_select_command(engine, args):
    """Comando: quick-select"""
    image = load_rgba(args.input)
    existing = Selection.from_mask(load_mask(args.mask)) if args.mask else None
    selection = engine.quick_select(
        image, args.x, args.y,
        radius=args.radius,
        mode=args.mode,
        existing_selection=existing,
        auto_enhance=args.auto_enhance
    )
    return _write(selection, args)


def subject_command(engine, args):
    """Comando: subject"""
    image = load_rgba(args.input)
    return _write(engine.select_subject(image), args)


def color_range_command(engine, args):
    """Comando: color-range (cor explícita ou amostrada em --at X Y)"""
    image = load_rgba(args.input)
    if args.at:
        selection = engine.select_color_range_at(
            image, args.at[0], args.at[1], args.fuzziness, args.invert
        )
    else:
        options = ColorRangeOptions(
            target_color=tuple(args.color),
            fuzziness=args.fuzziness,
            invert=args.invert
        )
        selection = engine.select_color_range(image, options)
    return _write(selection, args)


def magic_wand_command(engine, args):
    """Comando: magic-wand"""
    image = load_rgba(args.input)
    selection = engine.magic_wand_select(
        image, args.x, args.y,
        tolerance=args.tolerance,
        contiguous=not args.global_
    )
    return _write(selection, args)


def refine_command(engine, args):
    """Comando: refine (Refine Edge sobre máscara existente)"""
    image = load_rgba(args.input)
    selection = Selection.from_mask(load_mask(args.mask))
    options = RefineEdgeOptions(
        radius=args.radius,
        smooth=args.smooth,
        feather=args.feather,
        contrast=args.contrast,
        shift=args.shift
    )
    return _write(engine.refine_edge(selection, image, options), args)


def invert_command(engine, args):
    """Comando: invert"""
    selection = Selection.from_mask(load_mask(args.mask))
    return _write(engine.invert_selection(selection, tight_bounds=args.tight_bounds), args)


def combine_command(engine, args):
    """Comando: combine"""
    a = Selection.from_mask(load_mask(args.mask_a))
    b = Selection.from_mask(load_mask(args.mask_b))
    return _write(engine.combine_selections(a, b, args.mode), args)


def _add_output(parser):
    parser.add_argument(
        "--output",
        "-o",
        default="./mask.png",
        help="Arquivo PNG de saída"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="selectmask",
        description="SelectMask Pro - CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exemplos:
  # Quick Select a partir de um ponto
  python cli.py quick-select foto.png 120 80 --radius 10 -o sel.png

  # Select Subject
  python cli.py subject foto.png -o subject.png

  # Refine Edge sobre máscara existente
  python cli.py refine foto.png sel.png --radius 4 --feather 1.5 -o refined.png

  # Combinar máscaras
  python cli.py combine a.png b.png --mode intersect -o out.png
        """
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        default=VERBOSE,
        help="Log detalhado (DEBUG)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Comandos disponíveis")

    # Comando: edges
    edges_parser = subparsers.add_parser("edges", help="Mapa de bordas (Sobel)")
    edges_parser.add_argument("input", help="Imagem de entrada")
    _add_output(edges_parser)
    edges_parser.set_defaults(func=edges_command)

    # Comando: quick-select
    quick_parser = subparsers.add_parser("quick-select", help="Quick Selection guiada por bordas")
    quick_parser.add_argument("input", help="Imagem de entrada")
    quick_parser.add_argument("x", type=float, help="Coordenada X da semente")
    quick_parser.add_argument("y", type=float, help="Coordenada Y da semente")
    quick_parser.add_argument("--radius", type=float, default=EDGE_DEFAULT_RADIUS, help="Raio do pincel")
    quick_parser.add_argument(
        "--mode",
        default=SelectionMode.NEW.value,
        choices=SelectionMode.list(),
        help="Modo de combinação com --mask"
    )
    quick_parser.add_argument("--mask", help="Máscara existente (PNG)")
    quick_parser.add_argument("--auto-enhance", action="store_true", help="Suaviza o resultado")
    _add_output(quick_parser)
    quick_parser.set_defaults(func=quick_select_command)

    # Comando: subject
    subject_parser = subparsers.add_parser("subject", help="Seleciona o assunto principal")
    subject_parser.add_argument("input", help="Imagem de entrada")
    _add_output(subject_parser)
    subject_parser.set_defaults(func=subject_command)

    # Comando: color-range
    color_parser = subparsers.add_parser("color-range", help="Seleção por faixa de cor")
    color_parser.add_argument("input", help="Imagem de entrada")
    target = color_parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--color", nargs=3, type=int, metavar=("R", "G", "B"), help="Cor alvo")
    target.add_argument("--at", nargs=2, type=float, metavar=("X", "Y"), help="Amostra a cor neste ponto")
    color_parser.add_argument("--fuzziness", type=float, default=DEFAULT_FUZZINESS, help="Tolerância (0-200)")
    color_parser.add_argument("--invert", action="store_true", help="Inverte o resultado")
    _add_output(color_parser)
    color_parser.set_defaults(func=color_range_command)

    # Comando: magic-wand
    wand_parser = subparsers.add_parser("magic-wand", help="Varinha mágica")
    wand_parser.add_argument("input", help="Imagem de entrada")
    wand_parser.add_argument("x", type=float, help="Coordenada X da semente")
    wand_parser.add_argument("y", type=float, help="Coordenada Y da semente")
    wand_parser.add_argument(
        "--tolerance", type=float, default=MAGIC_WAND_DEFAULT_TOLERANCE, help="Tolerância por canal"
    )
    wand_parser.add_argument(
        "--global", dest="global_", action="store_true", help="Seleciona também regiões não contíguas"
    )
    _add_output(wand_parser)
    wand_parser.set_defaults(func=magic_wand_command)

    # Comando: refine
    refine_parser = subparsers.add_parser("refine", help="Refine Edge")
    refine_parser.add_argument("input", help="Imagem de entrada")
    refine_parser.add_argument("mask", help="Máscara a refinar (PNG)")
    refine_parser.add_argument("--radius", type=float, default=0, help="Raio da zona de borda")
    refine_parser.add_argument("--smooth", type=float, default=0, help="Suavização (0-100)")
    refine_parser.add_argument("--feather", type=float, default=0, help="Feather (px)")
    refine_parser.add_argument("--contrast", type=float, default=0, help="Contraste (0-100)")
    refine_parser.add_argument("--shift", type=float, default=0, help="Deslocamento de borda (-100..100)")
    _add_output(refine_parser)
    refine_parser.set_defaults(func=refine_command)

    # Comando: invert
    invert_parser = subparsers.add_parser("invert", help="Inverte uma máscara")
    invert_parser.add_argument("mask", help="Máscara (PNG)")
    invert_parser.add_argument("--tight-bounds", action="store_true", help="Recalcula bounds do resultado")
    _add_output(invert_parser)
    invert_parser.set_defaults(func=invert_command)

    # Comando: combine
    combine_parser = subparsers.add_parser("combine", help="Combina duas máscaras")
    combine_parser.add_argument("mask_a", help="Máscara A (PNG)")
    combine_parser.add_argument("mask_b", help="Máscara B (PNG)")
    combine_parser.add_argument(
        "--mode",
        default=SelectionMode.ADD.value,
        choices=SelectionMode.list(),
        help="Modo de combinação"
    )
    _add_output(combine_parser)
    combine_parser.set_defaults(func=combine_command)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 2

    setup_logging(verbose=args.verbose, log_file=LOG_FILE)
    engine = create_selection_engine()

    try:
        return args.func(engine, args)
    except ImageLoadError as e:
        print(f"\n[ERRO] Falha ao carregar '{e.path}': {e}")
        return 2
    except MaskEngineError as e:
        print(f"\n[ERRO] Falha no motor de seleção: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
