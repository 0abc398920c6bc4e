# File: lienzo/app.py
# Project: Lienzo
# Version: 0.1.0
# Status: stable
# Date: 2026-10-18
# Purpose: Entry-point de línea de comandos (export / info / import-svg).
# Notes: Sin Qt; solo usa el motor. Código de salida 2 ante errores de validación/IO.
from __future__ import annotations

import argparse
import sys
from collections import Counter
from typing import Optional, Sequence

from lienzo.core.grouping import flatten_groups
from lienzo.core.serialization import load_scene, save_scene
from lienzo.core.settings import EngineSettings
from lienzo.core.store import SceneStore
from lienzo.core.version import APP_NAME, APP_VERSION
from lienzo.geom.path import fmt_num
from lienzo.geom.primitives import union_of_boxes
from lienzo.geom.rotation import rotated_bounding_box
from lienzo.svg.exporter import ExportOptions, write_svg
from lienzo.svg.importer import load_svg_paths
from lienzo.utils.errors import LienzoIOError, LienzoValidationError
from lienzo.utils.log import get_logger, setup_logging

log = get_logger(__name__)

EXIT_OK = 0
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lienzo", description=f"{APP_NAME} {APP_VERSION}")
    parser.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")
    sub = parser.add_subparsers(dest="command", required=True)

    exp = sub.add_parser("export", help="Exporta una escena JSON a SVG")
    exp.add_argument("scene", help="Archivo de escena (JSON)")
    exp.add_argument("-o", "--output", required=True, help="SVG de salida")
    exp.add_argument("--padding", type=float, default=None, help="Margen alrededor del contenido")
    exp.add_argument("--background", default=None, help="Color de fondo")
    exp.add_argument("--include-hidden", action="store_true", help="Incluye elementos ocultos")
    exp.add_argument("--select", nargs="+", default=None, metavar="ID", help="Exporta solo estos ids")

    info = sub.add_parser("info", help="Resumen de una escena JSON")
    info.add_argument("scene", help="Archivo de escena (JSON)")

    imp = sub.add_parser("import-svg", help="Convierte los trazos de un SVG en escena JSON")
    imp.add_argument("svg", help="Archivo SVG de entrada")
    imp.add_argument("-o", "--output", required=True, help="Escena JSON de salida")
    return parser


def _cmd_export(args: argparse.Namespace, settings: EngineSettings) -> int:
    store = SceneStore(load_scene(args.scene), settings=settings)
    opts = ExportOptions(
        padding=settings.export_padding if args.padding is None else args.padding,
        background_color=args.background,
        include_hidden=args.include_hidden,
        selected_ids=frozenset(args.select) if args.select else None,
    )
    out = write_svg(store.export_svg(opts), args.output)
    log.info("SVG exportado: %s", out)
    print(out)
    return EXIT_OK


def _cmd_info(args: argparse.Namespace) -> int:
    scene = load_scene(args.scene)
    counts = Counter(el.kind.value for el in scene.elements)
    print(f"elements: {len(scene.elements)}")
    for kind in sorted(counts):
        print(f"  {kind}: {counts[kind]}")
    print(f"groups with children: {len(scene.group_children)}")
    if scene.elements:
        drawn = flatten_groups(scene.elements, scene.group_children)
        b = union_of_boxes(rotated_bounding_box(el.bounds, el.rotation) for el in drawn)
        print(f"bbox: {fmt_num(b.x)} {fmt_num(b.y)} {fmt_num(b.width)} {fmt_num(b.height)}")
    else:
        print("bbox: -")
    return EXIT_OK


def _cmd_import_svg(args: argparse.Namespace, settings: EngineSettings) -> int:
    store = SceneStore(settings=settings)
    for el in load_svg_paths(args.svg):
        store.add_path(el.path_data, style=el.style, name=el.name)
    store.deselect_all()
    out = save_scene(store.scene, args.output)
    log.info("Escena guardada: %s (%d trazos)", out, len(store.elements))
    print(out)
    return EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> int:
    setup_logging(log_dir=None)
    args = build_parser().parse_args(argv)
    settings = EngineSettings.load()
    try:
        if args.command == "export":
            return _cmd_export(args, settings)
        if args.command == "info":
            return _cmd_info(args)
        return _cmd_import_svg(args, settings)
    except (LienzoValidationError, LienzoIOError) as e:
        log.error("%s", e)
        print(f"error: {e}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
