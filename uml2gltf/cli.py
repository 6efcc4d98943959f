"""Command line interface: ``uml2gltf generate model.extuml -o model.gltf``."""

import argparse
import logging
import os
import sys
from pathlib import Path

from . import __version__
from .errors import Uml2GltfError
from .exporter import UMLSceneExporter
from .parser import load_document
from .viewer import write_viewer

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "UML2GLTF_LOG_LEVEL"


def configure_logging(default_level="WARNING", verbose=False):
    level_name = "DEBUG" if verbose else os.getenv(LOG_LEVEL_ENV, default_level).upper()
    level = getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


def run_generate(extuml_path, output_path, html_output=None, generated_at=None):
    """
    Parse a diagram, write its glTF file and optionally an HTML viewer.

    Parameters:
        extuml_path: input .extuml file
        output_path: output glTF JSON file
        html_output: optional HTML viewer path
        generated_at: optional fixed generation timestamp
    """
    document = load_document(extuml_path)

    exporter = UMLSceneExporter(generated_at=generated_at)
    exporter.add_document(document)

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    exporter.save(str(output_path))
    logger.info("wrote %s", output_path)

    if html_output:
        write_viewer(html_output, output_path)


def build_parser():
    parser = argparse.ArgumentParser(
        prog="uml2gltf",
        description="Render .extuml 3D UML diagrams into glTF 2.0 files.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="generate a .extuml diagram to glTF JSON")
    generate.add_argument("extuml", nargs="?", help="path to .extuml DSL file")
    generate.add_argument("-e", "--extuml", dest="extuml_option", help="path to .extuml DSL file")
    generate.add_argument("-o", "--output", required=True, help="output glTF JSON file path")
    generate.add_argument("--html-output", help="output HTML viewer file path (optional)")
    generate.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser


def main(argv=None):
    """Run the CLI and return the process exit code"""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose)

    extuml_path = args.extuml_option or args.extuml
    if not extuml_path or not extuml_path.strip():
        parser.error("extuml path is required (pass as arg or --extuml)")

    if not Path(extuml_path).is_file():
        print(f"extuml file not found: {extuml_path}", file=sys.stderr)
        return 1

    try:
        run_generate(extuml_path, args.output, args.html_output)
    except (Uml2GltfError, OSError) as e:
        print(f"generate: {e}", file=sys.stderr)
        return 1

    print(f"Successfully generated: {args.output}")
    if args.html_output:
        print(f"Successfully generated: {args.html_output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
