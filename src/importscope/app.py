from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from tqdm import tqdm

from analyzer.controllers.import_analyzer_controller import ImportAnalyzerController
from analyzer.errors import DuplicateDefinitionError, ParseError
from analyzer.model import MetadataTree
from importscope.core.managers.config_manager import config_manager
from importscope.core.services.json_service import to_json, tree_to_dict
from importscope.core.utils.configure_logging import configure_logger
from importscope.core.utils.path_utils import PathUtils
from loader.errors import LoaderError
from loader.model import LoaderSettings
from loader.services.file_loader import FileLoader
from loader.utils.url_utils import UrlUtils

logger = logging.getLogger(__name__)

URL_SCHEMES = ("http://", "https://", "file://")


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="importscope",
        description="Print the element/module metadata tree of an HTML document and its imports.",
    )
    parser.add_argument("target", help="Path or URL of the root document.")
    parser.add_argument("--root", type=str, default=None,
                        help="Directory whose files may be read (default: the target's directory for local targets, else the current directory).")
    parser.add_argument("--host", type=str, default=None,
                        help="Host name whose URLs are read from --root instead of the network.")
    parser.add_argument("--no-imports", action="store_true",
                        help="Analyze the root document only; do not follow imports or external scripts.")
    parser.add_argument("--attach-ast", action="store_true",
                        help="Keep script syntax nodes on the records (not written to JSON).")
    parser.add_argument("--output", "-o", type=str, default=None, help="Write JSON here instead of stdout.")
    parser.add_argument("--indent", type=int, default=None, help="JSON indentation (default from settings).")
    parser.add_argument("--progress", action="store_true", help="Show a progress bar of loaded files.")
    parser.add_argument("--log-level", type=str, default=None, help="Override debug.level from settings.")
    parser.add_argument("--set", action="append", default=[], metavar="KEY=VALUE",
                        help="Override a setting for this run, e.g. --set loader.timeout=60.")
    return parser


def _loader_settings(args: argparse.Namespace) -> LoaderSettings:
    cfg = dict(config_manager.get_nested("loader", {}) or {})
    cfg["root"] = args.root or cfg.get("root") or _default_root(args.target)
    if args.host:
        cfg["host"] = args.host
    return LoaderSettings(**cfg)


def _default_root(target: str) -> str:
    """Local targets are served from their own directory, URLs from the working directory."""
    if target.startswith(("http://", "https://")):
        return "."
    if target.startswith("file://"):
        return str(UrlUtils.url_path(target).parent)
    return str(Path(target).expanduser().resolve().parent)


def _apply_overrides(parser: argparse.ArgumentParser, overrides: List[str]) -> bool:
    for override in overrides:
        key, sep, value = override.partition("=")
        if not sep or not key.strip():
            parser.error(f"--set expects KEY=VALUE, got '{override}'")
        if not config_manager.set_nested(key.strip(), value):
            return False
    return True


def _root_href(target: str) -> str:
    if target.startswith(URL_SCHEMES):
        return target
    return PathUtils.to_file_url(target)


async def analyze(target: str, args: argparse.Namespace) -> MetadataTree:
    """Loads the root document and resolves its metadata tree."""
    href = _root_href(target)
    attach_ast = args.attach_ast or bool(config_manager.get_nested("analyzer.attach_ast", False))

    bar = tqdm(desc="Loading", unit="file", leave=False) if args.progress else None
    loader = FileLoader.from_settings(
        _loader_settings(args),
        on_loaded=(lambda _url: bar.update(1)) if bar is not None else None,
    )
    try:
        async with loader:
            html = await loader.request(href)
            controller = ImportAnalyzerController(
                html, attach_ast, href, None if args.no_imports else loader
            )
            tree = await controller.metadata_tree()
            logger.info(
                "Analyzed %s: %d document(s), %d element(s), %d module(s).",
                href, len(controller.documents), len(controller.elements), len(controller.modules)
            )
            return tree
    finally:
        if bar is not None:
            bar.close()


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if not _apply_overrides(parser, args.set):
        print(f"❌ Error: could not apply --set {args.set}", file=sys.stderr)
        return 1

    configure_logger(
        args.log_level or config_manager.get_nested("debug.level", "WARNING"),
        config_manager.get_nested("debug.modules"),
        config_manager.get_nested("debug.silenced"),
    )

    try:
        tree = asyncio.run(analyze(args.target, args))
    except (ParseError, DuplicateDefinitionError, LoaderError) as e:
        logger.debug("Analysis failed.", exc_info=True)
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1

    indent = args.indent if args.indent is not None else int(config_manager.get_nested("output.indent", 2))
    output = to_json(tree_to_dict(tree), indent=indent)

    if args.output:
        Path(args.output).write_text(output + "\n", encoding="utf-8")
        print(f"✅ Metadata tree written to {args.output}")
    else:
        print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
