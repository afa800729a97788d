"""CLI for oo3notes - turn an OmniOutliner margin-note export into linked notes."""

import argparse
import logging
import platform
import sys
from pathlib import Path
from typing import Any

from . import __version__
from .adapters.fs_storage import ensure_dir
from .adapters.oo3_container import copy_images
from .export.images import find_missing_images
from .runtime import build_runtime


def version_text() -> str:
    return "\n".join([
        f"oo3notes {__version__}",
        f"python {platform.python_version()}",
        f"platform {platform.platform()}",
    ])


def configure_logging(quiet: bool, verbose: int) -> None:
    if quiet:
        level = logging.ERROR
    elif verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def cmd_export(args: argparse.Namespace, rt: Any) -> int:
    """Copy images and write one note per outline item."""
    tree = rt.extractor.root_items(rt.container.document())

    if not args.dry_run:
        ensure_dir(rt.notes_dir)

    if not args.no_images:
        find_missing_images(tree, rt.container.image_ids())
        if not args.dry_run:
            copied = copy_images(rt.container, rt.images_dir)
            if not args.quiet:
                print(f"Images copied: {len(copied)}")

    report = rt.exporter.export(tree, dry_run=args.dry_run)

    if not args.quiet:
        prefix = "[DRY RUN] " if args.dry_run else ""
        print(f"{prefix}Items: {len(tree)}")
        print(f"{prefix}Written: {len(report.written)}")
        print(f"{prefix}Unchanged: {report.unchanged}")
        print(f"{prefix}Renamed: {report.renamed}")
        for path in report.deleted:
            print(f"{prefix}Deleted: {path}")

    return 0


def cmd_copy_images(args: argparse.Namespace, rt: Any) -> int:
    """Copy embedded images only."""
    copied = copy_images(rt.container, rt.images_dir)
    if not args.quiet:
        print(f"Images copied: {len(copied)}")
    return 0


def cmd_toc(args: argparse.Namespace, rt: Any) -> int:
    """Print the outline as nested [[links]] using final note names."""
    tree = rt.extractor.root_items(rt.container.document())
    names = rt.exporter.names(tree)
    print(tree.toc(lambda node: names[node]))
    return 0


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="oo3notes",
        description="OmniOutliner margin notes to Markdown",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version", version=version_text()
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: search cwd/oo3notes.toml, next to the package)",
    )
    parser.add_argument(
        "--notes",
        type=Path,
        default=None,
        help="Directory for exported notes (overrides config)",
    )
    parser.add_argument(
        "--images",
        type=Path,
        default=None,
        help="Directory for copied images (overrides config)",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Minimize output"
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="More log output (-vv for debug)"
    )

    subparsers = parser.add_subparsers(dest="cmd", required=True)

    # export command
    parser_export = subparsers.add_parser("export", help="Export notes and images")
    parser_export.add_argument("container", type=Path, help="Path to the .oo3 package")
    parser_export.add_argument(
        "--dry-run", dest="dry_run", action="store_true",
        help="Report what would change without writing"
    )
    parser_export.add_argument(
        "--no-images", dest="no_images", action="store_true",
        help="Skip copying images"
    )

    # copy-images command
    parser_images = subparsers.add_parser("copy-images", help="Copy embedded images")
    parser_images.add_argument("container", type=Path, help="Path to the .oo3 package")

    # toc command
    parser_toc = subparsers.add_parser("toc", help="Print the outline as [[links]]")
    parser_toc.add_argument("container", type=Path, help="Path to the .oo3 package")

    args = parser.parse_args()
    configure_logging(args.quiet, args.verbose)

    handlers = {
        "export": cmd_export,
        "copy-images": cmd_copy_images,
        "toc": cmd_toc,
    }
    handler = handlers.get(args.cmd)

    if handler:
        try:
            rt = build_runtime(
                container_path=args.container,
                notes_dir=args.notes,
                images_dir=args.images,
                config_path=args.config,
            )
            exit_code = handler(args, rt)
            sys.exit(exit_code)
        except Exception as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        print(f"Unknown command: {args.cmd}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
