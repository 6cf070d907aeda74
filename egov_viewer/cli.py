from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

from egov_viewer.config import load_settings
from egov_viewer.history import HistoryStore
from egov_viewer.pipeline import convert_files
from egov_viewer.sources import SourceError, load_source


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="egov-viewer",
        description="e-Gov の XML 通知書・増減内訳書・CSV を 1 つの HTML レポートに変換します。",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command")

    convert_parser = subparsers.add_parser("convert", help="Convert a directory or ZIP archive to HTML")
    convert_parser.add_argument("path", help="Directory or ZIP archive with e-Gov files")
    convert_parser.add_argument("-o", "--output", default=None, help="Output HTML path")
    convert_parser.add_argument("--no-history", action="store_true", help="Do not record this conversion")
    convert_parser.set_defaults(func=convert_command)

    history_parser = subparsers.add_parser("history", help="List stored conversions")
    history_parser.set_defaults(func=history_command)

    return parser


def convert_command(args: argparse.Namespace) -> int:
    settings = load_settings()
    try:
        files, origin_label = load_source(args.path)
    except SourceError as exc:
        print(f"ファイルの読み込みに失敗しました: {exc}", file=sys.stderr)
        return 1

    result = convert_files(files)
    for warning in result.warnings:
        print(f"- {warning}", file=sys.stderr)
    if result.status != "success":
        print(result.message, file=sys.stderr)
        return 1

    output_path = Path(args.output) if args.output else settings.output_path
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(result.html, encoding="utf-8")

    if not args.no_history:
        HistoryStore(settings.history_path, settings.history_limit).add(origin_label, result.data)

    print(f"HTML ファイルを生成しました: {output_path}")
    return 0


def history_command(args: argparse.Namespace) -> int:
    settings = load_settings()
    entries = HistoryStore(settings.history_path, settings.history_limit).entries()
    if not entries:
        print("履歴はありません。")
        return 0
    for entry in entries:
        stamp = datetime.fromtimestamp(entry.timestamp / 1000).strftime("%m/%d %H:%M")
        print(f"{entry.folder_name}\t{stamp}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if hasattr(args, "func"):
        return args.func(args)
    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
