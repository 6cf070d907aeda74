from __future__ import annotations

import logging
import zipfile
import zlib
from pathlib import Path, PurePosixPath

logger = logging.getLogger(__name__)


class SourceError(RuntimeError):
    pass


def read_directory(directory: Path) -> dict[str, bytes]:
    """Map each file's base name below ``directory`` to its bytes.

    Files are visited in sorted path order; a later file with the same base
    name replaces an earlier one.
    """

    files: dict[str, bytes] = {}
    for path in sorted(directory.rglob("*")):
        if not path.is_file():
            continue
        try:
            files[path.name] = path.read_bytes()
        except OSError as exc:
            raise SourceError(f"ファイルを読み込めませんでした: {path}") from exc
    return files


def _member_name(info: zipfile.ZipInfo) -> str:
    name = info.filename
    if not info.flag_bits & 0x800:
        # Archives built on Japanese Windows store names in cp932 without the UTF-8 flag.
        try:
            name = name.encode("cp437").decode("cp932")
        except (UnicodeEncodeError, UnicodeDecodeError):
            pass
    return PurePosixPath(name).name


def read_zip_file(archive_path: Path) -> dict[str, bytes]:
    files: dict[str, bytes] = {}
    try:
        with zipfile.ZipFile(archive_path) as archive:
            for info in archive.infolist():
                if info.is_dir():
                    continue
                files[_member_name(info)] = archive.read(info)
    except (zipfile.BadZipFile, RuntimeError, NotImplementedError, zlib.error, OSError) as exc:
        # Encrypted members raise RuntimeError, unsupported compression NotImplementedError.
        raise SourceError(f"ZIP ファイルを読み込めませんでした: {archive_path}") from exc
    return files


def load_source(path: Path | str) -> tuple[dict[str, bytes], str]:
    """Read a directory or ZIP archive and return ``(files, origin_label)``."""

    source = Path(path)
    if not source.exists():
        raise SourceError(f"指定されたパスが存在しません: {source}")

    if source.is_dir():
        files = read_directory(source)
        label = source.resolve().name
    elif source.suffix.lower() == ".zip":
        files = read_zip_file(source)
        label = source.stem
    else:
        raise SourceError("ディレクトリまたは ZIP ファイルを指定してください")

    logger.info("Loaded %s files from %s", len(files), source)
    return files, label
