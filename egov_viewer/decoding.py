from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

MARKUP_KIND = "markup"
TABULAR_KIND = "tabular"

MARKUP_ENCODING = "utf-8-sig"
# e-Gov CSV attachments are written in the Windows flavour of Shift_JIS.
TABULAR_ENCODING = "cp932"


def decode_markup(content_bytes: bytes) -> str:
    return content_bytes.decode(MARKUP_ENCODING, errors="replace")


def decode_tabular(content_bytes: bytes) -> str:
    try:
        return content_bytes.decode(TABULAR_ENCODING)
    except UnicodeDecodeError as exc:
        logger.warning("Shift_JIS decode failed at byte %s, retrying as UTF-8.", exc.start)
        return content_bytes.decode(MARKUP_ENCODING, errors="replace")


def decode_bytes(content_bytes: bytes, kind: str) -> str:
    """Decode a raw buffer for the declared file kind; never raises on bad bytes."""

    if kind == MARKUP_KIND:
        return decode_markup(content_bytes)
    if kind == TABULAR_KIND:
        return decode_tabular(content_bytes)
    raise ValueError(f"Unknown decode kind '{kind}'. Expected '{MARKUP_KIND}' or '{TABULAR_KIND}'.")
