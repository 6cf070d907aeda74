from __future__ import annotations

import logging
from dataclasses import dataclass, field
from collections.abc import Iterable, Mapping

from egov_viewer.decoding import MARKUP_KIND, TABULAR_KIND, decode_bytes
from egov_viewer.models import CSVData, Document, TemplateData, ZougenUchiwakeSho
from egov_viewer.rendering import generate_html
from egov_viewer.tabular import parse_csv
from egov_viewer.xml_parsers import parse_document, parse_zougen

logger = logging.getLogger(__name__)

MARKUP_EXTENSION = ".xml"
TABULAR_EXTENSION = ".csv"
BREAKDOWN_MARKER = "増減内訳書"

EMPTY_RESULT_MESSAGE = "有効なデータが見つかりませんでした"
FAILURE_MESSAGE_PREFIX = "生成に失敗しました"

ROUTE_NOTICE = "notice"
ROUTE_BREAKDOWN = "breakdown"
ROUTE_TABULAR = "tabular"


def classify_filename(filename: str) -> str | None:
    """Route a file name to a parser, or ``None`` when it is not ingested."""

    lowered = filename.lower()
    if lowered.endswith(MARKUP_EXTENSION):
        return ROUTE_BREAKDOWN if BREAKDOWN_MARKER in filename else ROUTE_NOTICE
    if lowered.endswith(TABULAR_EXTENSION):
        return ROUTE_TABULAR
    return None


def _as_items(files: Mapping[str, bytes] | Iterable[tuple[str, bytes]]) -> Iterable[tuple[str, bytes]]:
    if isinstance(files, Mapping):
        return files.items()
    return files


def parse_files(
    files: Mapping[str, bytes] | Iterable[tuple[str, bytes]],
    *,
    warnings: list[str] | None = None,
) -> TemplateData:
    """Classify, decode and parse every input in iteration order.

    Structured documents that fail to parse are dropped; a description of
    each drop is appended to ``warnings`` when a list is supplied.
    """

    documents: list[Document] = []
    zougens: list[ZougenUchiwakeSho] = []
    csvs: list[CSVData] = []

    for filename, content_bytes in _as_items(files):
        route = classify_filename(filename)
        if route is None:
            logger.debug("Ignoring unsupported file '%s'.", filename)
            continue

        if route == ROUTE_TABULAR:
            table = parse_csv(decode_bytes(content_bytes, TABULAR_KIND))
            csvs.append(CSVData(filename=filename, headers=table.headers, rows=table.rows))
            continue

        text = decode_bytes(content_bytes, MARKUP_KIND)
        if route == ROUTE_BREAKDOWN:
            outcome = parse_zougen(text)
            if not outcome.skipped:
                zougens.append(outcome.value)
        else:
            outcome = parse_document(text)
            if not outcome.skipped:
                documents.append(outcome.value)

        if outcome.skipped:
            message = f"Skipped '{filename}': {outcome.skip_reason}"
            logger.warning(message)
            if warnings is not None:
                warnings.append(message)

    return TemplateData(documents=tuple(documents), zougens=tuple(zougens), csvs=tuple(csvs))


@dataclass(frozen=True)
class ConversionResult:
    status: str
    message: str
    warnings: list[str] = field(default_factory=list)
    data: TemplateData | None = None
    html: str | None = None

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "message": self.message,
            "warnings": list(self.warnings),
            "data": self.data.to_dict() if self.data is not None else None,
        }


def convert_files(files: Mapping[str, bytes] | Iterable[tuple[str, bytes]]) -> ConversionResult:
    warnings: list[str] = []
    try:
        data = parse_files(files, warnings=warnings)
        if data.is_empty():
            return ConversionResult(status="empty", message=EMPTY_RESULT_MESSAGE, warnings=warnings, data=data)
        html = generate_html(data)
    except Exception as exc:
        logger.exception("Report generation failed.")
        return ConversionResult(
            status="error",
            message=f"{FAILURE_MESSAGE_PREFIX}: {str(exc) or exc.__class__.__name__}",
            warnings=warnings,
        )

    summary = (
        f"{len(data.documents)} documents, {len(data.zougens)} breakdown reports, "
        f"{len(data.csvs)} CSV files converted."
    )
    return ConversionResult(status="success", message=summary, warnings=warnings, data=data, html=html)
