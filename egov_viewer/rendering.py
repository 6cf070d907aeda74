from __future__ import annotations

import re
from typing import Iterable

from egov_viewer.models import Appendix, CSVData, Document, HokenRyou, TemplateData, ZougenUchiwakeSho

REPORT_TITLE = "e-Gov 通知書ビューアー"

_ESCAPE_TABLE = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&quot;",
        "'": "&#039;",
    }
)
_ESCAPED_LINE_BREAK = re.compile(r"&lt;br\s*/?&gt;", re.IGNORECASE)

REPORT_STYLE = """        body {
            font-family: 'Yu Gothic', 'Hiragino Kaku Gothic ProN', Meiryo, sans-serif;
            max-width: 1200px;
            margin: 0 auto;
            padding: 20px;
            background-color: #f5f5f5;
        }
        .document {
            background-color: white;
            padding: 30px;
            margin-bottom: 30px;
            border-radius: 8px;
            box-shadow: 0 2px 4px rgba(0,0,0,0.1);
        }
        h1 {
            color: #003366;
            border-bottom: 3px solid #003366;
            padding-bottom: 10px;
        }
        h2 {
            color: #0066cc;
            border-left: 5px solid #0066cc;
            padding-left: 10px;
            margin-top: 30px;
        }
        .metadata {
            background-color: #f0f8ff;
            padding: 15px;
            border-radius: 5px;
            margin: 20px 0;
        }
        .metadata-item {
            margin: 5px 0;
        }
        .metadata-label {
            font-weight: bold;
            color: #003366;
            display: inline-block;
            width: 150px;
        }
        .appendix-list {
            list-style-type: none;
            padding-left: 0;
        }
        .appendix-list li {
            background-color: #e8f4f8;
            margin: 10px 0;
            padding: 10px;
            border-left: 4px solid #0066cc;
        }
        table {
            width: 100%;
            border-collapse: collapse;
            margin: 20px 0;
            font-size: 14px;
        }
        th, td {
            border: 1px solid #ddd;
            padding: 8px;
            text-align: left;
        }
        th {
            background-color: #003366;
            color: white;
            font-weight: bold;
        }
        tr:nth-child(even) {
            background-color: #f9f9f9;
        }
        .paragraph {
            margin: 15px 0;
            line-height: 1.8;
        }
        .csv-section {
            margin: 20px 0;
        }
        .csv-table {
            overflow-x: auto;
        }
        .decimal {
            color: #ccc;
            font-weight: normal;
            font-size: 0.75em;
        }
        .transpose-btn {
            background-color: #0066cc;
            color: white;
            border: none;
            padding: 8px 16px;
            border-radius: 4px;
            cursor: pointer;
            margin: 10px 0;
            font-size: 14px;
        }
        .transpose-btn:hover {
            background-color: #004999;
        }"""

TRANSPOSE_SCRIPT = """        function transposeTable(index) {
            const container = document.getElementById('csv-table-' + index);
            const table = container.querySelector('table');
            const thead = table.querySelector('thead');
            const tbody = table.querySelector('tbody');

            const headerRow = thead.querySelector('tr');
            const headers = headerRow
                ? Array.from(headerRow.querySelectorAll('th, td')).map(el => el.innerHTML)
                : [];
            const rows = Array.from(tbody.querySelectorAll('tr')).map(tr =>
                Array.from(tr.querySelectorAll('td')).map(td => td.innerHTML)
            );

            const allData = headers.length > 0 ? [headers, ...rows] : rows;
            if (allData.length === 0 || allData[0].length === 0) return;

            const transposed = allData[0].map((_, colIndex) =>
                allData.map(row => row[colIndex] || '')
            );

            thead.innerHTML = '';
            tbody.innerHTML = transposed.map(row =>
                '<tr>' + row.map(cell => '<td>' + (cell || '') + '</td>').join('') + '</tr>'
            ).join('');
        }"""


def escape_html(text: str | None) -> str:
    if text is None:
        return ""
    return str(text).translate(_ESCAPE_TABLE)


def process_text(text: str | None) -> str:
    """Escape free text but keep ``<br>`` line breaks."""

    return _ESCAPED_LINE_BREAK.sub("<br>", escape_html(text))


def format_number(text: str | None) -> str:
    """Render ``int.frac`` values with the fraction in a muted span."""

    if text is None:
        return ""
    value = str(text).strip()
    parts = value.split(".")
    if len(parts) == 2:
        integer_part, fraction = parts
        return f'{escape_html(integer_part)}<span class="decimal">.{escape_html(fraction)}</span>'
    return escape_html(value)


def _metadata_item(label: str, value_html: str) -> str:
    return f'<div class="metadata-item"><span class="metadata-label">{label}:</span>{value_html}</div>'


def _paragraphs(paragraphs: Iterable[str]) -> str:
    return "".join(f'<div class="paragraph">{process_text(paragraph)}</div>' for paragraph in paragraphs)


def _appendix_items(document_appendix: Iterable[Appendix]) -> str:
    return "".join(f"<li>{escape_html(item.app_title)}</li>" for item in document_appendix)


def render_document(document: Document) -> str:
    sections: list[str] = [
        '\n    <div class="document">',
        f"\n        <h1>{escape_html(document.title)}</h1>",
        '\n        <div class="metadata">',
        "\n            " + _metadata_item("文書番号", escape_html(document.doc_no)),
        "\n            " + _metadata_item("日付", escape_html(document.date)),
        "\n            "
        + _metadata_item(
            "発信者",
            f"{escape_html(document.author.name)}（{escape_html(document.author.aff)}）",
        ),
        "\n        </div>",
    ]
    if document.main_text:
        sections.append(f"\n        <h2>本文</h2>\n        {_paragraphs(document.main_text)}")
    if document.appendix:
        sections.append(
            "\n        <h2>添付ファイル</h2>"
            f'\n        <ul class="appendix-list">{_appendix_items(document.appendix)}</ul>'
        )
    if document.main_text2:
        sections.append(f"\n        {_paragraphs(document.main_text2)}")
    if document.appendix2:
        sections.append(
            "\n        <h2>CSV ファイル</h2>"
            f'\n        <ul class="appendix-list">{_appendix_items(document.appendix2)}</ul>'
        )
    if document.main_text3:
        sections.append(f"\n        <h2>お知らせ</h2>\n        {_paragraphs(document.main_text3)}")
    sections.append("\n    </div>")
    return "".join(sections)


def _hoken_cells(*amounts: HokenRyou) -> str:
    cells: list[str] = []
    for amount in amounts:
        cells.append(f"<td>{format_number(amount.hongetsu_gaku)}</td>")
        cells.append(f"<td>{format_number(amount.zengetsu_izen_kingaku)}</td>")
    return "".join(cells)


def _table(header_cells: list[str], body_rows: list[str], table_id: str | None = None) -> str:
    id_attr = f' id="{table_id}"' if table_id else ""
    head = "".join(f"<th>{cell}</th>" for cell in header_cells)
    body = "".join(f"\n                    <tr>{row}</tr>" for row in body_rows)
    return (
        f'\n        <div class="csv-table"{id_attr}>'
        "\n            <table>"
        f"\n                <thead>\n                    <tr>{head}</tr>\n                </thead>"
        f"\n                <tbody>{body}\n                </tbody>"
        "\n            </table>"
        "\n        </div>"
    )


PREMIUM_HEADERS = [
    "健康保険料<br>（本月額）",
    "健康保険料<br>（前月以前額）",
    "厚生年金保険料<br>（本月額）",
    "厚生年金保険料<br>（前月以前額）",
]


def render_zougen(zougen: ZougenUchiwakeSho) -> str:
    header = zougen.header
    target_period = (
        f"{escape_html(header.nouhu_mokuteki_year_gengou)}{escape_html(header.nouhu_mokuteki_year)}年"
        f"{escape_html(header.nouhu_mokuteki_month)}月分"
    )
    sections: list[str] = [
        '\n    <div class="document">',
        "\n        <h1>保険料増減内訳書</h1>",
        '\n        <div class="metadata">',
        "\n            " + _metadata_item("事業所名", escape_html(header.jigyosho_name)),
        "\n            " + _metadata_item("事業所番号", escape_html(header.jigyosho_num)),
        "\n            " + _metadata_item("事業所整理記号", escape_html(header.jigyosho_seiri_kigo)),
        "\n            " + _metadata_item("人員数", escape_html(header.jin_in_num)),
        "\n            " + _metadata_item("年金事務所", escape_html(header.nenkin_jimusho2)),
        "\n            " + _metadata_item("納付対象", target_period),
        "\n        </div>",
    ]
    if header.oshirase:
        sections.append(f'\n        <div class="paragraph">{process_text(header.oshirase)}</div>')
    if zougen.kojinbetsu_uchiwake:
        rows = [
            f"<td>{escape_html(item.shimei)}</td>"
            f"<td>{escape_html(item.shori_ymd)}</td>"
            f"<td>{escape_html(item.todokesho_code)}</td>"
            + _hoken_cells(item.ken_kou_hoken_ryou, item.kousei_nenkin_hoken_ryou)
            for item in zougen.kojinbetsu_uchiwake
        ]
        sections.append("\n        <h2>個人別内訳</h2>")
        sections.append(_table(["氏名", "処理年月日", "届出書コード", *PREMIUM_HEADERS], rows))
    if zougen.shukei:
        rows = [
            f"<td>{escape_html(item.goukei)}</td>"
            + _hoken_cells(item.ken_kou_hoken_ryou, item.kousei_nenkin_hoken_ryou)
            for item in zougen.shukei
        ]
        sections.append("\n        <h2>集計</h2>")
        sections.append(_table(["項目", *PREMIUM_HEADERS], rows))
    sections.append("\n    </div>")
    return "".join(sections)


def render_csv(csv_data: CSVData, index: int) -> str:
    sections: list[str] = [
        '\n    <div class="document csv-section">',
        f"\n        <h2>CSV: {escape_html(csv_data.filename)}</h2>",
    ]
    if csv_data.headers:
        rows = ["".join(f"<td>{format_number(cell)}</td>" for cell in row) for row in csv_data.rows]
        sections.append(f'\n        <button class="transpose-btn" onclick="transposeTable({index})">行列を反転</button>')
        sections.append(
            _table(
                [escape_html(header) for header in csv_data.headers],
                rows,
                table_id=f"csv-table-{index}",
            )
        )
    sections.append("\n    </div>")
    return "".join(sections)


def generate_html(data: TemplateData) -> str:
    """Render the aggregate into one self-contained HTML report.

    Output is a pure function of ``data``: documents first, then breakdown
    reports, then CSV tables, each in aggregate order.
    """

    documents_html = "".join(render_document(document) for document in data.documents)
    zougens_html = "".join(render_zougen(zougen) for zougen in data.zougens)
    csvs_html = "".join(render_csv(csv_data, index) for index, csv_data in enumerate(data.csvs))
    return (
        "<!DOCTYPE html>\n"
        '<html lang="ja">\n'
        "<head>\n"
        '    <meta charset="UTF-8">\n'
        '    <meta name="viewport" content="width=device-width, initial-scale=1.0">\n'
        f"    <title>{REPORT_TITLE}</title>\n"
        f"    <style>\n{REPORT_STYLE}\n    </style>\n"
        f"    <script>\n{TRANSPOSE_SCRIPT}\n    </script>\n"
        "</head>\n"
        "<body>\n"
        f"{documents_html}\n"
        f"{zougens_html}\n"
        f"{csvs_html}\n"
        "</body>\n"
        "</html>"
    )
