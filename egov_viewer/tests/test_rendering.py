import re

from egov_viewer.models import (
    Appendix,
    Author,
    BreakdownHeader,
    CSVData,
    Document,
    HokenRyou,
    KojinbetsuUchiwake,
    Shukei,
    TemplateData,
    ZougenUchiwakeSho,
)
from egov_viewer.rendering import escape_html, format_number, generate_html, process_text, render_csv, render_document, render_zougen


def _document(**overrides) -> Document:
    values = {
        "doc_no": "第1号",
        "date": "令和6年4月1日",
        "author": Author(name="日本年金機構", aff="東京"),
        "title": "通知書",
        "main_text": ("本文1", "本文2"),
        "appendix": (Appendix(doc_link="x.xml", app_title="添付1"),),
    }
    values.update(overrides)
    return Document(**values)


def test_escape_html_covers_reserved_characters():
    assert escape_html("""<a href="x">&'</a>""") == "&lt;a href=&quot;x&quot;&gt;&amp;&#039;&lt;/a&gt;"
    assert escape_html(None) == ""


def test_process_text_restores_line_breaks_only():
    assert process_text("一行目<br>二行目<BR />三行目<br/>") == "一行目<br>二行目<br>三行目<br>"
    assert process_text("<b>太字</b>") == "&lt;b&gt;太字&lt;/b&gt;"


def test_format_number_wraps_single_fraction():
    assert format_number(" 1234.5 ") == '1234<span class="decimal">.5</span>'


def test_format_number_leaves_other_shapes_verbatim():
    assert format_number("1234") == "1234"
    assert format_number("1.2.3") == "1.2.3"
    assert format_number("<1>.<2>") == '&lt;1&gt;<span class="decimal">.&lt;2&gt;</span>'


def test_render_document_omits_empty_blocks():
    html = render_document(_document(main_text=(), appendix=()))

    assert "<h1>通知書</h1>" in html
    assert "本文</h2>" not in html
    assert "添付ファイル" not in html
    assert "お知らせ" not in html
    assert "CSV ファイル" not in html


def test_render_document_includes_populated_blocks():
    html = render_document(
        _document(
            main_text2=("中段",),
            appendix2=(Appendix(doc_link="a.csv", app_title="明細"),),
            main_text3=("最後",),
        )
    )

    assert html.count('<div class="paragraph">') == 4
    assert "<h2>添付ファイル</h2>" in html
    assert "<li>添付1</li>" in html
    assert "<h2>CSV ファイル</h2>" in html
    assert "<li>明細</li>" in html
    assert "<h2>お知らせ</h2>" in html
    assert "日本年金機構（東京）" in html


def test_render_zougen_tables():
    zougen = ZougenUchiwakeSho(
        header=BreakdownHeader(
            jigyosho_name="株式会社サンプル",
            nouhu_mokuteki_year_gengou="令和",
            nouhu_mokuteki_year="6",
            nouhu_mokuteki_month="4",
        ),
        kojinbetsu_uchiwake=(
            KojinbetsuUchiwake(
                shimei="山田",
                ken_kou_hoken_ryou=HokenRyou(hongetsu_gaku="100.5", zengetsu_izen_kingaku="0"),
            ),
        ),
        shukei=(Shukei(goukei="合計"),),
    )

    html = render_zougen(zougen)

    assert "令和6年4月分" in html
    assert "<h2>個人別内訳</h2>" in html
    assert "<h2>集計</h2>" in html
    personal, totals = html.split("<h2>集計</h2>")
    assert personal.count("<th>") == 7
    assert totals.count("<th>") == 5
    assert '100<span class="decimal">.5</span>' in personal
    assert 'class="paragraph"' not in html


def test_render_zougen_omits_empty_tables():
    html = render_zougen(ZougenUchiwakeSho(header=BreakdownHeader(oshirase="注意<br>事項")))

    assert "<table>" not in html
    assert '<div class="paragraph">注意<br>事項</div>' in html


def test_render_csv_with_headers_has_transpose_control():
    html = render_csv(CSVData(filename="data.csv", headers=("a", "b"), rows=(("1", "2.50"),)), 3)

    assert 'onclick="transposeTable(3)"' in html
    assert 'id="csv-table-3"' in html
    assert '<td>2<span class="decimal">.50</span></td>' in html


def test_render_csv_without_headers_has_only_title():
    html = render_csv(CSVData(filename="empty.csv"), 0)

    assert "<h2>CSV: empty.csv</h2>" in html
    assert "transposeTable" not in html
    assert "<table>" not in html


def test_script_injection_is_escaped_everywhere():
    payload = "<script>alert(1)</script>"
    data = TemplateData(
        documents=(_document(title=payload, main_text=(payload,), appendix=(Appendix(doc_link="", app_title=payload),)),),
        zougens=(ZougenUchiwakeSho(header=BreakdownHeader(jigyosho_name=payload, oshirase=payload)),),
        csvs=(CSVData(filename=payload, headers=(payload,), rows=((payload,),)),),
    )

    html = generate_html(data)

    assert payload not in html
    assert "<script>" in html  # the embedded transpose behaviour
    assert html.count("<script>") == 1


def test_sections_render_in_fixed_order():
    data = TemplateData(
        documents=(_document(title="DOC-A"), _document(title="DOC-B")),
        zougens=(ZougenUchiwakeSho(header=BreakdownHeader(jigyosho_name="ZOUGEN-A")),),
        csvs=(CSVData(filename="CSV-A.csv", headers=("h",)), CSVData(filename="CSV-B.csv", headers=("h",))),
    )

    html = generate_html(data)

    positions = [html.index(marker) for marker in ("DOC-A", "DOC-B", "ZOUGEN-A", "CSV-A.csv", "CSV-B.csv")]
    assert positions == sorted(positions)
    assert re.findall(r"transposeTable\((\d+)\)\"", html) == ["0", "1"]


def test_generate_html_is_deterministic():
    data = TemplateData(documents=(_document(),), csvs=(CSVData(filename="d.csv", headers=("a",), rows=(("1",),)),))

    assert generate_html(data) == generate_html(data)
    assert generate_html(data).startswith("<!DOCTYPE html>")
