import pytest

from egov_viewer.decoding import MARKUP_KIND, TABULAR_KIND, decode_bytes, decode_markup, decode_tabular


def test_decode_tabular_reads_shift_jis():
    content = "氏名,金額\n山田太郎,1000\n".encode("cp932")

    assert decode_tabular(content) == "氏名,金額\n山田太郎,1000\n"


def test_decode_tabular_falls_back_to_utf8_on_invalid_shift_jis(caplog):
    # The UTF-8 bytes of "金額" end in an illegal cp932 lead/trail pair.
    content = "金額\n".encode("utf-8")

    with caplog.at_level("WARNING"):
        text = decode_tabular(content)

    assert text == "金額\n"
    assert any("retrying as UTF-8" in record.getMessage() for record in caplog.records)


def test_decode_tabular_never_raises_on_garbage():
    text = decode_tabular(b"\x81\xff\xfe\x80")

    assert isinstance(text, str)


def test_decode_markup_strips_bom_and_replaces_bad_bytes():
    assert decode_markup("\ufeff<DOC/>".encode("utf-8")) == "<DOC/>"
    assert decode_markup(b"<a>\xff</a>") == "<a>\ufffd</a>"


def test_decode_bytes_dispatches_by_kind():
    assert decode_bytes("通知".encode("utf-8"), MARKUP_KIND) == "通知"
    assert decode_bytes("通知".encode("cp932"), TABULAR_KIND) == "通知"

    with pytest.raises(ValueError):
        decode_bytes(b"", "binary")
