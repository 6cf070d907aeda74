from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar
from xml.etree import ElementTree as ET

from egov_viewer.models import (
    Appendix,
    Author,
    BreakdownHeader,
    Document,
    HokenRyou,
    HyoujyunHoushuuGetsuGaku,
    KojinbetsuUchiwake,
    Shukei,
    ZougenUchiwakeSho,
)

T = TypeVar("T")

NOTICE_ROOT_TAG = "DOC"
NOTICE_BODY_TAG = "BODY"
BREAKDOWN_ROOT_TAG = "ZougenUchiwakeSho"


@dataclass(frozen=True)
class ParseOutcome(Generic[T]):
    """Either a parsed record or a skip signal with the reason it was dropped."""

    value: T | None = None
    skip_reason: str | None = None

    @property
    def skipped(self) -> bool:
        return self.value is None

    @classmethod
    def ok(cls, value: T) -> "ParseOutcome[T]":
        return cls(value=value)

    @classmethod
    def skip(cls, reason: str) -> "ParseOutcome[T]":
        return cls(skip_reason=reason)


def _local_name(tag: object) -> str:
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]


def _parse_root(xml_text: str) -> ET.Element:
    root = ET.fromstring(xml_text)
    # Tag lookups are by local name, so drop any namespace URIs up front.
    for element in root.iter():
        element.tag = _local_name(element.tag)
    return root


def _find_self_or_descendant(root: ET.Element, tag: str) -> ET.Element | None:
    if root.tag == tag:
        return root
    return root.find(f".//{tag}")


def _text_content(element: ET.Element) -> str:
    return "".join(element.itertext()).strip()


def _first_text(parent: ET.Element | None, path: str) -> str:
    """Trimmed text of the first descendant matching ``path``; empty if absent."""

    if parent is None:
        return ""
    element = parent.find(f".//{path}")
    if element is None:
        return ""
    return _text_content(element)


def _all_texts(parent: ET.Element | None, path: str) -> tuple[str, ...]:
    if parent is None:
        return ()
    return tuple(_text_content(element) for element in parent.findall(f".//{path}"))


def _appendix_list(parent: ET.Element, container_tag: str) -> tuple[Appendix, ...]:
    container = parent.find(f".//{container_tag}")
    if container is None:
        return ()
    links = container.findall(".//DOCLINK")
    titles = container.findall(".//APPTITLE")
    # Pairs by position; surplus links or titles are dropped.
    return tuple(
        Appendix(doc_link=_text_content(link), app_title=_text_content(title))
        for link, title in zip(links, titles)
    )


def parse_document(xml_text: str) -> ParseOutcome[Document]:
    try:
        root = _parse_root(xml_text)
    except ET.ParseError as exc:
        return ParseOutcome.skip(f"XML parse error: {exc}")

    doc_element = _find_self_or_descendant(root, NOTICE_ROOT_TAG)
    if doc_element is None:
        return ParseOutcome.skip(f"Missing <{NOTICE_ROOT_TAG}> root element.")

    body = doc_element.find(f".//{NOTICE_BODY_TAG}")
    if body is None:
        return ParseOutcome.skip(f"Missing <{NOTICE_BODY_TAG}> element.")

    return ParseOutcome.ok(
        Document(
            doc_no=_first_text(body, "DOCNO"),
            date=_first_text(body, "DATE"),
            author=Author(
                name=_first_text(body, "AUTHOR/NAME"),
                aff=_first_text(body, "AUTHOR/AFF"),
            ),
            title=_first_text(body, "TITLE"),
            main_text=_all_texts(body, "MAINTXT/P"),
            appendix=_appendix_list(body, "APPENDIX"),
            main_text2=_all_texts(body, "MAINTXT2/P"),
            appendix2=_appendix_list(body, "APPENDIX2"),
            main_text3=_all_texts(body, "MAINTXT3/P"),
        )
    )


def _hoken_ryou(parent: ET.Element, container_tag: str) -> HokenRyou:
    return HokenRyou(
        hongetsu_gaku=_first_text(parent, f"{container_tag}/hongetsuGaku"),
        zengetsu_izen_kingaku=_first_text(parent, f"{container_tag}/zengetsuIzenKingaku"),
    )


def _getsu_gaku(parent: ET.Element) -> HyoujyunHoushuuGetsuGaku:
    return HyoujyunHoushuuGetsuGaku(
        getsu_gaku_kenpo=_first_text(parent, "hyoujyunHoushuuGetsuGakuNew/getsuGakuKenpo"),
        hassei_ymd=_first_text(parent, "hyoujyunHoushuuGetsuGakuNew/hasseiYMD"),
    )


def _breakdown_header(header: ET.Element | None) -> BreakdownHeader:
    return BreakdownHeader(
        jigyosho_name=_first_text(header, "jigyoshoName"),
        jigyosho_num=_first_text(header, "jigyoshoNum"),
        jigyosho_seiri_kigo=_first_text(header, "jigyoshoSeiriKigo"),
        jin_in_num=_first_text(header, "jinInNum"),
        nenkin_jimusho2=_first_text(header, "nenkinJimusho2"),
        nouhu_mokuteki_month=_first_text(header, "nouhuMokutekiMonth"),
        nouhu_mokuteki_year=_first_text(header, "nouhuMokutekiYear"),
        nouhu_mokuteki_year_gengou=_first_text(header, "nouhuMokutekiYearGengou"),
        oshirase=_first_text(header, "oshirase"),
    )


def parse_zougen(xml_text: str) -> ParseOutcome[ZougenUchiwakeSho]:
    try:
        root = _parse_root(xml_text)
    except ET.ParseError as exc:
        return ParseOutcome.skip(f"XML parse error: {exc}")

    report = _find_self_or_descendant(root, BREAKDOWN_ROOT_TAG)
    if report is None:
        return ParseOutcome.skip(f"Missing <{BREAKDOWN_ROOT_TAG}> root element.")

    kojinbetsu = tuple(
        KojinbetsuUchiwake(
            shimei=_first_text(item, "shimei"),
            shori_ymd=_first_text(item, "shoriYMD"),
            todokesho_code=_first_text(item, "todokeshoCode"),
            ken_kou_hoken_ryou=_hoken_ryou(item, "kenKouHokenRyou"),
            kousei_nenkin_hoken_ryou=_hoken_ryou(item, "kouseiNenkinHokenRyou"),
            hyoujyun_houshuu_getsu_gaku_new=_getsu_gaku(item),
        )
        for item in report.findall(".//kojinbetsuUchiwake")
    )
    shukei = tuple(
        Shukei(
            goukei=_first_text(item, "goukei"),
            ken_kou_hoken_ryou=_hoken_ryou(item, "kenKouHokenRyou"),
            kousei_nenkin_hoken_ryou=_hoken_ryou(item, "kouseiNenkinHokenRyou"),
            hyoujyun_houshuu_getsu_gaku_new=_getsu_gaku(item),
        )
        for item in report.findall(".//shukei")
    )

    return ParseOutcome.ok(
        ZougenUchiwakeSho(
            header=_breakdown_header(report.find(".//header")),
            kojinbetsu_uchiwake=kojinbetsu,
            shukei=shukei,
        )
    )
