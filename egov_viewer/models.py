from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields, is_dataclass
from typing import Any, get_args, get_origin, get_type_hints


@dataclass(frozen=True)
class Author:
    name: str = ""
    aff: str = ""


@dataclass(frozen=True)
class Appendix:
    doc_link: str
    app_title: str


@dataclass(frozen=True)
class Document:
    """One notice (通知書) record."""

    doc_no: str = ""
    date: str = ""
    author: Author = field(default_factory=Author)
    title: str = ""
    main_text: tuple[str, ...] = ()
    appendix: tuple[Appendix, ...] = ()
    main_text2: tuple[str, ...] = ()
    appendix2: tuple[Appendix, ...] = ()
    main_text3: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class HokenRyou:
    hongetsu_gaku: str = ""
    zengetsu_izen_kingaku: str = ""


@dataclass(frozen=True)
class HyoujyunHoushuuGetsuGaku:
    getsu_gaku_kenpo: str = ""
    hassei_ymd: str = ""


@dataclass(frozen=True)
class KojinbetsuUchiwake:
    shimei: str = ""
    shori_ymd: str = ""
    todokesho_code: str = ""
    ken_kou_hoken_ryou: HokenRyou = field(default_factory=HokenRyou)
    kousei_nenkin_hoken_ryou: HokenRyou = field(default_factory=HokenRyou)
    hyoujyun_houshuu_getsu_gaku_new: HyoujyunHoushuuGetsuGaku = field(default_factory=HyoujyunHoushuuGetsuGaku)


@dataclass(frozen=True)
class Shukei:
    goukei: str = ""
    ken_kou_hoken_ryou: HokenRyou = field(default_factory=HokenRyou)
    kousei_nenkin_hoken_ryou: HokenRyou = field(default_factory=HokenRyou)
    hyoujyun_houshuu_getsu_gaku_new: HyoujyunHoushuuGetsuGaku = field(default_factory=HyoujyunHoushuuGetsuGaku)


@dataclass(frozen=True)
class BreakdownHeader:
    jigyosho_name: str = ""
    jigyosho_num: str = ""
    jigyosho_seiri_kigo: str = ""
    jin_in_num: str = ""
    nenkin_jimusho2: str = ""
    nouhu_mokuteki_month: str = ""
    nouhu_mokuteki_year: str = ""
    nouhu_mokuteki_year_gengou: str = ""
    oshirase: str = ""


@dataclass(frozen=True)
class ZougenUchiwakeSho:
    """One insurance premium breakdown (保険料増減内訳書) record."""

    header: BreakdownHeader = field(default_factory=BreakdownHeader)
    kojinbetsu_uchiwake: tuple[KojinbetsuUchiwake, ...] = ()
    shukei: tuple[Shukei, ...] = ()

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class CSVData:
    filename: str
    headers: tuple[str, ...] = ()
    rows: tuple[tuple[str, ...], ...] = ()

    def to_dict(self) -> dict:
        return {
            "filename": self.filename,
            "headers": list(self.headers),
            "rows": [list(row) for row in self.rows],
        }


@dataclass(frozen=True)
class TemplateData:
    """Aggregate handed from ingestion to rendering and history."""

    documents: tuple[Document, ...] = ()
    zougens: tuple[ZougenUchiwakeSho, ...] = ()
    csvs: tuple[CSVData, ...] = ()

    def is_empty(self) -> bool:
        return not (self.documents or self.zougens or self.csvs)

    def to_dict(self) -> dict:
        return {
            "documents": [document.to_dict() for document in self.documents],
            "zougens": [zougen.to_dict() for zougen in self.zougens],
            "csvs": [csv_data.to_dict() for csv_data in self.csvs],
        }

    @classmethod
    def from_dict(cls, payload: dict) -> "TemplateData":
        """Rebuild the aggregate from a payload already checked by `validate_template_payload`."""
        return _build_record(cls, payload)


def _build_record(annotation: Any, value: Any) -> Any:
    if is_dataclass(annotation):
        hints = get_type_hints(annotation)
        payload = value or {}
        return annotation(
            **{
                item.name: _build_record(hints[item.name], payload[item.name])
                for item in fields(annotation)
                if item.name in payload
            }
        )
    if get_origin(annotation) is tuple:
        item_type = get_args(annotation)[0]
        return tuple(_build_record(item_type, item) for item in value or ())
    return value
