from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AuthorModel(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str = ""
    aff: str = ""


class AppendixModel(BaseModel):
    model_config = ConfigDict(extra="allow")

    doc_link: str = ""
    app_title: str = ""


class DocumentModel(BaseModel):
    model_config = ConfigDict(extra="allow")

    doc_no: str = ""
    date: str = ""
    author: AuthorModel = Field(default_factory=AuthorModel)
    title: str = ""
    main_text: list[str] = Field(default_factory=list)
    appendix: list[AppendixModel] = Field(default_factory=list)
    main_text2: list[str] = Field(default_factory=list)
    appendix2: list[AppendixModel] = Field(default_factory=list)
    main_text3: list[str] = Field(default_factory=list)


class HokenRyouModel(BaseModel):
    model_config = ConfigDict(extra="allow")

    hongetsu_gaku: str = ""
    zengetsu_izen_kingaku: str = ""


class HyoujyunHoushuuGetsuGakuModel(BaseModel):
    model_config = ConfigDict(extra="allow")

    getsu_gaku_kenpo: str = ""
    hassei_ymd: str = ""


class KojinbetsuUchiwakeModel(BaseModel):
    model_config = ConfigDict(extra="allow")

    shimei: str = ""
    shori_ymd: str = ""
    todokesho_code: str = ""
    ken_kou_hoken_ryou: HokenRyouModel = Field(default_factory=HokenRyouModel)
    kousei_nenkin_hoken_ryou: HokenRyouModel = Field(default_factory=HokenRyouModel)
    hyoujyun_houshuu_getsu_gaku_new: HyoujyunHoushuuGetsuGakuModel = Field(
        default_factory=HyoujyunHoushuuGetsuGakuModel
    )


class ShukeiModel(BaseModel):
    model_config = ConfigDict(extra="allow")

    goukei: str = ""
    ken_kou_hoken_ryou: HokenRyouModel = Field(default_factory=HokenRyouModel)
    kousei_nenkin_hoken_ryou: HokenRyouModel = Field(default_factory=HokenRyouModel)
    hyoujyun_houshuu_getsu_gaku_new: HyoujyunHoushuuGetsuGakuModel = Field(
        default_factory=HyoujyunHoushuuGetsuGakuModel
    )


class BreakdownHeaderModel(BaseModel):
    model_config = ConfigDict(extra="allow")

    jigyosho_name: str = ""
    jigyosho_num: str = ""
    jigyosho_seiri_kigo: str = ""
    jin_in_num: str = ""
    nenkin_jimusho2: str = ""
    nouhu_mokuteki_month: str = ""
    nouhu_mokuteki_year: str = ""
    nouhu_mokuteki_year_gengou: str = ""
    oshirase: str = ""


class ZougenUchiwakeShoModel(BaseModel):
    model_config = ConfigDict(extra="allow")

    header: BreakdownHeaderModel = Field(default_factory=BreakdownHeaderModel)
    kojinbetsu_uchiwake: list[KojinbetsuUchiwakeModel] = Field(default_factory=list)
    shukei: list[ShukeiModel] = Field(default_factory=list)


class CSVDataModel(BaseModel):
    model_config = ConfigDict(extra="allow")

    filename: str
    headers: list[str] = Field(default_factory=list)
    rows: list[list[str]] = Field(default_factory=list)


class TemplateDataModel(BaseModel):
    """Aggregate payload as stored in history and returned by the API."""

    model_config = ConfigDict(extra="allow")

    documents: list[DocumentModel]
    zougens: list[ZougenUchiwakeShoModel]
    csvs: list[CSVDataModel]


def validate_template_payload(payload: dict[str, Any]) -> dict[str, Any]:
    """Validate and normalize a template-data payload loaded from outside the process."""

    return TemplateDataModel.model_validate(payload).model_dump()


def template_json_schema() -> dict[str, Any]:
    """Expose JSON schema for tests and tooling."""

    return TemplateDataModel.model_json_schema()
