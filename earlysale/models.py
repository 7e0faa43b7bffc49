from __future__ import annotations

from typing import Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .config import DEFAULT_FILENAME, DEFAULT_LANGUAGE, TONE_EMPHASIS, TONE_NEUTRAL, TONE_WARNING


Tone = Literal["emphasis-blue", "warning-red", "neutral"]

TONE_ALIASES = {
    "blue": TONE_EMPHASIS,
    "red": TONE_WARNING,
    "plain": TONE_NEUTRAL,
}


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, allow_inf_nan=False)


class AssetInfo(_Frozen):
    title: str = Field(alias="titulo")
    asset_type: str = Field(alias="tipoAtivo")
    index: str = Field(alias="indexador")
    rate: str = Field(alias="taxa")
    maturity: str = Field(alias="vencimento")
    tax_treatment: str = Field(alias="tributacaoIR")
    purchase_value: float = Field(alias="valorCompra")
    curve_value: float = Field(alias="valorCurva")
    coupons_received: float = Field(alias="cuponsRecebidos")
    sale_value: float = Field(alias="valorVenda")
    result_title: str = Field(alias="resultadoTituloBox")
    result_value: str = Field(alias="resultadoValorBox")
    result_subtitle: str = Field(alias="resultadoSubBox")


class SecondaryAssetSummary(_Frozen):
    asset_type: str = Field(alias="tipoAtivo")
    distribution: str = Field(alias="distribuicao")
    maturity: str = Field(alias="vencimento")
    purchase_value: float = Field(alias="valorCompra")
    tax_treatment: str = Field(alias="tributacaoIR")
    rate: str = Field(alias="taxa")


class LineItem(_Frozen):
    label: str
    value: str = Field(alias="valor")
    tone: Tone = Field(default=TONE_NEUTRAL, alias="tom")

    @field_validator("tone", mode="before")
    @classmethod
    def _normalize_tone(cls, value):
        if value is None:
            return TONE_NEUTRAL
        return TONE_ALIASES.get(value, value)


class DecompositionColumn(_Frozen):
    title: str = Field(alias="titulo")
    items: Tuple[LineItem, ...] = Field(default=(), alias="linhas")
    final_value: str = Field(alias="valorFinal")


class PageRecord(_Frozen):
    header: AssetInfo
    secondary: SecondaryAssetSummary = Field(alias="ativo2")
    left: DecompositionColumn = Field(alias="colunaEsq")
    right: DecompositionColumn = Field(alias="colunaDir")


class ReportRequest(_Frozen):
    pages: Tuple[PageRecord, ...] = Field(min_length=1)
    filename: Optional[str] = None
    language: Literal["en", "pt"] = DEFAULT_LANGUAGE

    @property
    def output_name(self) -> str:
        name = (self.filename or "").strip() or DEFAULT_FILENAME
        if not name.lower().endswith(".pdf"):
            name += ".pdf"
        return name
