from __future__ import annotations

import pydantic
import pytest

from earlysale.models import DecompositionColumn, LineItem, ReportRequest
from earlysale.pipeline.ingest import sample_request


def test_tone_defaults_to_neutral() -> None:
    assert LineItem(label="Cupons", value="R$ 1,00").tone == "neutral"
    assert LineItem.model_validate({"label": "x", "valor": "y", "tom": None}).tone == "neutral"


def test_legacy_tone_aliases() -> None:
    assert LineItem.model_validate({"label": "x", "valor": "y", "tom": "red"}).tone == "warning-red"
    assert LineItem.model_validate({"label": "x", "valor": "y", "tom": "blue"}).tone == "emphasis-blue"
    assert LineItem.model_validate({"label": "x", "valor": "y", "tom": "plain"}).tone == "neutral"


def test_unknown_tone_rejected() -> None:
    with pytest.raises(pydantic.ValidationError):
        LineItem(label="x", value="y", tone="green")


def test_items_keep_insertion_order() -> None:
    column = DecompositionColumn(
        title="BTDI11",
        items=[LineItem(label=str(i), value="v") for i in range(5)],
        final_value="R$ 1,00",
    )
    assert [item.label for item in column.items] == ["0", "1", "2", "3", "4"]


def test_request_requires_pages() -> None:
    with pytest.raises(pydantic.ValidationError):
        ReportRequest(pages=[])


def test_request_is_frozen() -> None:
    request = sample_request()
    with pytest.raises(pydantic.ValidationError):
        request.filename = "other.pdf"


def test_non_finite_amount_rejected() -> None:
    payload = sample_request().model_dump(mode="json")
    payload["pages"][0]["header"]["purchase_value"] = float("inf")
    with pytest.raises(pydantic.ValidationError):
        ReportRequest.model_validate(payload)


def test_output_name_default_and_extension() -> None:
    request = sample_request()
    assert request.output_name == "Analise_Venda_Antecipada.pdf"
    assert ReportRequest(pages=request.pages).output_name == "Analise_Venda_Antecipada.pdf"
    assert ReportRequest(pages=request.pages, filename="venda").output_name == "venda.pdf"
