from __future__ import annotations

import hashlib
import json
import re
from pathlib import Path

from slugify import slugify

from ..formatting import result_card
from ..models import ReportRequest


def load_request(json_path: Path) -> ReportRequest:
    if not json_path.exists():
        raise FileNotFoundError(f"Request not found: {json_path}")
    with json_path.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)
    return ReportRequest.model_validate(payload)


def slug_from_name(name: str) -> str:
    slug = slugify(name)
    slug = re.sub(r"[^a-z0-9-]+", "-", slug.lower()).strip("-")
    if not slug:
        slug = hashlib.md5(name.encode("utf-8")).hexdigest()[:12]
    if ".." in slug or "/" in slug or "\\" in slug:
        raise ValueError("Invalid slug generated from name")
    return slug


def sample_request() -> ReportRequest:
    """The Suzano debenture / BTDI11 comparison used as the reference layout."""
    card = result_card(purchase=149143.46, sale=140619.90, coupons=17609.85, language="pt")
    page = {
        "header": {
            "titulo": "DEBÊNTURES SUZANO - Análise de Venda Antecipada",
            "tipoAtivo": "Debênture Incentivada",
            "indexador": "IPCA + Taxa Pré",
            "taxa": "IPCA + 5,48%",
            "vencimento": "14/09/2038",
            "tributacaoIR": "Isento",
            "valorCompra": 149143.46,
            "valorCurva": 158777.07,
            "cuponsRecebidos": 17609.85,
            "valorVenda": 140619.90,
            "resultadoTituloBox": card.title,
            "resultadoValorBox": card.value,
            "resultadoSubBox": card.subtitle,
        },
        "ativo2": {
            "tipoAtivo": "Fundo Cetipado (FII)",
            "distribuicao": "Fundo/mês",
            "vencimento": "29/04/2030",
            "valorCompra": 140619.90,
            "tributacaoIR": "Isento (Distribuições)",
            "taxa": "CDI + 2.5%",
        },
        "colunaEsq": {
            "titulo": "DEBÊNTURES SUZANO",
            "linhas": [
                {"label": "Valor na curva até o vencimento", "valor": "R$ 189.834,15", "tom": "blue"},
                {"label": "Cupons futuros", "valor": "R$ 17.609,85"},
                {"label": "IR sobre rendimentos", "valor": "R$ 0,00", "tom": "red"},
            ],
            "valorFinal": "R$ 207.444,00",
        },
        "colunaDir": {
            "titulo": "BTDI11",
            "linhas": [
                {"label": "Valor reinvestido após a venda", "valor": "R$ 140.619,90", "tom": "blue"},
                {"label": "Distribuições acumuladas", "valor": "R$ 74.212,33"},
                {"label": "IR sobre distribuições", "valor": "R$ 0,00", "tom": "red"},
            ],
            "valorFinal": "R$ 214.832,23",
        },
    }
    return ReportRequest.model_validate(
        {"pages": [page], "filename": "Analise_Venda_Antecipada.pdf", "language": "pt"}
    )
