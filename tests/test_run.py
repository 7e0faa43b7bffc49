from __future__ import annotations

import json
import tempfile
from pathlib import Path

from earlysale import config
from earlysale.pipeline.ingest import load_request, sample_request, slug_from_name
from earlysale.pipeline.run import run_reports


def _write_sample(path: Path) -> Path:
    payload = sample_request().model_dump(mode="json")
    path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
    return path


def test_slug_sanitization() -> None:
    assert slug_from_name("Análise / Venda: 2025!") == "analise-venda-2025"


def test_load_request_round_trips_sample(tmp_path: Path) -> None:
    path = _write_sample(tmp_path / "suzano.json")
    assert load_request(path) == sample_request()


def test_load_request_accepts_legacy_field_names(tmp_path: Path) -> None:
    payload = {
        "pages": [
            {
                "header": {
                    "titulo": "DEBÊNTURES SUZANO",
                    "tipoAtivo": "Debênture Incentivada",
                    "indexador": "IPCA + Taxa Pré",
                    "taxa": "IPCA + 5,48%",
                    "vencimento": "14/09/2038",
                    "tributacaoIR": "Isento",
                    "valorCompra": 149143.46,
                    "valorCurva": 158777.07,
                    "cuponsRecebidos": 17609.85,
                    "valorVenda": 140619.90,
                    "resultadoTituloBox": "Resultado da Venda Antecipada",
                    "resultadoValorBox": "R$ 9.086,29",
                    "resultadoSubBox": "+6,09% sobre o valor investido",
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
                        {"label": "Valor na curva", "valor": "R$ 189.834,15", "tom": "blue"},
                        {"label": "Cupons futuros", "valor": "R$ 17.609,85"},
                        {"label": "IR", "valor": "R$ 0,00", "tom": "red"},
                    ],
                    "valorFinal": "R$ 207.444,00",
                },
                "colunaDir": {"titulo": "BTDI11", "linhas": [], "valorFinal": "R$ 214.832,23"},
            }
        ]
    }
    path = tmp_path / "legacy.json"
    path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")

    request = load_request(path)
    assert request.pages[0].secondary.distribution == "Fundo/mês"
    assert request.pages[0].left.items[0].tone == "emphasis-blue"
    assert request.pages[0].right.items == ()
    assert request.language == "en"
    assert request.pages[0].header.asset_type == "Debênture Incentivada"
    assert request.pages[0].left.items[2].tone == "warning-red"
    assert request.pages[0].left.items[1].tone == "neutral"


def test_run_outputs_expected_artifacts() -> None:
    with tempfile.TemporaryDirectory() as temp_dir:
        out_dir = Path(temp_dir) / "out"
        config.set_out_dir(out_dir)
        good = _write_sample(Path(temp_dir) / "Suzano Report.json")
        bad = Path(temp_dir) / "broken.json"
        bad.write_text(json.dumps({"pages": []}), encoding="utf-8")

        results = run_reports([good, bad])

        assert results["READY"] == ["suzano-report"]
        assert results["FAILED"] == ["broken"]
        report_dir = out_dir / "suzano-report"
        assert (report_dir / "Analise_Venda_Antecipada.pdf").exists()
        assert (report_dir / "request.json").exists()
        assert not (out_dir / "suzano-report.tmp").exists()
        assert "ValidationError" in (out_dir / "broken" / "error.log").read_text(encoding="utf-8")
