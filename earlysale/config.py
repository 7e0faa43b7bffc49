from __future__ import annotations

from pathlib import Path
from typing import Dict, Tuple

from reportlab.lib.units import mm


BASE_DIR = Path(__file__).resolve().parents[1]
OUT_DIR = BASE_DIR / "out"

DEFAULT_FILENAME = "Analise_Venda_Antecipada.pdf"

# Page margins (portrait A4, points)
MARGIN_TOP = 20 * mm
MARGIN_BOTTOM = 20 * mm
MARGIN_LEFT = 18 * mm
MARGIN_RIGHT = 18 * mm

# Vertical rhythm
SECTION_GAP = 8 * mm
ROW_PITCH = 5.4 * mm
CARD_GAP = 3 * mm

FONT_REGULAR = "Helvetica"
FONT_BOLD = "Helvetica-Bold"

# Shrink-to-fit
MIN_FONT_SIZE = 6.0
FONT_STEP = 0.5

RGB = Tuple[int, int, int]

TEXT: RGB = (20, 20, 20)
WHITE: RGB = (255, 255, 255)
BLUE: RGB = (13, 82, 179)
BLUE_LIGHT: RGB = (26, 115, 217)
CARD_BG: RGB = (237, 245, 255)
GREEN: RGB = (46, 139, 87)

TONE_EMPHASIS = "emphasis-blue"
TONE_WARNING = "warning-red"
TONE_NEUTRAL = "neutral"

# tone -> (fill, border)
TONE_PALETTE: Dict[str, Tuple[RGB, RGB]] = {
    TONE_EMPHASIS: ((235, 246, 255), (179, 220, 255)),
    TONE_WARNING: ((255, 240, 240), (255, 204, 204)),
    TONE_NEUTRAL: ((245, 245, 245), (230, 230, 230)),
}
FOOTER_PALETTE: Tuple[RGB, RGB] = ((224, 234, 246), (160, 190, 220))

LABEL_SETS: Dict[str, Dict[str, str]] = {
    "en": {
        "asset_type": "Asset Type:",
        "index": "Index:",
        "rate": "Rate:",
        "maturity": "Maturity:",
        "tax_treatment": "Income Tax:",
        "purchase_value": "Purchase Value:",
        "curve_value": "Curve Value:",
        "coupons_received": "Coupons Received:",
        "sale_value": "Sale Value:",
        "distribution": "Distribution:",
        "secondary_title": "Secondary Asset Info",
        "decomposition_title": "Decomposition",
        "final_value": "FINAL VALUE:",
        "result_subtitle": "{pct} over the amount invested",
    },
    "pt": {
        "asset_type": "Tipo de Ativo:",
        "index": "Indexador:",
        "rate": "Taxa:",
        "maturity": "Vencimento:",
        "tax_treatment": "Tributação IR:",
        "purchase_value": "Valor de Compra:",
        "curve_value": "Valor de Curva:",
        "coupons_received": "Cupons Recebidos:",
        "sale_value": "Valor de Venda:",
        "distribution": "Distribuição:",
        "secondary_title": "Informações - Ativo 2",
        "decomposition_title": "Decomposição Detalhada dos Valores Finais",
        "final_value": "VALOR FINAL:",
        "result_subtitle": "{pct} sobre o valor investido",
    },
}
DEFAULT_LANGUAGE = "en"


def labels_for(language: str) -> Dict[str, str]:
    if language not in LABEL_SETS:
        raise ValueError(f"Unsupported language: {language}")
    return LABEL_SETS[language]


def set_out_dir(path: Path) -> None:
    global OUT_DIR
    OUT_DIR = path
