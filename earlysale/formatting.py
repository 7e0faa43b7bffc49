from __future__ import annotations

import math
from typing import Callable, NamedTuple

from .config import DEFAULT_LANGUAGE, labels_for


CurrencyFormatter = Callable[[float], str]


def format_brl(value: float) -> str:
    """R$ with a period for thousands and a comma for decimals: 149143.46 -> 'R$ 149.143,46'."""
    num = float(value)
    if not math.isfinite(num):
        raise ValueError(f"Cannot format non-finite amount: {value!r}")
    text = f"{abs(num):,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")
    sign = "-" if round(num, 2) < 0 else ""
    return f"{sign}R$ {text}"


def format_signed_pct(value: float, decimals: int = 2) -> str:
    sign = "+" if value > 0 else ""
    return f"{sign}{value:.{decimals}f}%".replace(".", ",")


class ResultCard(NamedTuple):
    title: str
    value: str
    subtitle: str


def result_card(
    purchase: float,
    sale: float,
    coupons: float = 0.0,
    title: str = "Resultado da Venda Antecipada",
    language: str = DEFAULT_LANGUAGE,
    format_currency: CurrencyFormatter = format_brl,
) -> ResultCard:
    gain = sale + coupons - purchase
    pct = (gain / purchase * 100.0) if purchase else 0.0
    subtitle = labels_for(language)["result_subtitle"].format(pct=format_signed_pct(pct))
    return ResultCard(title=title, value=format_currency(gain), subtitle=subtitle)
