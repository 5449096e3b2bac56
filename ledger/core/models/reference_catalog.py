"""
Built-in reference catalog of Taiwan-listed ETFs and stocks.

Used as the fallback metadata source when a portfolio has not declared its
own entry for a symbol, and for naming newly added holdings.
"""

from ledger.core.enums import InstrumentCategory, Market

from .metadata import InstrumentMetadata, MetadataMap

_TW = Market.TW.value
_US = Market.US.value
_CAP = InstrumentCategory.MARKET_CAP.value
_DIV = InstrumentCategory.HIGH_DIVIDEND.value
_GROWTH = InstrumentCategory.GROWTH.value
_ACTIVE = InstrumentCategory.ACTIVE.value
_BOND = InstrumentCategory.BOND.value

# symbol: (name, market, category, industry, payouts per year)
_DEFINITIONS: dict[str, tuple[str, str, str, str, int]] = {
    "0050": ("元大台灣50", _TW, _CAP, "Taiwan 50", 2),
    "0052": ("富邦科技", _TW, _GROWTH, "Technology", 1),
    "0056": ("元大高股息", _TW, _DIV, "Traditional industry", 4),
    "006208": ("富邦台50", _TW, _CAP, "Taiwan 50", 2),
    "00646": ("元大S&P500", _US, _CAP, "S&P 500", 1),
    "00679B": ("元大美債20年", _US, _BOND, "US Treasuries", 4),
    "00701": ("國泰股利精選30", _TW, _DIV, "Financials", 2),
    "00712": ("復華富時不動產", _US, _BOND, "Real estate", 4),
    "00713": ("元大台灣高息低波", _TW, _DIV, "Financials", 4),
    "00830": ("國泰費城半導體", _US, _GROWTH, "PHLX Semiconductor", 1),
    "00858": ("永豐美國500大", _US, _DIV, "S&P 500", 2),
    "00878": ("國泰永續高股息", _TW, _DIV, "ESG", 4),
    "00881": ("國泰台灣科技龍頭", _TW, _GROWTH, "Technology", 2),
    "00895": ("富邦未來車", _US, _GROWTH, "NASDAQ", 1),
    "00915": ("凱基優選高股息30", _TW, _DIV, "Financials", 4),
    "00918": ("大華優利高填息30", _TW, _DIV, "Financials", 4),
    "00919": ("群益台灣精選高息", _TW, _DIV, "Financials", 4),
    "00921": ("兆豐龍頭等權重", _TW, _CAP, "Taiwan 50", 4),
    "00922": ("國泰台灣領袖50", _TW, _DIV, "Taiwan 50", 2),
    "00924": ("復華S&P500成長", _US, _GROWTH, "S&P 500", 1),
    "00927": ("群益半導體收益", _TW, _GROWTH, "Semiconductors", 4),
    "00929": ("復華台灣科技優息", _TW, _DIV, "Technology", 12),
    "00932": ("兆豐永續高息等權", _TW, _DIV, "ESG", 4),
    "00933B": ("國泰10Y+金融債", _US, _BOND, "Financials", 12),
    "00934": ("中信成長高股息", _TW, _DIV, "Technology", 12),
    "00935": ("野村臺灣新科技50", _TW, _GROWTH, "Technology", 2),
    "00936": ("台新永續高息中小", _TW, _DIV, "ESG", 12),
    "00937B": ("群益ESG投等債20+", _US, _BOND, "ESG", 12),
    "00940": ("元大台灣價值高息", _TW, _DIV, "Traditional industry", 12),
    "00946": ("群益科技高息成長", _TW, _GROWTH, "Technology", 12),
    "00947": ("台新臺灣IC設計", _TW, _GROWTH, "IC design", 4),
    "009813": ("貝萊德標普卓越50", _US, _GROWTH, "S&P 500", 2),
    "00980A": ("主動野村臺灣優選", _TW, _ACTIVE, "Technology", 4),
    "00981A": ("主動統一台股增長", _TW, _ACTIVE, "Technology", 1),
    "00981B": ("第一金優選非投債", _US, _BOND, "Corporate bonds", 12),
    "00982A": ("主動群益台灣強棒", _TW, _ACTIVE, "Technology", 4),
    "00983A": ("主動中信ARK創新", _US, _ACTIVE, "NASDAQ", 1),
    "00984A": ("主動安聯台灣高息", _TW, _ACTIVE, "Financials", 4),
    "00985A": ("主動野村台灣50", _TW, _ACTIVE, "Taiwan 50", 1),
    "00986A": ("主動台新龍頭成長", _US, _ACTIVE, "NASDAQ", 1),
    "00991A": ("主動復華未來50", _TW, _ACTIVE, "Semiconductors", 2),
    "2330": ("台積電", _TW, _GROWTH, "Semiconductors", 4),
    "2646": ("星宇航空", _TW, _GROWTH, "Airlines", 1),
    "5483": ("中美晶", _TW, _GROWTH, "Semiconductors", 2),
}

# symbol: (ex-dividend months, payment months)
_DIVIDEND_CALENDAR: dict[str, tuple[tuple[int, ...], tuple[int, ...]]] = {
    "0050": ((1, 7), (2, 8)),
    "0056": ((1, 4, 7, 10), (2, 5, 8, 11)),
    "00881": ((1, 8), (2, 9)),
    "00918": ((3, 6, 9, 12), (1, 4, 7, 10)),
    "00919": ((3, 6, 9, 12), (1, 4, 7, 10)),
    "00922": ((3, 10), (4, 11)),
}

_DEFAULT_YIELDS: dict[str, float] = {
    "0056": 8.0,
    "00881": 5.0,
    "00918": 10.0,
    "00919": 10.0,
    "00922": 5.0,
}


def _build_entry(symbol: str) -> InstrumentMetadata:
    name, market, category, industry, frequency = _DEFINITIONS[symbol]
    ex_div_months, pay_months = _DIVIDEND_CALENDAR.get(symbol, ((), ()))
    return InstrumentMetadata(
        symbol=symbol,
        name=name,
        market=market,
        category=category,
        industry=industry,
        frequency=frequency,
        ex_div_months=ex_div_months,
        pay_months=pay_months,
        default_yield=_DEFAULT_YIELDS.get(symbol),
    )


def default_metadata() -> MetadataMap:
    """Reference metadata for every symbol in the built-in catalog."""
    return MetadataMap.from_records(_build_entry(symbol) for symbol in _DEFINITIONS)


def catalog_name(symbol: str) -> str | None:
    """Display name from the catalog, if the symbol is known."""
    definition = _DEFINITIONS.get(symbol.strip().upper())
    return definition[0] if definition else None
