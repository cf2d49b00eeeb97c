"""
Per-item pricing for jewelry lines.

Pure functions over Decimal values: metal price from net weight and rate,
making charge, and stone subtotals by class. Nothing here rounds; rounding
happens once at invoice level and at display time.
"""
import logging
import re
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel

from jewelry_invoice.core.models import PriceBreakdown, StoneClass, StoneLine, ZERO

logger = logging.getLogger(__name__)


DEFAULT_KARAT = 22
DEFAULT_SILVER_FINENESS = 999
SILVER_FINENESSES = (999, 925, 900)

_KARAT_PATTERN = re.compile(r'(\d+)\s*K', re.IGNORECASE)
_THREE_DIGITS = re.compile(r'(\d{3})')


class MakingChargeMode(str, Enum):
    """How the making (labour) charge is derived"""
    PERCENT = "percent"
    PER_GRAM = "per_gram"


class MetalKind(str, Enum):
    GOLD = "gold"
    SILVER = "silver"


class PricingInput(BaseModel):
    """Everything the calculator needs to price one unit of an item"""
    gross_weight: Decimal = ZERO
    material_type: str = ""
    rate_per_gram: Optional[Decimal] = None
    making_percent: Decimal = ZERO
    labour_rate: Decimal = ZERO
    stones: List[StoneLine] = []
    material_weight: Optional[Decimal] = None
    making_mode: MakingChargeMode = MakingChargeMode.PERCENT


def metal_kind(material_type: str) -> MetalKind:
    """Silver when the material mentions silver, gold otherwise"""
    if 'silver' in (material_type or '').lower():
        return MetalKind.SILVER
    return MetalKind.GOLD


def parse_karat(material_type: str) -> Optional[int]:
    """
    Extract a gold karat from a material string.

    Examples:
        parse_karat("Gold 22K")  -> 22
        parse_karat("18k rose")  -> 18
        parse_karat("Gold")      -> None
    """
    match = _KARAT_PATTERN.search(material_type or '')
    if not match:
        return None
    karat = int(match.group(1))
    if karat <= 0 or karat > 24:
        return None
    return karat


def parse_silver_fineness(material_type: str) -> Optional[int]:
    """
    Extract silver fineness (999, 925 or 900) from a material string.

    "92.5" is read as 925 and "90.0" as 900.
    """
    text = (material_type or '').lower()
    if '999' in text:
        return 999
    if '925' in text or '92.5' in text:
        return 925
    if '900' in text or '90.0' in text:
        return 900

    match = _THREE_DIGITS.search(text)
    if match and int(match.group(1)) in SILVER_FINENESSES:
        return int(match.group(1))
    return None


def resolve_purity(material_type: str) -> Tuple[MetalKind, int]:
    """
    Resolve metal kind and purity, falling back to documented defaults.

    Gold without a recognisable karat is treated as 22K; silver without a
    recognisable fineness as 999.
    """
    kind = metal_kind(material_type)

    if kind == MetalKind.SILVER:
        fineness = parse_silver_fineness(material_type)
        if fineness is None:
            logger.debug(f"No silver fineness in '{material_type}', using {DEFAULT_SILVER_FINENESS}")
            fineness = DEFAULT_SILVER_FINENESS
        return kind, fineness

    karat = parse_karat(material_type)
    if karat is None:
        logger.debug(f"No karat in '{material_type}', using {DEFAULT_KARAT}K")
        karat = DEFAULT_KARAT
    return kind, karat


def material_display(material_type: str) -> str:
    """Short label for the items table, e.g. G-22K or S-925"""
    kind, purity = resolve_purity(material_type)
    if kind == MetalKind.SILVER:
        return f"S-{purity}"
    return f"G-{purity}K"


def _stone_totals(stones: List[StoneLine]) -> dict:
    totals = {stone_class: ZERO for stone_class in StoneClass}
    weight = ZERO
    carats = {StoneClass.DIAMOND: ZERO, StoneClass.SOLITAIRE: ZERO}

    for stone in stones:
        stone_class = stone.stone_class
        totals[stone_class] += stone.amount
        weight += stone.weight
        if stone_class in carats:
            carats[stone_class] += stone.carats

    return {'amounts': totals, 'weight': weight, 'carats': carats}


def calculate_price(pricing: PricingInput) -> PriceBreakdown:
    """
    Price one unit of an item.

    Net metal weight is gross minus stone weight (never below zero) unless a
    positive material weight override is given. A missing or zero rate gives
    a zero metal price rather than an error.

    Args:
        pricing: Weight, purity, rate, making and stone data for the item

    Returns:
        PriceBreakdown with unit_total = metal + making + stones
    """
    stones = _stone_totals(pricing.stones)
    stone_weight = stones['weight']
    amounts = stones['amounts']

    if pricing.material_weight is not None and pricing.material_weight > 0:
        net_metal_weight = pricing.material_weight
    else:
        net_metal_weight = max(ZERO, pricing.gross_weight - stone_weight)

    rate = pricing.rate_per_gram if pricing.rate_per_gram and pricing.rate_per_gram > 0 else ZERO
    metal_price = net_metal_weight * rate

    if pricing.making_mode == MakingChargeMode.PER_GRAM:
        making_charge = net_metal_weight * pricing.labour_rate
    else:
        making_charge = net_metal_weight * rate * pricing.making_percent / Decimal(100)

    stone_price = sum(amounts.values(), ZERO)

    return PriceBreakdown(
        gross_weight=pricing.gross_weight,
        stone_weight=stone_weight,
        net_metal_weight=net_metal_weight,
        rate_per_gram=rate,
        metal_price=metal_price,
        making_charge=making_charge,
        kundan_price=amounts[StoneClass.KUNDAN],
        jarkan_price=amounts[StoneClass.JARKAN],
        diamond_price=amounts[StoneClass.DIAMOND],
        solitaire_price=amounts[StoneClass.SOLITAIRE],
        colour_stone_price=amounts[StoneClass.COLOUR],
        stone_price=stone_price,
        diamond_carats=stones['carats'][StoneClass.DIAMOND],
        solitaire_carats=stones['carats'][StoneClass.SOLITAIRE],
        unit_total=metal_price + making_charge + stone_price,
    )


class RateResolver:
    """
    Resolves the per-gram rate for a material through a product repository.

    Rates are looked up by karat for gold and by fineness for silver. An
    explicit positive custom rate always wins.
    """

    def __init__(self, repository):
        self.repository = repository

    def resolve(self, material_type: str, custom_rate: Optional[Decimal] = None) -> Decimal:
        if custom_rate is not None and custom_rate > 0:
            return custom_rate

        kind, purity = resolve_purity(material_type)
        if kind == MetalKind.SILVER:
            rate = self.repository.get_metal_rate_for_purity(purity)
        else:
            rate = self.repository.get_metal_rate_for_karat(purity)

        if rate is None or rate <= 0:
            logger.warning(
                f"No {kind.value} rate for purity {purity} ('{material_type}'); pricing metal at zero"
            )
            return ZERO
        return rate
