"""
Data models for jewelry invoice representation.
Using Pydantic for validation; all money and weights are Decimal.
"""
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, validator


ZERO = Decimal('0')


class StoneClass(str, Enum):
    """Stone classes priced separately on an item"""
    KUNDAN = "kundan"
    JARKAN = "jarkan"
    DIAMOND = "diamond"
    SOLITAIRE = "solitaire"
    COLOUR = "colour"


class Party(BaseModel):
    """Seller or buyer party information"""
    model_config = ConfigDict(frozen=True)

    name: str
    address: str = ""
    phone: str = ""
    phone_primary: str = ""
    phone_secondary: str = ""
    email: str = ""
    gstin: str = ""
    pan: Optional[str] = None
    state_code: str = ""
    state_name: str = ""
    certification: str = ""


class BankInfo(BaseModel):
    """Seller's settlement account"""
    model_config = ConfigDict(frozen=True)

    account_holder: str = ""
    account_number: str = ""
    ifsc_code: str = ""
    branch: str = ""
    account_type: str = ""
    pan: str = ""


class StoneLine(BaseModel):
    """Single stone entry on a product (weight in grams, carats for display)"""
    model_config = ConfigDict(frozen=True)

    name: str
    weight: Decimal = Field(default=ZERO, ge=0)
    carats: Decimal = Field(default=ZERO, ge=0)
    amount: Decimal = Field(default=ZERO, ge=0)

    @property
    def stone_class(self) -> StoneClass:
        key = self.name.strip().lower()
        for stone_class in (StoneClass.KUNDAN, StoneClass.JARKAN,
                            StoneClass.DIAMOND, StoneClass.SOLITAIRE):
            if key == stone_class.value:
                return stone_class
        return StoneClass.COLOUR


class ExchangeGoldInfo(BaseModel):
    """Trade-in metal valuation, subtracted before tax"""
    model_config = ConfigDict(frozen=True)

    product_name: str = ""
    weight: Decimal = Field(default=ZERO, ge=0)
    purity: str = ""
    rate: Decimal = Field(default=ZERO, ge=0)
    value: Optional[Decimal] = None
    total_product_weight: Decimal = ZERO
    percentage: Decimal = ZERO

    @property
    def exchange_value(self) -> Decimal:
        if self.value is not None:
            return self.value
        return self.weight * self.rate


class PaymentSplit(BaseModel):
    """How the net amount is being settled"""
    model_config = ConfigDict(frozen=True)

    cash: Decimal = Field(default=ZERO, ge=0)
    bank: Decimal = Field(default=ZERO, ge=0)
    card: Decimal = Field(default=ZERO, ge=0)
    online: Decimal = Field(default=ZERO, ge=0)
    due_amount: Decimal = ZERO

    @property
    def electronic(self) -> Decimal:
        """Bank, card and online combined (one row on the document)"""
        return self.bank + self.card + self.online

    @property
    def total_paid(self) -> Decimal:
        return self.cash + self.electronic

    @property
    def is_overpaid(self) -> bool:
        return self.due_amount < 0

    def reconciled(self, net_amount: Decimal) -> 'PaymentSplit':
        """Copy with due amount derived from the net amount"""
        return self.model_copy(update={'due_amount': net_amount - self.total_paid})


class PriceBreakdown(BaseModel):
    """Pricing calculator output for one unit of an item"""
    model_config = ConfigDict(frozen=True)

    gross_weight: Decimal
    stone_weight: Decimal
    net_metal_weight: Decimal
    rate_per_gram: Decimal
    metal_price: Decimal
    making_charge: Decimal
    kundan_price: Decimal = ZERO
    jarkan_price: Decimal = ZERO
    diamond_price: Decimal = ZERO
    solitaire_price: Decimal = ZERO
    colour_stone_price: Decimal = ZERO
    stone_price: Decimal
    diamond_carats: Decimal = ZERO
    solitaire_carats: Decimal = ZERO
    unit_total: Decimal


class ItemDraft(BaseModel):
    """Editable line item; weights and prices are per unit"""
    variant_no: str
    product_name: str
    material_with_purity: str = ""
    quantity: int = 1
    gross_weight: Decimal = ZERO
    net_stone_weight: Decimal = ZERO
    net_metal_weight: Decimal = ZERO
    making_percent: Decimal = ZERO
    labour_rate: Decimal = ZERO
    rate_per_gram: Decimal = ZERO
    metal_price: Decimal = ZERO
    making_charge: Decimal = ZERO
    stone_amount: Decimal = ZERO
    unit_price: Decimal = ZERO
    barcode_id: str = ""
    diamond_carats: Decimal = ZERO
    solitaire_carats: Decimal = ZERO

    @classmethod
    def from_breakdown(cls, variant_no: str, product_name: str, material_with_purity: str,
                       quantity: int, breakdown: PriceBreakdown,
                       making_percent: Decimal, labour_rate: Decimal,
                       barcode_id: str = "") -> 'ItemDraft':
        return cls(
            variant_no=variant_no,
            product_name=product_name,
            material_with_purity=material_with_purity,
            quantity=quantity,
            gross_weight=breakdown.gross_weight,
            net_stone_weight=breakdown.stone_weight,
            net_metal_weight=breakdown.net_metal_weight,
            making_percent=making_percent,
            labour_rate=labour_rate,
            rate_per_gram=breakdown.rate_per_gram,
            metal_price=breakdown.metal_price,
            making_charge=breakdown.making_charge,
            stone_amount=breakdown.stone_price,
            unit_price=breakdown.unit_total,
            barcode_id=barcode_id,
            diamond_carats=breakdown.diamond_carats,
            solitaire_carats=breakdown.solitaire_carats,
        )


class Item(ItemDraft):
    """Frozen line item on an invoice"""
    model_config = ConfigDict(frozen=True)

    cost_value: Decimal

    @property
    def total_gross_weight(self) -> Decimal:
        return self.gross_weight * self.quantity

    @property
    def total_stone_weight(self) -> Decimal:
        return self.net_stone_weight * self.quantity

    @property
    def total_metal_weight(self) -> Decimal:
        return self.net_metal_weight * self.quantity

    @property
    def total_making_charge(self) -> Decimal:
        return self.making_charge * self.quantity

    @property
    def total_stone_amount(self) -> Decimal:
        return self.stone_amount * self.quantity


class Draft(BaseModel):
    """Editable invoice intent, converted (never mutated) into an Invoice"""
    invoice_no: str
    issue_date: date
    seller: Party
    buyer: Party
    items: List[ItemDraft] = []
    exchange_gold: Optional[ExchangeGoldInfo] = None
    discount: Decimal = ZERO
    tax_rate: Decimal = Decimal('3')
    payment_split: Optional[PaymentSplit] = None
    notes: str = ""

    # Header overrides; None means "derive the default"
    memo_no: Optional[str] = None
    city: Optional[str] = None
    place_of_delivery: Optional[str] = None

    @validator('discount', 'tax_rate')
    def validate_non_negative(cls, v):
        if v < 0:
            raise ValueError('Discount and tax rate cannot be negative')
        return v


class Invoice(BaseModel):
    """Frozen, fully priced invoice"""
    model_config = ConfigDict(frozen=True)

    invoice_no: str
    issue_date: date
    seller: Party
    buyer: Party
    items: Tuple[Item, ...] = Field(..., min_length=1)
    exchange_gold: Optional[ExchangeGoldInfo] = None

    subtotal: Decimal
    exchange_value: Decimal
    discount: Decimal
    taxable_amount: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    gross_total: Decimal
    round_off: Decimal
    net_amount: Decimal

    payment_split: Optional[PaymentSplit] = None
    notes: str = ""
    bank_info: BankInfo

    # Regulatory references
    irn: str
    ack_no: str
    ack_date: str

    memo_no: str = ""
    city: str = ""
    place_of_delivery: str = ""

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def half_tax_rate(self) -> Decimal:
        """SGST and CGST each carry half of the GST rate"""
        return self.tax_rate / 2

    @property
    def half_tax_amount(self) -> Decimal:
        return self.tax_amount / 2


class Product(BaseModel):
    """Catalog product as supplied by the product repository"""
    id: str
    name: str
    material_id: str = ""
    material_type: str = ""
    total_weight: Decimal = ZERO
    material_weight: Decimal = ZERO
    making_percent: Decimal = ZERO
    labour_rate: Decimal = ZERO
    stones: List[StoneLine] = []


class Material(BaseModel):
    """Material (gold, silver, ...) and the purities it is sold in"""
    id: str
    name: str
    types: List[str] = []


class Customer(BaseModel):
    """Read-only customer snapshot"""
    id: str = ""
    name: str
    address: str = ""
    phone: str = ""
    email: str = ""
    gstin: str = ""
    state_code: str = ""
    state_name: str = ""


class OrderLine(BaseModel):
    """Order line; optional fields override catalog values"""
    product_id: str
    quantity: int = 1
    gross_weight: Optional[Decimal] = None
    custom_rate: Optional[Decimal] = None
    making_percent: Optional[Decimal] = None
    labour_rate: Optional[Decimal] = None
    barcode_id: str = ""


class OrderSnapshot(BaseModel):
    """Read-only order snapshot consumed once per render"""
    order_id: str
    created_at: datetime
    customer: Customer
    lines: List[OrderLine] = []
    discount: Decimal = ZERO
    tax_rate: Optional[Decimal] = None
    exchange_gold: Optional[ExchangeGoldInfo] = None
    payment_split: Optional[PaymentSplit] = None
    notes: str = ""


class StoreInfo(BaseModel):
    """Seller identity and settlement account"""
    seller: Party
    bank_info: BankInfo = BankInfo()


class ValidationViolation(BaseModel):
    """Represents a single input or consistency violation"""
    code: str
    severity: str  # ERROR, WARNING
    field: str
    message: str


class ValidationResult(BaseModel):
    """Result of draft or invoice validation"""
    invoice_no: str
    timestamp: datetime = Field(default_factory=datetime.now)
    is_valid: bool = True
    violations: List[ValidationViolation] = []

    def add_violation(self, code: str, field: str, message: str,
                      severity: str = "ERROR"):
        """Helper to add violation"""
        violation = ValidationViolation(
            code=code,
            severity=severity,
            field=field,
            message=message,
        )
        self.violations.append(violation)
        if severity == "ERROR":
            self.is_valid = False

    @property
    def errors(self) -> List[ValidationViolation]:
        return [v for v in self.violations if v.severity == "ERROR"]


class RenderResult(BaseModel):
    """Outcome of rendering one invoice to a file"""
    invoice_no: str
    success: bool
    output_path: Optional[str] = None
    backend: Optional[str] = None
    reason: str = ""
    net_amount: Optional[Decimal] = None
    timestamp: datetime = Field(default_factory=datetime.now)
    elapsed_ms: Optional[float] = None


class BatchResult(BaseModel):
    """Result of a batch render run"""
    total: int = 0
    succeeded: int = 0
    failed: int = 0
    processing_time_seconds: float = 0.0
    results: List[RenderResult] = []

    def add_result(self, result: RenderResult):
        self.results.append(result)
        self.total += 1
        if result.success:
            self.succeeded += 1
        else:
            self.failed += 1
