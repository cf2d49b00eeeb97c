"""
Shared fixtures: a seller, a buyer and a simple priced draft.
"""
import pytest
from datetime import date, datetime
from decimal import Decimal

from jewelry_invoice.core.calculator import InvoiceCalculator
from jewelry_invoice.core.models import (
    BankInfo, Customer, Draft, ItemDraft, OrderLine, OrderSnapshot, Party,
    Product, StoneLine, StoreInfo,
)
from jewelry_invoice.core.pricing import PricingInput, calculate_price
from jewelry_invoice.core.repository import InMemoryCatalog


@pytest.fixture
def seller():
    return Party(
        name="Shree Jewellers",
        address="Main Road, Saharsa",
        phone_primary="9876543210",
        email="sales@shreejewellers.in",
        gstin="10ABCDE1234F1Z5",
        state_code="10",
        state_name="Bihar",
    )


@pytest.fixture
def buyer():
    return Party(
        name="Asha Devi",
        address="Station Road, Saharsa",
        phone="9123456780",
        state_name="Bihar",
    )


@pytest.fixture
def bank_info():
    return BankInfo(
        account_holder="Shree Jewellers",
        account_number="1234567890",
        ifsc_code="SBIN0000001",
        branch="Saharsa",
        account_type="Current",
        pan="ABCDE1234F",
    )


@pytest.fixture
def ring_item():
    """10 g of 22K at 6000/g with 10% making: 66000 per unit"""
    breakdown = calculate_price(PricingInput(
        gross_weight=Decimal("10"),
        material_type="Gold 22K",
        rate_per_gram=Decimal("6000"),
        making_percent=Decimal("10"),
    ))
    return ItemDraft.from_breakdown(
        variant_no="RING-0001",
        product_name="Plain Ring",
        material_with_purity="G-22K",
        quantity=1,
        breakdown=breakdown,
        making_percent=Decimal("10"),
        labour_rate=Decimal("0"),
        barcode_id="7113",
    )


@pytest.fixture
def make_draft(seller, buyer, ring_item):
    """Factory for drafts; keyword arguments override the defaults"""
    def _make(**overrides):
        values = dict(
            invoice_no="INV-2026-10-000123",
            issue_date=date(2026, 10, 19),
            seller=seller,
            buyer=buyer,
            items=[ring_item],
            tax_rate=Decimal("3"),
        )
        values.update(overrides)
        return Draft(**values)
    return _make


@pytest.fixture
def invoice(make_draft, bank_info):
    return InvoiceCalculator().calculate(make_draft(), bank_info)


@pytest.fixture
def store(seller, bank_info):
    return StoreInfo(seller=seller, bank_info=bank_info)


@pytest.fixture
def catalog(store):
    catalog = InMemoryCatalog.from_base_rates(Decimal("6000"), Decimal("75"), store=store)
    catalog.add_product(Product(
        id="PRD-RING-24K-0001",
        name="Plain Ring",
        material_type="Gold 24K",
        total_weight=Decimal("10"),
        making_percent=Decimal("10"),
    ))
    catalog.add_product(Product(
        id="PRD-PENDANT-0002",
        name="Diamond Pendant",
        material_type="Gold 18K",
        total_weight=Decimal("5"),
        making_percent=Decimal("12"),
        stones=[StoneLine(name="Diamond", weight=Decimal("0.2"), carats=Decimal("1"),
                          amount=Decimal("15000"))],
    ))
    return catalog


@pytest.fixture
def order():
    return OrderSnapshot(
        order_id="ORD-2026-0001",
        created_at=datetime(2026, 10, 19, 11, 30),
        customer=Customer(name="Asha Devi", address="Station Road, Saharsa", state_name="Bihar"),
        lines=[OrderLine(product_id="PRD-RING-24K-0001", quantity=1)],
    )
