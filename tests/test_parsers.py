"""
Unit tests for order parsers, catalog loading and the draft builder.
"""
import json
import logging

import pytest
from datetime import datetime
from decimal import Decimal

from jewelry_invoice.core.exceptions import ParserError
from jewelry_invoice.core.models import OrderLine
from jewelry_invoice.core.parsers import DraftBuilder, load_order, order_generator
from jewelry_invoice.core.pricing import MakingChargeMode
from jewelry_invoice.core.repository import load_catalog


XML_ORDER = """<?xml version="1.0" encoding="UTF-8"?>
<order>
  <order_id>ORD-XML-1</order_id>
  <created_at>19/10/2026 11:30</created_at>
  <customer>
    <name>Asha Devi</name>
    <address>Station Road, Saharsa</address>
    <phone></phone>
  </customer>
  <lines>
    <line><product_id>PRD-RING-24K-0001</product_id><quantity>2</quantity></line>
  </lines>
  <discount>500.50</discount>
  <payment_split><cash>5000</cash><online>1000</online></payment_split>
</order>
"""


@pytest.fixture
def json_order_file(tmp_path):
    """Write a JSON order with two lines"""
    path = tmp_path / "ORD-JSON-1.json"
    path.write_text(json.dumps({
        "order_id": "ORD-JSON-1",
        "created_at": "2026-10-19T11:30:00",
        "customer": {"name": "Asha Devi", "state_name": "Bihar"},
        "lines": [
            {"product_id": "PRD-RING-24K-0001", "quantity": 1, "gross_weight": 10.25},
            {"product_id": "PRD-PENDANT-0002", "custom_rate": 4600},
        ],
        "tax_rate": 3,
    }), encoding="utf-8")
    return path


@pytest.fixture
def catalog_file(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps({
        "rates": {"gold_24k": 6000, "silver_999": 75, "gold": {"22": 5400}},
        "materials": [{"id": "m1", "name": "Gold", "types": ["22K", "18K"]}],
        "products": [
            {"id": "PRD-RING-0001", "name": "Ring", "material_type": "Gold 22K",
             "total_weight": 10, "making_percent": 10},
        ],
        "store": {
            "seller": {"name": "Shree Jewellers", "state_name": "Bihar"},
            "bank_info": {"account_number": "1234567890"},
        },
    }), encoding="utf-8")
    return path


class TestOrderParsers:
    """Test suite for JSON and XML order files"""

    def test_json_order(self, json_order_file):
        order = load_order(json_order_file)

        assert order.order_id == "ORD-JSON-1"
        assert order.created_at == datetime(2026, 10, 19, 11, 30)
        assert len(order.lines) == 2
        assert order.lines[0].gross_weight == Decimal("10.25")
        assert order.lines[1].custom_rate == Decimal("4600")
        assert order.tax_rate == Decimal("3")

    def test_xml_order(self, tmp_path):
        """Test XML parsing with a single line and a day-first date"""
        path = tmp_path / "ORD-XML-1.xml"
        path.write_text(XML_ORDER, encoding="utf-8")

        order = load_order(path)

        assert order.order_id == "ORD-XML-1"
        assert order.created_at == datetime(2026, 10, 19, 11, 30)
        assert order.customer.phone == ""
        assert len(order.lines) == 1
        assert order.lines[0].quantity == 2
        assert order.discount == Decimal("500.50")
        assert order.payment_split.online == Decimal("1000")
        assert order.tax_rate is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_order(tmp_path / "missing.json")

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "order.csv"
        path.write_text("order_id\n1\n")

        with pytest.raises(ParserError, match="Unsupported"):
            load_order(path)

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        with pytest.raises(ParserError):
            load_order(path)

    def test_generator_skips_bad_files(self, tmp_path, json_order_file):
        """Test that unparsable and non-order files are skipped"""
        (tmp_path / "broken.json").write_text("{not json")
        (tmp_path / "notes.txt").write_text("ignore me")

        orders = list(order_generator(tmp_path))

        assert [order.order_id for _, order in orders] == ["ORD-JSON-1"]


class TestCatalog:
    """Test suite for JSON catalog loading"""

    def test_rates_products_and_store(self, catalog_file):
        catalog = load_catalog(catalog_file)

        assert catalog.get_metal_rate_for_karat(24) == Decimal("6000")
        assert catalog.get_metal_rate_for_karat(22) == Decimal("5400")
        assert catalog.get_metal_rate_for_karat(18) == Decimal("4500")
        assert catalog.get_metal_rate_for_purity(999) == Decimal("75")
        assert [p.id for p in catalog.get_products_by_ids(["PRD-RING-0001", "nope"])] == ["PRD-RING-0001"]
        assert catalog.get_materials()[0].types == ["22K", "18K"]
        assert catalog.store.seller.name == "Shree Jewellers"

    def test_missing_catalog(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_catalog(tmp_path / "missing.json")

    def test_invalid_catalog(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps({"products": [{"name": "no id"}]}))

        with pytest.raises(ParserError):
            load_catalog(path)


class TestDraftBuilder:
    """Test suite for pricing order lines into a draft"""

    def test_build(self, catalog, store, order):
        draft = DraftBuilder(catalog).build(order, store)

        assert draft.invoice_no == "ORD-2026-0001"
        assert draft.issue_date == order.created_at.date()
        assert draft.seller == store.seller
        assert draft.buyer.name == "Asha Devi"
        assert draft.tax_rate == Decimal("3")

        item = draft.items[0]
        assert item.variant_no == "ING-24K-0001"
        assert item.material_with_purity == "G-24K"
        assert item.rate_per_gram == Decimal("6000")
        assert item.unit_price == Decimal("66000")

    def test_explicit_invoice_no(self, catalog, store, order):
        assert DraftBuilder(catalog).build(order, store, invoice_no="INV-9").invoice_no == "INV-9"

    def test_unknown_product_skipped(self, catalog, store, order, caplog):
        order = order.model_copy(update={'lines': [
            OrderLine(product_id="PRD-UNKNOWN"),
            OrderLine(product_id="PRD-PENDANT-0002"),
        ]})

        with caplog.at_level(logging.WARNING):
            draft = DraftBuilder(catalog).build(order, store)

        assert [item.product_name for item in draft.items] == ["Diamond Pendant"]
        assert "PRD-UNKNOWN" in caplog.text

    def test_stones_and_18k_rate(self, catalog):
        """Test pendant: 18K rate derived from 24K, diamond subtracted from weight"""
        product = catalog.get_products_by_ids(["PRD-PENDANT-0002"])[0]
        item = DraftBuilder(catalog).price_line(OrderLine(product_id=product.id), product)

        assert item.rate_per_gram == Decimal("4500")
        assert item.net_metal_weight == Decimal("4.8")
        assert item.stone_amount == Decimal("15000")
        assert item.diamond_carats == Decimal("1")
        assert item.unit_price == item.metal_price + item.making_charge + item.stone_amount

    def test_line_overrides(self, catalog):
        """Test counter weight, custom rate and making overrides"""
        product = catalog.get_products_by_ids(["PRD-RING-24K-0001"])[0]
        line = OrderLine(
            product_id=product.id,
            gross_weight=Decimal("12"),
            custom_rate=Decimal("6100"),
            making_percent=Decimal("8"),
            quantity=2,
        )
        item = DraftBuilder(catalog).price_line(line, product)

        assert item.gross_weight == Decimal("12")
        assert item.rate_per_gram == Decimal("6100")
        assert item.metal_price == Decimal("73200")
        assert item.making_charge == Decimal("5856")
        assert item.quantity == 2

    def test_per_gram_mode(self, catalog):
        product = catalog.get_products_by_ids(["PRD-RING-24K-0001"])[0]
        line = OrderLine(product_id=product.id, labour_rate=Decimal("450"))
        item = DraftBuilder(catalog, making_mode=MakingChargeMode.PER_GRAM).price_line(line, product)

        assert item.making_charge == Decimal("4500")

    def test_default_tax_rate(self, catalog, store, order):
        draft = DraftBuilder(catalog, default_tax_rate=Decimal("5")).build(order, store)

        assert draft.tax_rate == Decimal("5")
