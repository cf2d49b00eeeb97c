"""
Order snapshot parsers for XML and JSON formats, and the draft builder
that prices order lines against the product repository.
Uses generators for memory-efficient batch processing.
"""
import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import Generator, List, Optional, Tuple, Union

import xmltodict
from dateutil.parser import isoparse, parse as parse_date

from jewelry_invoice.core.exceptions import ParserError
from jewelry_invoice.core.models import (
    Draft, ItemDraft, OrderLine, OrderSnapshot, Party, Product, StoreInfo,
)
from jewelry_invoice.core.pricing import (
    MakingChargeMode, PricingInput, RateResolver, calculate_price, material_display,
)
from jewelry_invoice.core.repository import ProductRepository
from jewelry_invoice.utils.decorators import audit_log, measure_performance

logger = logging.getLogger(__name__)


def _prune(value):
    """Drop empty XML elements (parsed as None) so model defaults apply"""
    if isinstance(value, dict):
        return {k: _prune(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [_prune(v) for v in value]
    return value


def _parse_timestamp(value: str):
    try:
        return isoparse(value)
    except ValueError:
        # Non-ISO order exports write dates day-first
        return parse_date(value, dayfirst=True)


def _normalize(data: dict) -> dict:
    data = dict(data)
    created_at = data.get('created_at')
    if isinstance(created_at, str):
        data['created_at'] = _parse_timestamp(created_at)
    return data


class XMLOrderParser:
    """
    Parser for XML order exports.

    Expected layout::

        <order>
          <order_id>ORD-1</order_id>
          <created_at>2026-10-19T11:30:00</created_at>
          <customer><name>Asha</name><address>Station Road, Saharsa</address></customer>
          <lines>
            <line><product_id>p1</product_id><quantity>1</quantity></line>
          </lines>
          <payment_split><cash>5000</cash></payment_split>
        </order>
    """

    FORCE_LIST = ('line',)

    @measure_performance
    def parse(self, file_path: Union[str, Path]) -> OrderSnapshot:
        """
        Parse single XML order file.

        Raises:
            ParserError: If parsing fails
        """
        try:
            with open(file_path, 'rb') as f:
                doc = xmltodict.parse(f, force_list=self.FORCE_LIST)

            data = _prune(doc.get('order') or {})
            lines = (data.pop('lines', None) or {}).get('line', [])
            data['lines'] = lines

            return OrderSnapshot(**_normalize(data))

        except Exception as e:
            raise ParserError(f"Failed to parse XML order: {str(e)}") from e


class JSONOrderParser:
    """Parser for JSON-formatted orders"""

    @measure_performance
    def parse(self, file_path: Union[str, Path]) -> OrderSnapshot:
        """
        Parse single JSON order file.

        Raises:
            ParserError: If parsing fails
        """
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = json.load(f, parse_float=Decimal)

            # Direct mapping from JSON to model
            return OrderSnapshot(**_normalize(data))

        except Exception as e:
            raise ParserError(f"Failed to parse JSON order: {str(e)}") from e


def load_order(file_path: Union[str, Path]) -> OrderSnapshot:
    """
    Auto-detect format and parse an order file.

    Args:
        file_path: Path to order file (XML or JSON)

    Returns:
        Parsed OrderSnapshot
    """
    path = Path(file_path)

    if not path.exists():
        raise FileNotFoundError(f"Order file not found: {file_path}")

    suffix = path.suffix.lower()

    if suffix == '.xml':
        parser = XMLOrderParser()
    elif suffix == '.json':
        parser = JSONOrderParser()
    else:
        raise ParserError(f"Unsupported file format: {suffix}")

    return parser.parse(path)


def order_generator(directory: Union[str, Path],
                    pattern: str = "*") -> Generator[Tuple[Path, OrderSnapshot], None, None]:
    """
    Generator that yields (path, order) pairs from a directory.
    Files that fail to parse are logged and skipped.

    Example:
        for path, order in order_generator('orders/', '*.json'):
            render(order)
    """
    dir_path = Path(directory)

    if not dir_path.exists():
        raise FileNotFoundError(f"Directory not found: {directory}")

    for file_path in sorted(dir_path.glob(pattern)):
        if not file_path.is_file() or file_path.suffix.lower() not in ('.json', '.xml'):
            continue
        try:
            yield file_path, load_order(file_path)
        except ParserError as e:
            logger.error(f"Failed to parse {file_path}: {e}")
            continue


class DraftBuilder:
    """
    Builds a priced Draft from an order snapshot.

    Products are fetched from the repository once per build and each line is
    priced with the pricing calculator. Lines whose product is unknown to the
    repository are skipped with a warning.
    """

    def __init__(self, repository: ProductRepository,
                 making_mode: MakingChargeMode = MakingChargeMode.PERCENT,
                 default_tax_rate: Decimal = Decimal('3')):
        self.repository = repository
        self.making_mode = making_mode
        self.default_tax_rate = default_tax_rate
        self.rates = RateResolver(repository)

    @audit_log
    def build(self, order: OrderSnapshot, store: StoreInfo,
              invoice_no: Optional[str] = None) -> Draft:
        """
        Price every order line and assemble the draft.

        Args:
            order: Order snapshot
            store: Seller identity
            invoice_no: Invoice number; defaults to the order id

        Returns:
            Draft ready for the invoice calculator
        """
        product_ids = [line.product_id for line in order.lines]
        products = {p.id: p for p in self.repository.get_products_by_ids(product_ids)}

        items: List[ItemDraft] = []
        for line in order.lines:
            product = products.get(line.product_id)
            if product is None:
                logger.warning(
                    f"Order {order.order_id}: product {line.product_id} not found, line skipped"
                )
                continue
            items.append(self.price_line(line, product))

        customer = order.customer
        buyer = Party(
            name=customer.name,
            address=customer.address,
            phone=customer.phone,
            email=customer.email,
            gstin=customer.gstin,
            state_code=customer.state_code,
            state_name=customer.state_name,
        )

        tax_rate = order.tax_rate if order.tax_rate is not None else self.default_tax_rate

        return Draft(
            invoice_no=invoice_no or order.order_id,
            issue_date=order.created_at.date(),
            seller=store.seller,
            buyer=buyer,
            items=items,
            exchange_gold=order.exchange_gold,
            discount=order.discount,
            tax_rate=tax_rate,
            payment_split=order.payment_split,
            notes=order.notes,
        )

    def price_line(self, line: OrderLine, product: Product) -> ItemDraft:
        """Price one order line against its catalog product"""
        rate = self.rates.resolve(product.material_type, line.custom_rate)

        making_percent = line.making_percent if line.making_percent is not None else product.making_percent
        labour_rate = line.labour_rate if line.labour_rate is not None else product.labour_rate

        # A weighed-at-counter gross weight replaces the catalog weights entirely
        if line.gross_weight is not None:
            gross_weight, material_weight = line.gross_weight, None
        else:
            gross_weight, material_weight = product.total_weight, product.material_weight

        breakdown = calculate_price(PricingInput(
            gross_weight=gross_weight,
            material_type=product.material_type,
            rate_per_gram=rate,
            making_percent=making_percent,
            labour_rate=labour_rate,
            stones=product.stones,
            material_weight=material_weight,
            making_mode=self.making_mode,
        ))

        return ItemDraft.from_breakdown(
            variant_no=product.id[-12:],
            product_name=product.name,
            material_with_purity=material_display(product.material_type),
            quantity=line.quantity,
            breakdown=breakdown,
            making_percent=making_percent,
            labour_rate=labour_rate,
            barcode_id=line.barcode_id,
        )
