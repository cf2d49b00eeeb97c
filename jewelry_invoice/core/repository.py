"""
Product and metal-rate source consumed by the draft builder.

The repository is read once per render; caching and persistence are the
implementation's concern, not the calculator's.
"""
import json
import logging
from abc import ABC, abstractmethod
from decimal import Decimal
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from jewelry_invoice.core.exceptions import ParserError
from jewelry_invoice.core.models import Material, Product, StoreInfo

logger = logging.getLogger(__name__)


DEFAULT_GOLD_24K_RATE = Decimal('6080')
DEFAULT_SILVER_999_RATE = Decimal('75')
GOLD_KARATS = (24, 22, 20, 18, 14, 10)
SILVER_FINENESSES = (999, 925, 900)


class ProductRepository(ABC):
    """Read-only access to products, materials and metal rates"""

    @abstractmethod
    def get_products_by_ids(self, ids: Iterable[str]) -> List[Product]:
        """Return the products that exist among ``ids``; unknown ids are ignored."""

    @abstractmethod
    def get_materials(self) -> List[Material]:
        pass

    @abstractmethod
    def get_metal_rate_for_karat(self, karat: int) -> Optional[Decimal]:
        pass

    @abstractmethod
    def get_metal_rate_for_purity(self, purity: int) -> Optional[Decimal]:
        pass


def karat_rates(rate_24k: Decimal) -> Dict[int, Decimal]:
    """Derive gold rates per karat from the 24K rate (proportional to purity)"""
    return {karat: rate_24k * karat / 24 for karat in GOLD_KARATS}


def silver_rates(rate_999: Decimal) -> Dict[int, Decimal]:
    """Derive silver rates per fineness from the 999 rate"""
    return {fineness: rate_999 * fineness / 999 for fineness in SILVER_FINENESSES}


class InMemoryCatalog(ProductRepository):
    """
    Dictionary-backed repository.

    Usage:
        catalog = InMemoryCatalog.from_base_rates(Decimal('6080'), Decimal('75'))
        catalog.add_product(product)
    """

    def __init__(self, products: Iterable[Product] = (),
                 materials: Iterable[Material] = (),
                 gold_rates: Dict[int, Decimal] = None,
                 silver_rates: Dict[int, Decimal] = None,
                 store: Optional[StoreInfo] = None):
        self._products = {product.id: product for product in products}
        self._materials = list(materials)
        self._gold_rates = dict(gold_rates or {})
        self._silver_rates = dict(silver_rates or {})
        self.store = store

    @classmethod
    def from_base_rates(cls, gold_24k: Decimal = DEFAULT_GOLD_24K_RATE,
                        silver_999: Decimal = DEFAULT_SILVER_999_RATE,
                        **kwargs) -> 'InMemoryCatalog':
        return cls(
            gold_rates=karat_rates(Decimal(gold_24k)),
            silver_rates=silver_rates(Decimal(silver_999)),
            **kwargs,
        )

    def add_product(self, product: Product):
        self._products[product.id] = product

    def get_products_by_ids(self, ids: Iterable[str]) -> List[Product]:
        found = []
        for product_id in ids:
            product = self._products.get(product_id)
            if product is None:
                logger.debug(f"Product {product_id} not in catalog")
                continue
            found.append(product)
        return found

    def get_materials(self) -> List[Material]:
        return list(self._materials)

    def get_metal_rate_for_karat(self, karat: int) -> Optional[Decimal]:
        return self._gold_rates.get(karat)

    def get_metal_rate_for_purity(self, purity: int) -> Optional[Decimal]:
        return self._silver_rates.get(purity)


def load_catalog(file_path: Union[str, Path]) -> InMemoryCatalog:
    """
    Load a JSON catalog file.

    Expected layout::

        {
          "rates": {"gold_24k": 6080, "silver_999": 75,
                    "gold": {"22": 5600}, "silver": {"925": 70}},
          "materials": [{"id": "m1", "name": "Gold", "types": ["22K", "18K"]}],
          "products": [{"id": "p1", "name": "Ring", "material_type": "Gold 22K", ...}],
          "store": {"seller": {...}, "bank_info": {...}}
        }

    Explicit per-karat/per-fineness rates override the derived ones.

    Raises:
        ParserError: If the file cannot be read or does not match the layout
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"Catalog file not found: {file_path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        rates = data.get('rates', {})
        gold = karat_rates(Decimal(str(rates.get('gold_24k', DEFAULT_GOLD_24K_RATE))))
        silver = silver_rates(Decimal(str(rates.get('silver_999', DEFAULT_SILVER_999_RATE))))
        gold.update({int(k): Decimal(str(v)) for k, v in rates.get('gold', {}).items()})
        silver.update({int(k): Decimal(str(v)) for k, v in rates.get('silver', {}).items()})

        store = data.get('store')

        return InMemoryCatalog(
            products=[Product(**p) for p in data.get('products', [])],
            materials=[Material(**m) for m in data.get('materials', [])],
            gold_rates=gold,
            silver_rates=silver,
            store=StoreInfo(**store) if store else None,
        )

    except Exception as e:
        raise ParserError(f"Failed to load catalog {file_path}: {str(e)}") from e
