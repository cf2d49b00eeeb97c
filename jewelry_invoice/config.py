"""
Configuration management for the invoice renderer.

Loads settings from environment variables (and a .env file) with
sensible defaults.
"""
import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from dotenv import load_dotenv

from jewelry_invoice.core.pricing import MakingChargeMode
from jewelry_invoice.rendering.backends import BACKENDS

load_dotenv()


def _parse_backends() -> List[str]:
    raw = os.getenv("INVOICE_BACKENDS", "xhtml2pdf,weasyprint")
    return [name.strip().lower() for name in raw.split(",") if name.strip()]


@dataclass
class RenderConfig:
    """Configuration settings for invoice rendering."""

    # Ordered backend chain; the first that produces a verified file wins
    backends: List[str] = field(default_factory=_parse_backends)

    # Pricing
    making_mode: str = field(
        default_factory=lambda: os.getenv("INVOICE_MAKING_MODE", MakingChargeMode.PERCENT.value)
    )
    tax_rate: str = field(default_factory=lambda: os.getenv("INVOICE_TAX_RATE", "3"))

    # Templates
    template_dir: Optional[str] = field(default_factory=lambda: os.getenv("INVOICE_TEMPLATE_DIR"))
    template_name: str = field(default_factory=lambda: os.getenv("INVOICE_TEMPLATE", "invoice.html"))
    stylesheet_name: str = field(
        default_factory=lambda: os.getenv("INVOICE_STYLESHEET", "invoice.css")
    )

    # Batch processing
    max_workers: int = field(default_factory=lambda: int(os.getenv("INVOICE_MAX_WORKERS", "4")))

    # Logging
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_file: Optional[str] = field(default_factory=lambda: os.getenv("INVOICE_LOG_FILE"))

    @classmethod
    def from_env(cls) -> "RenderConfig":
        """Create config from environment variables."""
        return cls()

    @property
    def making_charge_mode(self) -> MakingChargeMode:
        return MakingChargeMode(self.making_mode.strip().lower())

    @property
    def default_tax_rate(self) -> Decimal:
        return Decimal(self.tax_rate)

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = []
        if not self.backends:
            errors.append("INVOICE_BACKENDS must name at least one backend")
        for name in self.backends:
            if name not in BACKENDS:
                errors.append(f"Unknown backend '{name}' (expected one of: {', '.join(BACKENDS)})")

        modes = [mode.value for mode in MakingChargeMode]
        if self.making_mode.strip().lower() not in modes:
            errors.append(f"Unknown making mode '{self.making_mode}' (expected one of: {', '.join(modes)})")

        try:
            if Decimal(self.tax_rate) < 0:
                errors.append("INVOICE_TAX_RATE cannot be negative")
        except InvalidOperation:
            errors.append(f"INVOICE_TAX_RATE is not a number: {self.tax_rate}")

        if self.max_workers < 1:
            errors.append("INVOICE_MAX_WORKERS must be at least 1")
        if self.template_dir and not os.path.isdir(self.template_dir):
            errors.append(f"INVOICE_TEMPLATE_DIR does not exist: {self.template_dir}")
        return errors
