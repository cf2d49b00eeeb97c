"""
Decorators for audit logging and performance monitoring.
"""
import functools
import logging
import time
from contextlib import contextmanager
from datetime import datetime
from typing import Callable

# Audit trail is kept on its own logger so it can be routed separately
audit_logger = logging.getLogger('jewelry_invoice.audit')
perf_logger = logging.getLogger('jewelry_invoice.performance')


def _invoice_id(args, kwargs) -> str:
    """Find an invoice number among call arguments, if any."""
    candidates = list(args) + list(kwargs.values())
    for candidate in candidates:
        invoice_no = getattr(candidate, 'invoice_no', None)
        if isinstance(invoice_no, str) and invoice_no:
            return invoice_no
    return "N/A"


def audit_log(func: Callable) -> Callable:
    """
    Decorator that logs calls touching an invoice, with outcome.

    Usage:
        @audit_log
        def calculate(self, draft, bank_info):
            ...
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        func_name = func.__qualname__
        invoice_id = _invoice_id(args, kwargs)

        audit_logger.info(
            f"CALL | {func_name} | Invoice: {invoice_id} | "
            f"Timestamp: {datetime.now().isoformat()}"
        )

        try:
            result = func(*args, **kwargs)

            status = "PROCESSED"
            if hasattr(result, 'success'):
                status = "SUCCESS" if result.success else "FAILED"
            audit_logger.info(
                f"SUCCESS | {func_name} | Invoice: {invoice_id} | "
                f"Status: {status}"
            )

            return result

        except Exception as e:
            audit_logger.error(
                f"FAILURE | {func_name} | Invoice: {invoice_id} | "
                f"Error: {str(e)}"
            )
            raise

    return wrapper


def measure_performance(func: Callable) -> Callable:
    """
    Decorator to measure and log function execution time.
    Results exposing ``elapsed_ms`` get the measured time attached.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.perf_counter()

        try:
            result = func(*args, **kwargs)

            elapsed_ms = (time.perf_counter() - start_time) * 1000

            if hasattr(result, 'elapsed_ms'):
                result.elapsed_ms = elapsed_ms

            perf_logger.debug(
                f"{func.__qualname__} completed in {elapsed_ms:.2f}ms"
            )

            return result

        except Exception as e:
            elapsed_ms = (time.perf_counter() - start_time) * 1000
            perf_logger.warning(
                f"{func.__qualname__} failed after {elapsed_ms:.2f}ms: {str(e)}"
            )
            raise

    return wrapper


@contextmanager
def performance_context(operation_name: str):
    """
    Context manager for measuring code block performance.

    Usage:
        with performance_context("items table"):
            section.render(sink)
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed = (time.perf_counter() - start) * 1000
        perf_logger.debug(f"{operation_name}: {elapsed:.2f}ms")
