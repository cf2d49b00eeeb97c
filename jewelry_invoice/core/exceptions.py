"""
Exception hierarchy for invoice building and rendering.
"""
from typing import List, Tuple


class InvoiceError(Exception):
    """Base class for all invoice errors"""
    pass


class InvoiceInputError(InvoiceError):
    """Raised when a draft is missing mandatory data"""

    def __init__(self, message: str, violations: list = None):
        super().__init__(message)
        self.violations = violations or []


class ParserError(InvoiceError):
    """Raised when an order or catalog file cannot be parsed"""
    pass


class TemplateNotFoundError(InvoiceError):
    """Raised when a template or stylesheet is not in the store"""
    pass


class TemplateRenderError(InvoiceError):
    """Raised when a template cannot be compiled or filled"""
    pass


class SectionRenderError(InvoiceError):
    """Raised when a section cannot render mandatory data"""

    def __init__(self, section: str, message: str):
        super().__init__(f"{section}: {message}")
        self.section = section


class FlowStateError(InvoiceError):
    """Raised on an illegal document flow transition"""
    pass


class BackendError(InvoiceError):
    """
    Raised when rendering backends fail.

    ``failures`` holds (backend name, reason) pairs, one per attempt.
    """

    def __init__(self, message: str, failures: List[Tuple[str, str]] = None):
        self.failures = failures or []
        if self.failures:
            details = "; ".join(f"{name}: {reason}" for name, reason in self.failures)
            message = f"{message} ({details})"
        super().__init__(message)
