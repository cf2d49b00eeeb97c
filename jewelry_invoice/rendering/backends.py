"""
Rendering backends and the ordered-fallback selector.

Every backend takes the same RenderJob, so HTML engines all receive the
identical, fully substituted document. The selector owns the output file:
bytes go to a temporary file next to the destination and are moved into
place only after they were verified non-empty.
"""
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import List, Optional, Sequence, Union

from jewelry_invoice.core.exceptions import BackendError
from jewelry_invoice.core.models import Invoice
from jewelry_invoice.rendering.flow import PdfDocumentFlow
from jewelry_invoice.rendering.renderer import DocumentRenderer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderJob:
    """One invoice to render, with its HTML already composed"""
    invoice: Invoice
    html: str
    base_url: Optional[str] = None


class RenderBackend(ABC):
    """A document engine producing PDF bytes for a job"""

    name = "backend"

    @abstractmethod
    def render(self, job: RenderJob) -> bytes:
        pass


class Xhtml2PdfBackend(RenderBackend):
    """Templated HTML to PDF through xhtml2pdf (pisa)"""

    name = "xhtml2pdf"

    def render(self, job: RenderJob) -> bytes:
        from xhtml2pdf import pisa

        buffer = BytesIO()
        status = pisa.CreatePDF(job.html, dest=buffer, encoding='utf-8')
        if status.err:
            raise BackendError(f"xhtml2pdf reported {status.err} error(s)")
        return buffer.getvalue()


class WeasyPrintBackend(RenderBackend):
    """Alternate HTML to PDF engine"""

    name = "weasyprint"

    def render(self, job: RenderJob) -> bytes:
        from weasyprint import HTML

        return HTML(string=job.html, base_url=job.base_url).write_pdf()


class ReportLabBackend(RenderBackend):
    """Direct page drawing through the document renderer"""

    name = "reportlab"

    def __init__(self, renderer: DocumentRenderer = None):
        self.renderer = renderer or DocumentRenderer()

    def render(self, job: RenderJob) -> bytes:
        flow = PdfDocumentFlow(title=f"Tax Invoice {job.invoice.invoice_no}")
        return self.renderer.render(job.invoice, flow)


BACKENDS = {
    backend.name: backend
    for backend in (Xhtml2PdfBackend, WeasyPrintBackend, ReportLabBackend)
}


def create_backend(name: str, renderer: DocumentRenderer = None) -> RenderBackend:
    """Instantiate a backend by name; ``renderer`` is used by the reportlab backend"""
    try:
        backend_class = BACKENDS[name.strip().lower()]
    except KeyError:
        raise ValueError(
            f"Unknown backend '{name}', expected one of: {', '.join(BACKENDS)}"
        ) from None

    if backend_class is ReportLabBackend:
        return ReportLabBackend(renderer)
    return backend_class()


def _verify(path: Union[str, Path]):
    if not os.path.exists(path):
        raise BackendError(f"{path} does not exist after writing")
    if os.path.getsize(path) == 0:
        raise BackendError(f"{path} is empty after writing")


def write_atomic(path: Union[str, Path], data: bytes):
    """
    Write bytes through a temporary file in the destination directory.

    The destination only ever holds a complete, non-empty file.

    Raises:
        BackendError: If the data is empty or the final file fails verification
    """
    path = Path(path)
    if not data:
        raise BackendError("engine produced empty output")

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix='.tmp', dir=str(path.parent))
    try:
        with os.fdopen(fd, 'wb') as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        _verify(tmp_name)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.remove(tmp_name)
        raise

    try:
        _verify(path)
    except BackendError:
        if path.exists():
            path.unlink()
        raise


class BackendSelector:
    """
    Tries backends in order until one produces a verified file.

    Usage:
        selector = BackendSelector.from_names(["xhtml2pdf", "reportlab"])
        used = selector.write(job, "out/INV-1.pdf")
    """

    def __init__(self, backends: Sequence[RenderBackend]):
        if not backends:
            raise ValueError("At least one backend is required")
        self.backends = list(backends)

    @classmethod
    def from_names(cls, names: Sequence[str],
                   renderer: DocumentRenderer = None) -> 'BackendSelector':
        return cls([create_backend(name, renderer) for name in names])

    @property
    def names(self) -> List[str]:
        return [backend.name for backend in self.backends]

    def write(self, job: RenderJob, output_path: Union[str, Path]) -> str:
        """
        Render the job to ``output_path`` with the first backend that succeeds.

        Returns:
            Name of the backend that produced the file

        Raises:
            BackendError: Naming every backend's failure, when all fail
        """
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        invoice_no = job.invoice.invoice_no

        failures = []
        for backend in self.backends:
            try:
                data = backend.render(job)
                write_atomic(path, data)
            except Exception as e:
                reason = str(e) or type(e).__name__
                logger.warning(f"Backend {backend.name} failed for {invoice_no}: {reason}")
                failures.append((backend.name, reason))
                continue

            logger.info(f"Invoice {invoice_no} written to {path} by {backend.name}")
            return backend.name

        raise BackendError(f"All backends failed for invoice {invoice_no}", failures)


class HtmlDocumentWriter:
    """Writes the HTML document and its sibling stylesheet"""

    def write(self, html: str, css: str, output_path: Union[str, Path]) -> Path:
        """
        Args:
            html: Document linking ``<stem>.css``
            css: Stylesheet text
            output_path: Destination of the HTML file

        Returns:
            Path of the stylesheet written next to it
        """
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        css_path = path.with_suffix('.css')

        write_atomic(css_path, css.encode('utf-8'))
        try:
            write_atomic(path, html.encode('utf-8'))
        except BaseException:
            # Remove the orphaned stylesheet
            if css_path.exists():
                css_path.unlink()
            raise

        logger.info(f"HTML invoice written to {path} with {css_path.name}")
        return css_path
