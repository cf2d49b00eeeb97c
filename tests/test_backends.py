"""
Unit tests for rendering backends, atomic writes and HTML composition.
"""
import pytest

from jewelry_invoice.core.exceptions import BackendError, TemplateNotFoundError, TemplateRenderError
from jewelry_invoice.rendering import backends
from jewelry_invoice.rendering.backends import (
    BackendSelector, HtmlDocumentWriter, RenderBackend, RenderJob, ReportLabBackend,
    create_backend, write_atomic,
)
from jewelry_invoice.rendering.renderer import DocumentRenderer
from jewelry_invoice.rendering.templates import (
    DirectoryTemplateStore, HtmlComposer, PackageTemplateStore,
)


class FakeBackend(RenderBackend):
    """Backend returning canned bytes or raising, and recording what it saw"""

    def __init__(self, name, data=b"%PDF-1.4 fake", error=None):
        self.name = name
        self.data = data
        self.error = error
        self.seen = []

    def render(self, job):
        self.seen.append(job.html)
        if self.error:
            raise self.error
        return self.data


@pytest.fixture
def job(invoice):
    """Job with a small fixed HTML document"""
    return RenderJob(invoice=invoice, html="<html><body>INV</body></html>")


class TestBackendSelector:
    """Test suite for ordered backend fallback"""

    def test_first_backend_wins(self, job, tmp_path):
        first, second = FakeBackend("first"), FakeBackend("second")
        output = tmp_path / "out.pdf"

        used = BackendSelector([first, second]).write(job, output)

        assert used == "first"
        assert output.read_bytes() == b"%PDF-1.4 fake"
        assert second.seen == []

    def test_fallback_gets_identical_html(self, job, tmp_path):
        """Test that the next backend receives the same document after a failure"""
        first = FakeBackend("first", error=RuntimeError("engine crashed"))
        second = FakeBackend("second", data=b"%PDF second")
        output = tmp_path / "out.pdf"

        used = BackendSelector([first, second]).write(job, output)

        assert used == "second"
        assert first.seen == second.seen == [job.html]
        assert output.read_bytes() == b"%PDF second"

    def test_empty_output_is_failure(self, job, tmp_path):
        """Test that zero bytes count as a failed backend"""
        empty = FakeBackend("empty", data=b"")
        good = FakeBackend("good")

        assert BackendSelector([empty, good]).write(job, tmp_path / "out.pdf") == "good"

    def test_all_fail_names_every_backend(self, job, tmp_path):
        first = FakeBackend("first", error=RuntimeError("engine crashed"))
        second = FakeBackend("second", data=b"")

        with pytest.raises(BackendError) as exc_info:
            BackendSelector([first, second]).write(job, tmp_path / "out.pdf")

        message = str(exc_info.value)
        assert "first: engine crashed" in message
        assert "second: engine produced empty output" in message
        assert [name for name, _ in exc_info.value.failures] == ["first", "second"]

    def test_no_partial_or_temp_files(self, job, tmp_path):
        """Test that a failed render leaves nothing in the output directory"""
        failing = FakeBackend("failing", error=OSError("disk full"))

        with pytest.raises(BackendError):
            BackendSelector([failing]).write(job, tmp_path / "out.pdf")

        assert list(tmp_path.iterdir()) == []

    def test_existing_file_untouched_on_failure(self, job, tmp_path):
        output = tmp_path / "out.pdf"
        output.write_bytes(b"previous")

        with pytest.raises(BackendError):
            BackendSelector([FakeBackend("empty", data=b"")]).write(job, output)

        assert output.read_bytes() == b"previous"

    def test_creates_output_directory(self, job, tmp_path):
        output = tmp_path / "nested" / "dir" / "out.pdf"

        BackendSelector([FakeBackend("only")]).write(job, output)

        assert output.exists()

    def test_requires_a_backend(self):
        with pytest.raises(ValueError):
            BackendSelector([])

    def test_from_names(self):
        selector = BackendSelector.from_names(["ReportLab", " xhtml2pdf "])

        assert selector.names == ["reportlab", "xhtml2pdf"]

    def test_from_names_shares_renderer(self):
        renderer = DocumentRenderer()

        selector = BackendSelector.from_names(["reportlab"], renderer)

        assert selector.backends[0].renderer is renderer

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="Unknown backend"):
            create_backend("wkhtmltopdf")


class TestWriters:
    """Test suite for atomic file writing"""

    def test_write_atomic(self, tmp_path):
        output = tmp_path / "file.bin"

        write_atomic(output, b"payload")

        assert output.read_bytes() == b"payload"
        assert list(tmp_path.iterdir()) == [output]

    def test_write_atomic_rejects_empty(self, tmp_path):
        with pytest.raises(BackendError):
            write_atomic(tmp_path / "file.bin", b"")

        assert list(tmp_path.iterdir()) == []

    def test_html_pair(self, tmp_path):
        output = tmp_path / "INV-1.html"

        css_path = HtmlDocumentWriter().write("<html></html>", "body {}", output)

        assert css_path == tmp_path / "INV-1.css"
        assert output.read_text(encoding="utf-8") == "<html></html>"
        assert css_path.read_text(encoding="utf-8") == "body {}"

    def test_html_pair_failure_leaves_nothing(self, tmp_path, monkeypatch):
        """Test that the stylesheet is removed when the document cannot be written"""
        original = backends.write_atomic

        def failing_html(path, data):
            if path.suffix == ".html":
                raise BackendError(f"cannot write {path.name}")
            return original(path, data)

        monkeypatch.setattr(backends, "write_atomic", failing_html)

        with pytest.raises(BackendError):
            HtmlDocumentWriter().write("<html></html>", "body {}", tmp_path / "INV.html")

        assert list(tmp_path.iterdir()) == []

    def test_reportlab_backend(self, job):
        assert ReportLabBackend().render(job).startswith(b"%PDF")


class TestHtmlComposer:
    """Test suite for template token substitution"""

    def test_packaged_template_inlines_css(self, invoice):
        html = HtmlComposer().compose(invoice, "<p>BODY MARKUP</p>")

        assert "<p>BODY MARKUP</p>" in html
        assert "Tax Invoice INV-2026-10-000123" in html
        assert "@page" in html
        assert "<link" not in html

    def test_stylesheet_link(self, invoice):
        html = HtmlComposer().compose(invoice, "", stylesheet_href="INV-1.css")

        assert '<link rel="stylesheet" href="INV-1.css"/>' in html
        assert "@page" not in html

    def test_tokens_escaped(self, invoice, tmp_path):
        """Test that invoice values are escaped while the body is not"""
        (tmp_path / "custom.html").write_text(
            "<h1>{{BUYER_NAME}}</h1><p>{{NET_AMOUNT}} / {{AMOUNT_IN_WORDS}}</p>{{BODY}}",
            encoding="utf-8",
        )
        (tmp_path / "custom.css").write_text("", encoding="utf-8")
        buyer = invoice.buyer.model_copy(update={'name': 'Asha <Devi>'})
        composer = HtmlComposer(DirectoryTemplateStore(tmp_path), "custom.html", "custom.css")

        html = composer.compose(invoice.model_copy(update={'buyer': buyer}), "<b>ok</b>")

        assert "<h1>Asha &lt;Devi&gt;</h1>" in html
        assert "67,980.00 / Rupees Sixty Seven Thousand Nine Hundred Eighty Only" in html
        assert html.endswith("<b>ok</b>")

    def test_missing_template(self, invoice, tmp_path):
        composer = HtmlComposer(DirectoryTemplateStore(tmp_path))

        with pytest.raises(TemplateNotFoundError):
            composer.compose(invoice, "")

    def test_malformed_template(self, invoice, tmp_path):
        (tmp_path / "broken.html").write_text("<html>{{ BODY </html>", encoding="utf-8")
        (tmp_path / "broken.css").write_text("", encoding="utf-8")
        composer = HtmlComposer(DirectoryTemplateStore(tmp_path), "broken.html", "broken.css")

        with pytest.raises(TemplateRenderError, match="broken.html"):
            composer.compose(invoice, "")

    def test_package_store_has_defaults(self):
        store = PackageTemplateStore()

        assert "{{BODY}}" in store.get_template("invoice.html")
        assert store.get_stylesheet("invoice.css")
