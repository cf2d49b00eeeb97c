"""
Page-flow contexts: own the page lifecycle and translate layout elements
into a concrete output.

A flow goes UNOPENED -> OPEN -> CLOSED. Elements may only be appended
while OPEN, and close() produces the document bytes exactly once.
"""
import logging
from abc import ABC, abstractmethod
from enum import Enum
from io import BytesIO
from typing import List, Sequence

from markupsafe import escape
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_LEFT, TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.platypus import Paragraph, SimpleDocTemplate, TableStyle
from reportlab.platypus import Spacer as PdfSpacer
from reportlab.platypus import Table as PdfTable
from reportlab.platypus.flowables import HRFlowable

from jewelry_invoice.core.exceptions import FlowStateError
from jewelry_invoice.rendering.layout import (
    CENTER, RIGHT, Cell, Divider, Element, Spacer, Table, TextBlock,
)

logger = logging.getLogger(__name__)


PAGE_SIZE = A4
MARGIN = 14  # points, all sides
SHADE_COLOR = colors.HexColor('#E6E6E6')


def escape_text(text: str) -> str:
    """Escape text for both flows; newlines become <br/> line breaks"""
    return str(escape(text)).replace('\n', '<br/>')


class FlowState(str, Enum):
    UNOPENED = "unopened"
    OPEN = "open"
    CLOSED = "closed"


class DocumentFlow(ABC):
    """Base page-flow context"""

    def __init__(self):
        self.state = FlowState.UNOPENED
        self._elements: List[Element] = []

    @property
    def content_width(self) -> float:
        return PAGE_SIZE[0] - 2 * MARGIN

    def open(self) -> 'DocumentFlow':
        if self.state != FlowState.UNOPENED:
            raise FlowStateError(f"Cannot open a flow that is {self.state.value}")
        self.state = FlowState.OPEN
        return self

    def append(self, element: Element):
        if self.state != FlowState.OPEN:
            raise FlowStateError(f"Cannot append to a flow that is {self.state.value}")
        self._elements.append(element)

    def close(self) -> bytes:
        """Flush the document and return its bytes"""
        if self.state != FlowState.OPEN:
            raise FlowStateError(f"Cannot close a flow that is {self.state.value}")
        self.state = FlowState.CLOSED
        return self._render(tuple(self._elements))

    @abstractmethod
    def _render(self, elements: Sequence[Element]) -> bytes:
        pass


class PdfDocumentFlow(DocumentFlow):
    """Draws the document directly with reportlab platypus"""

    _ALIGN = {CENTER: TA_CENTER, RIGHT: TA_RIGHT}

    def __init__(self, title: str = "Tax Invoice"):
        super().__init__()
        self.title = title

    def _style(self, size: float, bold: bool, align: str, space_after: float = 0) -> ParagraphStyle:
        return ParagraphStyle(
            name=f"s{size}{'b' if bold else ''}{align}",
            fontName='Helvetica-Bold' if bold else 'Helvetica',
            fontSize=size,
            leading=size * 1.25,
            alignment=self._ALIGN.get(align, TA_LEFT),
            spaceAfter=space_after,
        )

    def _paragraph(self, text: str, size: float, bold: bool, align: str,
                   space_after: float = 0) -> Paragraph:
        markup = escape_text(text)
        return Paragraph(markup, self._style(size, bold, align, space_after))

    def _flowables(self, element: Element, width: float) -> list:
        if isinstance(element, TextBlock):
            return [self._paragraph(element.text, element.size, element.bold,
                                    element.align, element.space_after)]
        if isinstance(element, Divider):
            return [HRFlowable(width='100%', thickness=element.thickness,
                               color=colors.black, spaceBefore=2, spaceAfter=2)]
        if isinstance(element, Spacer):
            return [PdfSpacer(1, element.height)]
        if isinstance(element, Table):
            return [self._table(element, width)]
        raise TypeError(f"Unsupported layout element: {type(element).__name__}")

    def _cell_content(self, cell: Cell, width: float, font_size: float):
        if cell.is_nested:
            inner_width = width - 2 * cell.padding
            content = []
            for element in cell.content:
                content.extend(self._flowables(element, inner_width))
            return content
        return self._paragraph(cell.content, font_size, cell.bold, cell.align)

    def _table(self, table: Table, width: float) -> PdfTable:
        total = float(sum(table.widths))
        col_widths = [width * w / total for w in table.widths]

        data = []
        commands = [('VALIGN', (0, 0), (-1, -1), 'TOP')]
        if table.border:
            commands.append(('GRID', (0, 0), (-1, -1), 0.5, colors.black))

        for row_idx, row in enumerate(table.rows):
            row_data = []
            col = 0
            for cell in row:
                span_width = sum(col_widths[col:col + cell.colspan])
                row_data.append(self._cell_content(cell, span_width, table.font_size))
                row_data.extend([''] * (cell.colspan - 1))

                last = col + cell.colspan - 1
                if cell.colspan > 1:
                    commands.append(('SPAN', (col, row_idx), (last, row_idx)))
                if cell.shaded:
                    commands.append(('BACKGROUND', (col, row_idx), (last, row_idx), SHADE_COLOR))
                for side in ('LEFTPADDING', 'RIGHTPADDING', 'TOPPADDING', 'BOTTOMPADDING'):
                    commands.append((side, (col, row_idx), (last, row_idx), cell.padding))
                col += cell.colspan
            data.append(row_data)

        pdf_table = PdfTable(data, colWidths=col_widths, repeatRows=table.header_rows)
        pdf_table.setStyle(TableStyle(commands))
        return pdf_table

    def _render(self, elements: Sequence[Element]) -> bytes:
        story = []
        for element in elements:
            story.extend(self._flowables(element, self.content_width))

        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=PAGE_SIZE,
            leftMargin=MARGIN,
            rightMargin=MARGIN,
            topMargin=MARGIN,
            bottomMargin=MARGIN,
            title=self.title,
        )
        doc.build(story)
        data = buffer.getvalue()
        logger.debug(f"PDF flow produced {len(data)} bytes from {len(elements)} elements")
        return data


class HtmlDocumentFlow(DocumentFlow):
    """Produces the HTML body markup consumed by the HTML engines"""

    def _markup(self, element: Element) -> str:
        if isinstance(element, TextBlock):
            classes = "bold" if element.bold else ""
            style = f"font-size:{element.size}pt;text-align:{element.align}"
            if element.space_after:
                style += f";margin-bottom:{element.space_after}pt"
            return f'<p class="{classes}" style="{style}">{escape_text(element.text)}</p>'
        if isinstance(element, Divider):
            return f'<hr style="border:0;border-top:{element.thickness}pt solid #000"/>'
        if isinstance(element, Spacer):
            return f'<div style="height:{element.height}pt"></div>'
        if isinstance(element, Table):
            return self._table(element)
        raise TypeError(f"Unsupported layout element: {type(element).__name__}")

    def _table(self, table: Table) -> str:
        total = float(sum(table.widths))
        percents = [w * 100 / total for w in table.widths]
        table_class = "grid" if table.border else "plain"

        rows = []
        for row_idx, row in enumerate(table.rows):
            tag = 'th' if row_idx < table.header_rows else 'td'
            col = 0
            parts = []
            for cell in row:
                classes = [c for c, on in (('bold', cell.bold), ('shaded', cell.shaded)) if on]
                attrs = f' class="{" ".join(classes)}"' if classes else ''
                if cell.colspan > 1:
                    attrs += f' colspan="{cell.colspan}"'
                width = sum(percents[col:col + cell.colspan])
                attrs += (f' width="{width:.1f}%" style="text-align:{cell.align};'
                          f'padding:{cell.padding}pt"')

                if cell.is_nested:
                    content = "".join(self._markup(e) for e in cell.content)
                else:
                    content = escape_text(cell.content)
                parts.append(f'<{tag}{attrs}>{content}</{tag}>')
                col += cell.colspan
            rows.append(f'<tr>{"".join(parts)}</tr>')

        return (f'<table class="{table_class}" style="font-size:{table.font_size}pt">'
                f'{"".join(rows)}</table>')

    def _render(self, elements: Sequence[Element]) -> bytes:
        body = "\n".join(self._markup(element) for element in elements)
        return body.encode('utf-8')
