"""
Backend-neutral layout primitives.

Sections describe the document with these elements; each document flow
translates them to its own output (reportlab flowables or HTML markup).
"""
from dataclasses import dataclass
from typing import List, Tuple, Union


LEFT = "left"
CENTER = "center"
RIGHT = "right"


@dataclass(frozen=True)
class TextBlock:
    """A paragraph of text"""
    text: str
    size: float = 8
    bold: bool = False
    align: str = LEFT
    space_after: float = 0


@dataclass(frozen=True)
class Divider:
    """Horizontal rule"""
    thickness: float = 0.5


@dataclass(frozen=True)
class Spacer:
    """Vertical gap, in points"""
    height: float = 6


@dataclass(frozen=True)
class Cell:
    """
    Table cell.

    ``content`` is either plain text or a tuple of nested elements, which
    lets a cell hold the output of a whole section.
    """
    content: Union[str, Tuple['Element', ...]] = ""
    colspan: int = 1
    bold: bool = False
    align: str = LEFT
    shaded: bool = False
    padding: float = 3

    @property
    def is_nested(self) -> bool:
        return isinstance(self.content, tuple)


@dataclass(frozen=True)
class Table:
    """
    Grid of cells; ``widths`` are relative column weights.

    Rows may span columns; the cells of a row must cover every column.
    """
    rows: Tuple[Tuple[Cell, ...], ...]
    widths: Tuple[float, ...]
    font_size: float = 7
    header_rows: int = 0
    border: bool = True

    def __post_init__(self):
        columns = len(self.widths)
        for idx, row in enumerate(self.rows):
            covered = sum(cell.colspan for cell in row)
            if covered != columns:
                raise ValueError(
                    f"Row {idx} spans {covered} columns, table has {columns}"
                )


Element = Union[TextBlock, Divider, Spacer, Table]


class ElementSink:
    """Ordered collection sections render into"""

    def __init__(self):
        self._elements: List[Element] = []

    def append(self, element: Element):
        self._elements.append(element)

    @property
    def elements(self) -> Tuple[Element, ...]:
        return tuple(self._elements)

    def __len__(self):
        return len(self._elements)


def cells(*texts: str, **style) -> Tuple[Cell, ...]:
    """Row of plain-text cells sharing one style"""
    return tuple(Cell(text, **style) for text in texts)
