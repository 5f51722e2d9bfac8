"""
Boundary matrix and the standard column reduction over GF(2).

Columns are kept sparse as ascending lists of row positions; adding two
columns mod 2 is the symmetric difference of two sorted lists.
"""

import logging
from dataclasses import dataclass, field

from wphviz.filtration import Filtration

logger = logging.getLogger(__name__)


def boundary_columns(filtration: Filtration) -> list[list[int]]:
    """Ascending positions of the codimension-1 faces of every simplex."""
    pos = filtration.position
    columns = []
    for s in filtration.simplices:
        v = s.vertices
        if s.dim == 0:
            columns.append([])
        elif s.dim == 1:
            columns.append(sorted((pos[(v[0],)], pos[(v[1],)])))
        else:
            i, j, k = v
            columns.append(sorted((pos[(i, j)], pos[(i, k)], pos[(j, k)])))
    return columns


def xor_sorted(a: list[int], b: list[int]) -> list[int]:
    """Symmetric difference of two ascending lists, by merge."""
    out = []
    i = j = 0
    na, nb = len(a), len(b)
    while i < na and j < nb:
        x, y = a[i], b[j]
        if x == y:
            i += 1
            j += 1
        elif x < y:
            out.append(x)
            i += 1
        else:
            out.append(y)
            j += 1
    out.extend(a[i:])
    out.extend(b[j:])
    return out


@dataclass
class Reduction:
    """Reduced columns plus the pivot map low -> owning column."""
    reduced: list[list[int]]
    low_to_col: dict[int, int] = field(default_factory=dict)
    additions: int = 0

    def low(self, j: int) -> int:
        """Low of column j, or -1 if it reduced to zero."""
        col = self.reduced[j]
        return col[-1] if col else -1

    def pairs(self) -> list[tuple[int, int]]:
        """(low, column) position pairs in column order."""
        return sorted(((low, j) for low, j in self.low_to_col.items()), key=lambda x: x[1])

    def unpaired(self) -> list[int]:
        """Zero columns that no later column claims as its low."""
        return [
            j for j, col in enumerate(self.reduced)
            if not col and j not in self.low_to_col
        ]


def reduce_boundary(columns: list[list[int]]) -> Reduction:
    """
    Left-to-right column reduction.

    While the current column's low is owned by an earlier column, add that
    column to it. A column that survives non-empty claims its low.
    """
    m = len(columns)
    reduced: list[list[int]] = [[] for _ in range(m)]
    low_to_col: dict[int, int] = {}
    additions = 0

    for j in range(m):
        col = columns[j]
        if not col:
            continue
        col = list(col)
        while col:
            owner = low_to_col.get(col[-1])
            if owner is None:
                break
            col = xor_sorted(col, reduced[owner])
            additions += 1
        if col:
            low_to_col[col[-1]] = j
            reduced[j] = col

    logger.debug("reduce_boundary: columns=%d pivots=%d additions=%d", m, len(low_to_col), additions)
    return Reduction(reduced=reduced, low_to_col=low_to_col, additions=additions)
