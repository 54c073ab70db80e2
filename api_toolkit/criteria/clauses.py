"""
Ordered clause lists rendered as Django ``Q`` objects.

Query builders in the style of ``where(...)->orWhere(...)`` attach a boolean
connector to every clause and let SQL precedence decide grouping: ``AND``
binds tighter than ``OR``. ``ClauseList`` keeps that model, so
``a AND b OR c AND d`` renders as ``(a & b) | (c & d)``. The connector of the
first clause is ignored, matching how such builders render a leading
``or where``.
"""

from functools import reduce
from operator import and_, or_
from typing import Optional

from django.db.models import Q

from .operators import AND, OR


class ClauseList:
    """Accumulates ``(connector, Q)`` pairs."""

    def __init__(self):
        self.clauses: list[tuple[str, Q]] = []

    def add(self, connector: str, q: Optional[Q]) -> None:
        if q is None:
            return
        if isinstance(q, Q) and not q:
            return
        self.clauses.append((OR if connector == OR else AND, q))

    def __len__(self) -> int:
        return len(self.clauses)

    def __bool__(self) -> bool:
        return bool(self.clauses)

    def to_q(self) -> Q:
        if not self.clauses:
            return Q()

        runs: list[list[Q]] = []
        for index, (connector, q) in enumerate(self.clauses):
            if index == 0 or connector == OR:
                runs.append([q])
            else:
                runs[-1].append(q)

        return reduce(or_, (reduce(and_, run) for run in runs))
