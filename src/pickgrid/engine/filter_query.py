"""
Grid filter query parsing.

Syntax (groups separated by ';'):
    <TERM>                          global term, checked against every filterable column
    <COLUMN_NAME>:<TERM>            term scoped to the columns displaying COLUMN_NAME
    <COLUMN_NAME>:<TERM>;<TERM>;... any mix of the above

Only the first free-text group becomes the global term. Groups that cannot be
used (empty, or a colon with nothing on one side) are ignored.
"""

from __future__ import annotations

from dataclasses import dataclass, field

GROUP_SEPARATOR = ";"
COLUMN_SEPARATOR = ":"


@dataclass(frozen=True)
class ColumnConstraint:
    """A filter term scoped to one column name (matched case-insensitively)."""

    column: str
    term: str


@dataclass
class FilterState:
    """Parsed filter: one optional global term plus ordered column constraints."""

    global_term: str = ""
    column_constraints: list[ColumnConstraint] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.global_term and not self.column_constraints


def parse_filter(raw: str | None) -> FilterState:
    """Parse a raw filter string into a FilterState. Never raises."""
    state = FilterState()
    for group in (raw or "").split(GROUP_SEPARATOR):
        if COLUMN_SEPARATOR in group:
            column, _, term = group.partition(COLUMN_SEPARATOR)
            column = column.strip()
            term = term.strip()
            if column and term:
                state.column_constraints.append(ColumnConstraint(column=column, term=term))
            continue
        term = group.strip()
        if term and not state.global_term:
            state.global_term = term
    return state


def describe_filter(state: FilterState) -> str:
    """One line per part of a parsed filter, for tooltips and logs."""
    if state.is_empty():
        return "No filter"
    lines = []
    if state.global_term:
        lines.append(f"any column: {state.global_term}")
    lines.extend(f"{c.column}: {c.term}" for c in state.column_constraints)
    return "\n".join(lines)
