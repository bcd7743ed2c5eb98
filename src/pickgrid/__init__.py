"""pickgrid: multi-select and data grid widgets on a shared filter/rank/layout engine."""

__version__ = "0.1.0"
