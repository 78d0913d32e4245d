"""SMART goal tracker: task store, draft form, calendar/list projections."""

__version__ = "0.1.0"
