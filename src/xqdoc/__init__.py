"""xqdoc - XQuery documentation report generator."""

__version__ = "0.3.0"
