"""Import/export reconciliation for household expense spreadsheets."""

__version__ = "0.1.0"
