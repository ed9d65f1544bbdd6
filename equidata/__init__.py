"""Z-axis acceleration recorder with a rolling live chart and CSV export."""

__version__ = "0.1.0"
