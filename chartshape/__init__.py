"""Series normalization and stacked layout for chart data."""
