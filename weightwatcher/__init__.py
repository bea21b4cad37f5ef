"""weightwatcher: keeps track of your weight.

Measurements live in a small CSV data file. Reports smooth the raw series with
a trailing moving average so that day-to-day noise (water, meals, scale
placement) does not hide the actual trend.
"""

__version__ = "0.1.0"

__all__ = [
    "config",
    "core",
    "data",
    "errors",
    "utils",
]
