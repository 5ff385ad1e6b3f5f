"""
PnF App - Point-and-Figure Charting Engine

Builds point-and-figure charts from a sequential feed of price observations,
tracks trend lines as columns form, and computes indicators (moving averages,
bands, signals, chart patterns, support/resistance, price objectives) over
the resulting column sequence.
"""

__version__ = "0.1.0"
__author__ = "PnF Team"
