"""
Indicator value types.

Signals, patterns, support/resistance levels and price objectives produced
by the indicator suite. Records in append-only logs are frozen; a
support/resistance level stays mutable because merging recalculates it.
"""
