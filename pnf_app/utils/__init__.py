"""
Utility functions module.

Time Semantics:
- Observation timestamps supplied by the feed are ALWAYS authoritative
- Month markers are derived from the observation's own calendar month
- Wall-clock time is only used as a fallback where no timestamp exists
"""
