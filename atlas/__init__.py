"""Atlas: eligibility-safe spatial query answers for the map assistant."""

__version__ = "0.1.0"
