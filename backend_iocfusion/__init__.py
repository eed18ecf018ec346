"""
IOC fusion backend: fuses threat-intelligence provider verdicts for an
indicator of compromise into one score, verdict, and confidence grade, and
records verdict history.
"""

__version__ = "0.1.0"
