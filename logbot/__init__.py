"""
logbot — Discord bot for daily log entries and consecutive-day streaks.
"""

__version__ = "1.0.0"
