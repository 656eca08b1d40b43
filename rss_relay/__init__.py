"""
RSS Relay - Relay new RSS items to a Telegram channel.

Polls a single RSS feed on a fixed cadence, delivers each new item as a
Telegram message and records delivered items in SQLite so nothing is
relayed twice across restarts.
"""

__version__ = "1.0.0"
