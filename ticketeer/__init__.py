"""
Ticketeer
=========

Discord support-ticket bot: panel buttons open private ticket channels,
staff and owners manage membership, tickets close with an HTML transcript
and can be reopened or deleted.
"""

__version__ = "1.0.0"
