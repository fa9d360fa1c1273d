"""
Ticketeer - Services Package
============================
"""

from .tickets import TicketService, PanelRegistry

__all__ = ["TicketService", "PanelRegistry"]
