"""TicketBooth booking engine: GA and seated ticket sales without overselling."""

__version__ = "1.0.0"
