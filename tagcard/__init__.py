"""TagCard: public profile pages, QR codes, vCards and printable cards."""

__version__ = "0.1.0"
