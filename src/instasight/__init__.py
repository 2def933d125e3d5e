"""Instasight - Instagram insights and publishing over the Facebook Graph API."""

__version__ = "0.1.0"
