"""Cycle time reporting for Trello board cards."""

__version__ = "0.1.0"
