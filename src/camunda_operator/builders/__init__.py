"""Builders that turn custom resources into service clients."""

from .connector import Connector

__all__ = ["Connector"]
