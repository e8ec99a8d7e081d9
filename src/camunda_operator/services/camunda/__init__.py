"""Camunda Console customer API."""

from .base import ConsoleAPI
from .client import ConsoleClient

__all__ = ["ConsoleAPI", "ConsoleClient"]
