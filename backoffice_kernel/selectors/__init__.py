"""Selectors for the back-office kernel (read side)."""

from backoffice_kernel.selectors.base import BaseSelector

__all__ = ["BaseSelector"]
