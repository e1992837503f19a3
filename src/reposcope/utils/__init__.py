"""Utility helpers for reposcope"""

import logging
from typing import TypeVar, Optional

T = TypeVar('T')


class AsyncContextManagerMixin:
    """Mixin class for async context manager support"""
    
    async def __aenter__(self: T) -> T:
        if hasattr(self, 'initialize'):
            await self.initialize()
        return self
    
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if hasattr(self, 'close'):
            await self.close()


def setup_logging(level: str = "INFO", fmt: Optional[str] = None) -> None:
    """Configure root logging for applications embedding reposcope."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=fmt or "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
