# src/reposcope/core/hydrator.py
import asyncio
import logging
from typing import Optional

from pydantic import ValidationError

from .types import Repository
from .interfaces import CacheBackend
from .aggregation import AggregationEngine
from .merge import sort_by_name, unique_by_path
from .state import StateStore


logger = logging.getLogger(__name__)


class CacheHydrator:
    """Seeds the state from the cache once at startup"""

    def __init__(
        self,
        state: StateStore,
        cache: Optional[CacheBackend],
        aggregator: Optional[AggregationEngine] = None,
    ):
        self.state = state
        self.cache = cache
        self.aggregator = aggregator or AggregationEngine()
        self.hydrated = False

    async def hydrate(self) -> int:
        """
        Load cached repositories into the state.

        Bypasses merging: a non-empty cache replaces the collection outright.
        Load failures and empty caches leave the state untouched.

        Returns:
            Number of repositories loaded (0 when nothing was hydrated)
        """
        if self.cache is None:
            logger.info("No cache backend configured, starting empty")
            return 0

        logger.info("Attempting to load cached repositories...")
        try:
            cached = await self.cache.load_cache()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning(f"Failed to load cached repositories: {e}")
            return 0

        if not cached:
            logger.info("No cached repositories found")
            return 0

        try:
            loaded = [
                r if isinstance(r, Repository) else Repository.model_validate(r)
                for r in cached
            ]
        except ValidationError as e:
            logger.warning(f"Ignoring malformed cache contents: {e}")
            return 0

        repositories = sort_by_name(unique_by_path(loaded))
        self.state.commit(repositories, self.aggregator.recompute(repositories))
        self.state.set_status("Loaded from cache")
        self.hydrated = True

        logger.info(f"Loaded {len(repositories)} repositories from cache")
        return len(repositories)
