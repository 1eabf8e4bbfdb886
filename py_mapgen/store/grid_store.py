"""Seed-keyed on-disk grid cache."""

import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Dict, Optional, Union

import structlog

from ..config import settings
from ..core.errors import ConfigurationError, GridNotFoundError
from ..core.grid import Grid
from ..utils.random import Seed

logger = structlog.get_logger()


class GridStore:
    """
    Keeps one ``<seed>.json`` file per seed.

    ``get_or_generate`` holds a per-seed lock around the check-and-generate
    sequence, so concurrent requests for one seed run the factory once
    while different seeds proceed independently.
    """

    def __init__(self, directory: Optional[Union[str, Path]] = None):
        """
        Open a store rooted at ``directory``.

        Args:
            directory: Cache directory; defaults to ``settings.cache_dir``
        """
        self.directory = Path(directory if directory is not None else settings.cache_dir)
        self.directory.mkdir(parents=True, exist_ok=True)
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    @staticmethod
    def _key(seed: Seed) -> str:
        key = str(seed)
        if not key or any(sep in key for sep in ("/", "\\", os.sep)) or key in (".", ".."):
            raise ConfigurationError(f"seed {seed!r} cannot be used as a file name")
        return key

    def path_for(self, seed: Seed) -> Path:
        return self.directory / f"{self._key(seed)}.json"

    def exists(self, seed: Seed) -> bool:
        return self.path_for(seed).is_file()

    def load(self, seed: Seed) -> Grid:
        path = self.path_for(seed)
        try:
            data = path.read_bytes()
        except FileNotFoundError:
            raise GridNotFoundError(f"no cached grid for seed {seed!r}") from None

        grid = Grid.from_json(data)
        logger.debug("Grid loaded", seed=str(seed), path=str(path))
        return grid

    def save(self, seed: Seed, grid: Grid) -> Path:
        """Write the grid atomically; readers never see a partial file."""
        path = self.path_for(seed)
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=".tmp-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(grid.to_json())
            os.replace(tmp_name, path)
        except Exception:
            os.unlink(tmp_name)
            raise

        logger.info("Grid saved", seed=str(seed), path=str(path))
        return path

    @contextmanager
    def seed_lock(self, seed: Seed):
        """Hold the lock for one seed."""
        key = self._key(seed)
        with self._locks_guard:
            lock = self._locks.setdefault(key, threading.Lock())
        with lock:
            yield

    def get_or_generate(
        self, seed: Seed, factory: Callable[[], Grid], force: bool = False
    ) -> Grid:
        """
        Return the cached grid for ``seed``, generating and saving it if needed.

        Args:
            seed: Map seed
            factory: Called with no arguments to build the grid on a miss
            force: Regenerate even when a cached grid exists
        """
        with self.seed_lock(seed):
            if not force and self.exists(seed):
                return self.load(seed)

            logger.info("Generating grid for cache", seed=str(seed), force=force)
            grid = factory()
            self.save(seed, grid)
            return grid
