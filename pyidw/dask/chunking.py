"""
Chunking strategy for IDW distance computations.

Every IDW evaluation builds a dense (queries x samples) distance matrix. This
module sizes query chunks so that one matrix stays within a fixed element
budget, whatever the grid resolution.
"""
import logging
from typing import Iterator, Optional

from .. import config

logger = logging.getLogger(__name__)


class ChunkingStrategy:
    """
    A utility class for determining query chunk sizes for distance matrices.

    Parameters
    ----------
    max_chunk_size : int, optional
        Upper bound on query points per chunk (default: ``config.CHUNK_SIZE``)
    max_elements : int, optional
        Upper bound on elements of one distance matrix
        (default: ``config.MAX_DISTANCE_ELEMENTS``)
    """

    def __init__(self, max_chunk_size: Optional[int] = None, max_elements: Optional[int] = None):
        self.max_chunk_size = max_chunk_size if max_chunk_size is not None else config.CHUNK_SIZE
        self.max_elements = max_elements if max_elements is not None else config.MAX_DISTANCE_ELEMENTS
        self.min_chunk_size = 1

        if self.max_chunk_size < 1:
            raise ValueError(f"max_chunk_size must be positive, got {self.max_chunk_size}")
        if self.max_elements < 1:
            raise ValueError(f"max_elements must be positive, got {self.max_elements}")

    def determine_chunk_size(self, n_queries: int, n_samples: int) -> int:
        """
        Determine how many query points to process per distance matrix.

        Parameters
        ----------
        n_queries : int
            Number of query points
        n_samples : int
            Number of sample points

        Returns
        -------
        int
            Query points per chunk, at least 1 and at most ``n_queries``
        """
        budget = self.max_elements // max(n_samples, 1)
        chunk_size = max(self.min_chunk_size, min(self.max_chunk_size, budget))
        chunk_size = min(chunk_size, max(n_queries, 1))
        logger.debug("Chunk size %d for %d queries x %d samples", chunk_size, n_queries, n_samples)
        return chunk_size

    @staticmethod
    def iter_slices(n_items: int, chunk_size: int) -> Iterator[slice]:
        """Yield consecutive slices of at most ``chunk_size`` covering ``range(n_items)``."""
        for start in range(0, n_items, chunk_size):
            yield slice(start, min(start + chunk_size, n_items))
