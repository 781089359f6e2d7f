"""
Parallel processing utilities for leave-one-out computations.

Leave-one-out validation and the jackknife both repeat an interpolation once
per sample with that sample withheld. The passes are independent, so they are
expressed as a Dask delayed map over sample indices followed by an explicit
reduction in the caller.
"""
import logging
from typing import Any, Callable, List, Optional, Union

import dask
import numpy as np
from dask.delayed import delayed
from dask.distributed import Client

from .. import config
from ..exceptions import InvalidParameterError

logger = logging.getLogger(__name__)


class ParallelProcessor:
    """
    Runs independent per-sample passes in parallel using Dask.

    Parameters
    ----------
    client : dask.distributed.Client, optional
        Dask client for distributed computing. Takes precedence over ``scheduler``.
    scheduler : str, optional
        Local Dask scheduler name ('threads', 'processes', 'synchronous').
        Defaults to ``config.SCHEDULER``.
    """

    def __init__(self, client: Optional[Client] = None, scheduler: Optional[str] = None):
        self.client = client
        self.scheduler = scheduler if scheduler is not None else config.SCHEDULER
        if self.client is None and self.scheduler not in config.VALID_SCHEDULERS:
            raise InvalidParameterError(
                f"scheduler must be one of {config.VALID_SCHEDULERS}, got '{self.scheduler}'"
            )

    @classmethod
    def from_option(cls, scheduler: Optional[Union[str, Client, "ParallelProcessor"]]) -> "ParallelProcessor":
        """Build a processor from a scheduler name, a Dask client or an existing processor."""
        if isinstance(scheduler, ParallelProcessor):
            return scheduler
        if isinstance(scheduler, Client):
            return cls(client=scheduler)
        return cls(scheduler=scheduler)

    def map_leave_one_out(
        self,
        pass_function: Callable[..., Any],
        n_samples: int,
        *args,
        **kwargs
    ) -> List[Any]:
        """
        Evaluate ``pass_function(i, *args, **kwargs)`` for every sample index.

        Parameters
        ----------
        pass_function : callable
            Function of the withheld sample index. Must not mutate shared state.
        n_samples : int
            Number of passes; indices run from 0 to ``n_samples - 1``
        *args, **kwargs
            Read-only arguments forwarded to every pass

        Returns
        -------
        list
            Pass results ordered by sample index

        Notes
        -----
        An exception raised by any pass propagates unchanged and no partial
        results are returned.
        """
        tasks = [delayed(pass_function)(i, *args, **kwargs) for i in range(n_samples)]
        scheduler = self.client if self.client is not None else self.scheduler
        logger.debug("Running %d leave-one-out passes on %s", n_samples, scheduler)
        results = dask.compute(*tasks, scheduler=scheduler)
        return list(results)

    @staticmethod
    def stack_results(results: List[np.ndarray]) -> np.ndarray:
        """Stack per-pass vectors into a ``(n_passes, m)`` array."""
        return np.stack([np.asarray(r, dtype=np.float64) for r in results], axis=0)
