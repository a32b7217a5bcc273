"""Seedable random source used for grid initialization and sample draws."""

from typing import Sequence, TypeVar

import numpy as np

T = TypeVar("T")


class RandomSource:
    """Uniform sampling over ranges and uniform choice from sequences.

    Each instance owns a private NumPy generator, so several training runs can
    coexist without sharing the global NumPy random state.
    """

    def __init__(self, seed: int | None = None) -> None:
        """
        :param seed: int or None: Seed for the generator. If None, a random seed is drawn
            and stored in the 'seed' attribute, so the run can be reproduced later.
        """
        if seed is None:
            seed = np.random.randint(np.iinfo(np.int32).max)
        self.seed = int(seed)
        self._state = np.random.RandomState(self.seed)

    def uniform(
        self,
        low: float | np.ndarray,
        high: float | np.ndarray,
        size: int | tuple[int, ...] | None = None,
    ) -> float | np.ndarray:
        """
        Draws values uniformly from the half-open interval [low, high).

        :param low: float or array-like: Lower bound(s), inclusive.
        :param high: float or array-like: Upper bound(s), exclusive.
        :param size: int, tuple or None: Output shape. Defaults to a single value.
        :return: float or np.ndarray: Sampled value(s).
        """
        values = self._state.uniform(low, high, size=size)
        # Rounding in low + (high - low) * u may land exactly on 'high'
        values = np.where(
            np.less(low, high) & (values >= high), np.nextafter(high, low), values
        )
        if np.ndim(values) == 0:
            return float(values)
        return values

    def choice(self, sequence: Sequence[T]) -> T:
        """
        Picks one element of 'sequence' uniformly at random, with replacement.

        :param sequence: Sequence: Non-empty sequence (list, tuple or array).
        :return: One element of 'sequence'.
        """
        if len(sequence) == 0:
            raise ValueError("Cannot choose from an empty sequence")
        return sequence[int(self._state.randint(len(sequence)))]
