"""Epoch loop fitting a Grid to a sample distribution.

Each epoch draws one sample at random, finds its best-matching unit, pulls the
neighbourhood of that unit toward the sample and decays the radius. Training
stops when the token is cancelled, when 'max_epochs' is reached, or when the
update magnitude stayed under 'stability_threshold' for 'stability_duration'
consecutive epochs, whichever comes first.
"""

# %%
import dataclasses
import enum
import logging
from typing import Callable

import numpy as np
import pandas as pd
import tqdm

from .cancellation import CancellationToken
from .config import TrainConfig
from .distance import DistanceFunction, squared_euclidean_distance
from .exceptions import ConfigurationError, DimensionMismatchError
from .grid import Grid, as_sample_array
from .neighbourhood import get_neighbourhood_function
from .random_source import RandomSource

logger = logging.getLogger(__name__)


class TrainStatus(enum.Enum):
    RUNNING = "running"
    CONVERGED = "converged"
    EXHAUSTED = "exhausted"
    CANCELLED = "cancelled"


@dataclasses.dataclass
class TrainingState:
    """Bookkeeping of a training run, updated once per epoch."""

    epoch: int
    radius: float
    stability: int = 0
    status: TrainStatus = TrainStatus.RUNNING
    last_magnitude: float | None = None


class Trainer:
    """Trains a Grid in place according to a TrainConfig."""

    def __init__(
        self,
        grid: Grid,
        config: TrainConfig,
        distance_fn: DistanceFunction = squared_euclidean_distance,
        rng: RandomSource | None = None,
        cancel_token: CancellationToken | None = None,
        progress: Callable[[int], None] | None = None,
        progress_interval: int = 10,
        verbose: bool = False,
    ) -> None:
        """
        :param grid: Grid: Grid to train, mutated in place.
        :param config: TrainConfig: Training parameters, validated here.
        :param distance_fn: function: Distance metric for the best-matching unit search.
            Defaults to squared euclidean.
        :param rng: RandomSource or None: Source of sample draws. Defaults to a randomly
            seeded RandomSource.
        :param cancel_token: CancellationToken or None: Token polled before every epoch.
        :param progress: function or None: Called with the epoch counter every
            'progress_interval' epochs.
        :param progress_interval: int: Epochs between progress notifications. Defaults to 10.
        :param verbose: bool: Activate to show a progress bar in the terminal/console.
        """
        config.validate()
        if progress_interval < 1:
            raise ConfigurationError(
                f"progress_interval must be >= 1, got {progress_interval}"
            )
        self.grid = grid
        self.config = config
        self.distance_fn = distance_fn
        self.neighbourhood_fn = get_neighbourhood_function(config.neighbourhood)
        self.rng = rng if rng is not None else RandomSource()
        self.cancel_token = cancel_token if cancel_token is not None else CancellationToken()
        self.progress = progress
        self.progress_interval = progress_interval
        self.verbose = verbose

    def initial_state(self) -> TrainingState:
        radius = float(self.config.initial_radius)
        if self.config.min_radius is not None and radius < self.config.min_radius:
            radius = float(self.config.min_radius)
        return TrainingState(epoch=0, radius=radius)

    def step(self, state: TrainingState, example: np.ndarray) -> float:
        """
        Trains the grid with a single example and updates the run bookkeeping.

        Does not touch the epoch counter.

        :param state: TrainingState: State of the run, modified in place.
        :param example: array-like: Input vector of D components.
        :return: float: Mean update magnitude of the epoch.
        """
        config = self.config
        winner = self.grid.best_matching_unit(example, self.distance_fn)
        magnitude = self.grid.update_toward(
            winner, state.radius, example, self.neighbourhood_fn, config.train_rate
        )
        state.last_magnitude = magnitude

        if magnitude < config.stability_threshold:
            state.stability += 1
        else:
            state.stability = 0

        state.radius *= config.radius_decay
        if config.min_radius is not None and state.radius < config.min_radius:
            state.radius = float(config.min_radius)
        return magnitude

    def _next_status(self, state: TrainingState) -> TrainStatus:
        if self.cancel_token.cancelled:
            return TrainStatus.CANCELLED
        if state.epoch == self.config.max_epochs:
            return TrainStatus.EXHAUSTED
        if state.stability == self.config.stability_duration:
            return TrainStatus.CONVERGED
        return TrainStatus.RUNNING

    def train(self, samples: np.ndarray | pd.DataFrame | list) -> TrainingState:
        """
        Runs the epoch loop until a terminal state is reached.

        :param samples: array-like: Non-empty dataset of D-dimensional vectors.
        :return: TrainingState: Final state of the run. The trained result is the grid itself.
        """
        data_array = as_sample_array(samples)
        if data_array.shape[1] != self.grid.dimension:
            raise DimensionMismatchError(
                f"Samples have {data_array.shape[1]} components, grid vectors have "
                f"{self.grid.dimension}"
            )

        state = self.initial_state()
        logger.debug(
            "Training %r on %d samples, max_epochs=%d, neighbourhood=%s",
            self.grid,
            len(data_array),
            self.config.max_epochs,
            self.config.neighbourhood,
        )

        with tqdm.tqdm(
            total=self.config.max_epochs, desc="Training", disable=not self.verbose
        ) as progress_bar:
            while True:
                status = self._next_status(state)
                if status is not TrainStatus.RUNNING:
                    break

                state.epoch += 1
                example = self.rng.choice(data_array)
                self.step(state, example)
                progress_bar.update(1)

                if state.epoch % self.progress_interval == 0:
                    logger.info(
                        "Epoch %d: radius=%.6g, magnitude=%.6g, stability=%d",
                        state.epoch,
                        state.radius,
                        state.last_magnitude,
                        state.stability,
                    )
                    if self.progress is not None:
                        self.progress(state.epoch)

        state.status = status
        logger.info(
            "Training %s after %d epoch(s), radius=%.6g",
            status.value,
            state.epoch,
            state.radius,
        )
        return state


def train(
    samples: np.ndarray | pd.DataFrame | list,
    grid: Grid,
    config: TrainConfig,
    distance_fn: DistanceFunction = squared_euclidean_distance,
    rng: RandomSource | None = None,
    cancel_token: CancellationToken | None = None,
    **kwargs,
) -> TrainingState:
    """
    Trains 'grid' in place with 'samples'. See Trainer for the remaining keyword arguments.

    :return: TrainingState: Final state of the run.
    """
    trainer = Trainer(
        grid,
        config,
        distance_fn=distance_fn,
        rng=rng,
        cancel_token=cancel_token,
        **kwargs,
    )
    return trainer.train(samples)
