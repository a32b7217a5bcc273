"""This package fits a 2D rectangular self-organizing map to a set of samples.

The map is a width x height grid of feature vectors. Training repeatedly draws a
sample, finds its best-matching unit and pulls the neighbourhood of that unit
toward the sample, while the neighbourhood radius shrinks. The result is a
topology-preserving, low-dimensional model of the input distribution.

Features:
    - Random initialization inside a bounding box
    - Linear initialization (with PCA)
    - Gaussian, sinc and exponential neighbourhood kernels
    - Pluggable distance metrics
    - Radius decay with an optional lower bound
    - Convergence detection from the update magnitude
    - Cooperative cancellation (e.g., on Ctrl-C)
    - Support for NumPy arrays, Pandas DataFrames and regular lists of values

Reference:
Teuvo Kohonen,
Essentials of the self-organizing map,
Neural Networks,
Volume 37,
2013,
Pages 52-65,
ISSN 0893-6080,
https://doi.org/10.1016/j.neunet.2012.09.018.
"""

from .cancellation import CancellationToken
from .config import GridDefinition, TrainConfig
from .distance import euclidean_distance, get_distance_function, squared_euclidean_distance
from .exceptions import ConfigurationError, DimensionMismatchError, SOMError
from .grid import Grid
from .neighbourhood import expon, gaussian, get_neighbourhood_function, sinc
from .random_source import RandomSource
from .trainer import Trainer, TrainingState, TrainStatus, train

__version__ = "0.1.0"

__all__ = [
    "CancellationToken",
    "ConfigurationError",
    "DimensionMismatchError",
    "Grid",
    "GridDefinition",
    "RandomSource",
    "SOMError",
    "TrainConfig",
    "Trainer",
    "TrainingState",
    "TrainStatus",
    "euclidean_distance",
    "expon",
    "gaussian",
    "get_distance_function",
    "get_neighbourhood_function",
    "sinc",
    "squared_euclidean_distance",
    "train",
]
