"""Distance metrics between feature vectors.

Every metric reduces over the last axis, so a single call may compare one
vector against a whole stack of vectors (e.g., every cell of a grid).
"""

from typing import Callable

import numpy as np

from .exceptions import ConfigurationError

DistanceFunction = Callable[[np.ndarray, np.ndarray], np.ndarray]


def squared_euclidean_distance(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Sum of squared component differences between the last dimension of a and b.

    The shapes of a and b must be capable of broadcasting.

    :param a: array-like: list or numpy array of values.
    :param b: array-like: list or numpy array of values.
    :return: array-like: Squared euclidean distances between a and b.
    """
    diff = np.subtract(a, b)
    return np.sum(diff * diff, axis=-1)


def euclidean_distance(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Euclidean distances between the elements of the last dimension of a and b.

    :param a: array-like: list or numpy array of values.
    :param b: array-like: list or numpy array of values.
    :return: array-like: Euclidean distances between a and b.
    """
    return np.linalg.norm(np.subtract(a, b), ord=2, axis=-1)


DISTANCE_FUNCTIONS: dict[str, DistanceFunction] = {
    "sq_euclidean": squared_euclidean_distance,
    "euclidean": euclidean_distance,
}


def get_distance_function(name: str) -> DistanceFunction:
    """
    Looks up a built-in distance metric by name.

    :param name: str: Either 'sq_euclidean' or 'euclidean'.
    :return: function: The distance metric.
    """
    try:
        return DISTANCE_FUNCTIONS[name]
    except KeyError as exc:
        raise ConfigurationError(
            "Invalid distance function name. Value should be in "
            + str(list(DISTANCE_FUNCTIONS.keys()))
        ) from exc
