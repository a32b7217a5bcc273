"""Neighbourhood kernels.

A kernel maps a grid offset (dx, dy) from the best-matching unit and the
current radius to the scaling factor of the update. Offsets may be scalars or
integer arrays; the kernels below broadcast, so the grid evaluates them once
for all of its cells. Every built-in kernel returns 1 at offset (0, 0).
"""

from typing import Callable

import numpy as np

from .exceptions import ConfigurationError

NeighbourhoodFunction = Callable[[np.ndarray, np.ndarray, float], np.ndarray]


def gaussian(dx: np.ndarray, dy: np.ndarray, radius: float) -> np.ndarray:
    """
    Gaussian kernel: exp(-(dx^2 + dy^2) / (2 * radius^2)).

    :param dx: int or np.ndarray: Horizontal offset(s) from the center.
    :param dy: int or np.ndarray: Vertical offset(s) from the center.
    :param radius: float: Spread of the kernel.
    :return: np.ndarray: Scaling factor(s) in (0, 1].
    """
    dx = np.asarray(dx, dtype=float)
    dy = np.asarray(dy, dtype=float)
    return np.exp(-(dx * dx + dy * dy) / (2.0 * radius * radius))


def sinc(dx: np.ndarray, dy: np.ndarray, radius: float) -> np.ndarray:
    """
    Unnormalized sinc kernel: sin(d) / d, with d = sqrt(dx^2 + dy^2) / (2 * radius).

    Evaluates to 1 at the center. Far from the center the factor oscillates and
    turns negative, pushing those cells away from the target.

    :param dx: int or np.ndarray: Horizontal offset(s) from the center.
    :param dy: int or np.ndarray: Vertical offset(s) from the center.
    :param radius: float: Spread of the kernel.
    :return: np.ndarray: Scaling factor(s), in [-0.22, 1].
    """
    dx = np.asarray(dx, dtype=float)
    dy = np.asarray(dy, dtype=float)
    d = np.sqrt(dx * dx + dy * dy) / (radius * 2.0)
    with np.errstate(divide="ignore", invalid="ignore"):
        ratio = np.sin(d) / d
    return np.where(d == 0.0, 1.0, ratio)


def expon(dx: np.ndarray, dy: np.ndarray, radius: float) -> np.ndarray:
    """
    Exponential kernel: exp(-sqrt(dx^2 + dy^2) / radius).

    :param dx: int or np.ndarray: Horizontal offset(s) from the center.
    :param dy: int or np.ndarray: Vertical offset(s) from the center.
    :param radius: float: Spread of the kernel.
    :return: np.ndarray: Scaling factor(s) in (0, 1].
    """
    dx = np.asarray(dx, dtype=float)
    dy = np.asarray(dy, dtype=float)
    return np.exp(-np.sqrt(dx * dx + dy * dy) / radius)


NEIGHBOURHOOD_FUNCTIONS: dict[str, NeighbourhoodFunction] = {
    "gaussian": gaussian,
    "sinc": sinc,
    # Name used by older configuration files
    "sinc_sq": sinc,
    "expon": expon,
}


def get_neighbourhood_function(name: str) -> NeighbourhoodFunction:
    """
    Looks up a built-in neighbourhood kernel by name.

    :param name: str: One of 'gaussian', 'sinc' or 'expon'.
    :return: function: The neighbourhood kernel.
    """
    try:
        return NEIGHBOURHOOD_FUNCTIONS[name]
    except KeyError as exc:
        raise ConfigurationError(
            "Invalid value for 'neighbourhood'. Value should be in "
            + str(list(NEIGHBOURHOOD_FUNCTIONS.keys()))
        ) from exc
