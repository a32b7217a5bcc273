"""Rectangular grid of feature vectors.

Cells are stored row by row: the cell at (x, y) lives at linear index
x + width * y, and linear index i maps back to (i % width, i // width).
"""

# %%
from typing import Any, Sequence

import numpy as np
import pandas as pd
import sklearn.decomposition  # type: ignore

from .distance import DISTANCE_FUNCTIONS, DistanceFunction, squared_euclidean_distance
from .exceptions import ConfigurationError, DimensionMismatchError
from .neighbourhood import NEIGHBOURHOOD_FUNCTIONS, NeighbourhoodFunction
from .random_source import RandomSource

# Built-ins broadcast over all cells; any other callable is evaluated cell by cell
_VECTORIZED_DISTANCES = tuple(DISTANCE_FUNCTIONS.values())
_VECTORIZED_KERNELS = tuple(NEIGHBOURHOOD_FUNCTIONS.values())


# %%
def as_sample_array(data: np.ndarray | pd.DataFrame | list) -> np.ndarray:
    """
    Converts a dataset to a 2D float array of shape (n_samples, n_features).

    :param data: array-like: NumPy array, Pandas DataFrame or list of vectors.
    :return: np.ndarray: Float array of the dataset.
    """
    if isinstance(data, pd.DataFrame):
        array = data.to_numpy(dtype=float)
    else:
        try:
            array = np.array(data, dtype=float)
        except ValueError as exc:
            raise DimensionMismatchError(
                "All samples must have the same number of components"
            ) from exc
    if array.ndim != 2 or len(array) == 0:
        raise DimensionMismatchError(
            f"Expected a non-empty sequence of vectors, got shape {array.shape}"
        )
    return array


def _check_size(width: int, height: int) -> None:
    if int(width) < 1 or int(height) < 1:
        raise ConfigurationError(
            f"Grid dimensions must be at least 1x1, got {width}x{height}"
        )


def _span(n: int) -> np.ndarray:
    # Evenly spaced positions in [-1, 1], centered when there is a single cell
    if n == 1:
        return np.zeros(1)
    return np.linspace(-1.0, 1.0, num=n)


class Grid:
    """A width x height map of feature vectors of dimensionality D.

    The vectors are kept in a single (width * height, D) float array and are
    updated in place during training.
    """

    def __init__(self, width: int, height: int, fields: np.ndarray | list) -> None:
        """
        :param width: int: Number of columns, at least 1.
        :param height: int: Number of rows, at least 1.
        :param fields: array-like: width * height vectors, in linear index order.
        """
        _check_size(width, height)
        self.width = int(width)
        self.height = int(height)
        try:
            fields_array = np.array(fields, dtype=float)
        except ValueError as exc:
            raise DimensionMismatchError(
                "All feature vectors must have the same number of components"
            ) from exc
        if fields_array.ndim != 2 or len(fields_array) != self.width * self.height:
            raise DimensionMismatchError(
                f"Expected {self.width * self.height} vectors for a "
                f"{self.width}x{self.height} grid, got array of shape {fields_array.shape}"
            )
        if fields_array.shape[1] == 0:
            raise DimensionMismatchError("Feature vectors must have at least one component")
        self._fields = fields_array
        indices = np.arange(len(fields_array))
        self._xs = indices % self.width
        self._ys = indices // self.width

    # %%
    @classmethod
    def create_random(
        cls,
        width: int,
        height: int,
        bounding_box: Sequence[tuple[float, float]],
        rng: RandomSource,
    ) -> "Grid":
        """
        Creates a grid whose vectors are drawn uniformly inside a bounding box.

        Component i of every vector is sampled independently from
        [bounding_box[i][0], bounding_box[i][1]).

        :param width: int: Number of columns.
        :param height: int: Number of rows.
        :param bounding_box: list of (min, max): One pair per dimension.
        :param rng: RandomSource: Source of the uniform samples.
        :return: Grid: The new grid.
        """
        _check_size(width, height)
        if len(bounding_box) == 0:
            raise ConfigurationError("Bounding box must have at least one dimension")
        bounds = np.array(bounding_box, dtype=float)
        if bounds.ndim != 2 or bounds.shape[1] != 2:
            raise ConfigurationError("Bounding box must be a sequence of (min, max) pairs")
        lows, highs = bounds[:, 0], bounds[:, 1]
        if np.any(lows >= highs):
            raise ConfigurationError(
                "Every bounding box range must satisfy min < max, got " + str(bounding_box)
            )
        fields = rng.uniform(lows, highs, size=(int(width) * int(height), len(bounds)))
        return cls(width, height, fields)

    @classmethod
    def create_linear(
        cls,
        width: int,
        height: int,
        samples: np.ndarray | pd.DataFrame | list,
    ) -> "Grid":
        """Creates a grid spanning the plane of the two first principal components of 'samples'.

        The x axis follows the first component and the y axis the second one, each
        covering one standard deviation around the mean of the samples. Unlike random
        initialization, this is deterministic for a given dataset.

        :param width: int: Number of columns.
        :param height: int: Number of rows.
        :param samples: array-like: Dataset for PCA, at least two samples.
        :return: Grid: The new grid.
        """
        _check_size(width, height)
        data_array = as_sample_array(samples)
        if len(data_array) < 2:
            raise DimensionMismatchError("Linear initialization requires at least two samples")
        n_components = min(2, data_array.shape[1])
        pca = sklearn.decomposition.PCA(n_components=n_components)
        pca.fit(data_array)
        axes = pca.components_ * np.sqrt(pca.explained_variance_)[:, None]

        fields = np.tile(pca.mean_, (int(width) * int(height), 1))
        grid = cls(width, height, fields)
        grid._fields += _span(grid.width)[grid._xs, None] * axes[0]
        if n_components > 1:
            grid._fields += _span(grid.height)[grid._ys, None] * axes[1]
        return grid

    # %%
    @property
    def dimension(self) -> int:
        """Number of components of each feature vector."""
        return int(self._fields.shape[1])

    @property
    def fields(self) -> np.ndarray:
        """Read-only view of the (width * height, D) array of feature vectors."""
        view = self._fields.view()
        view.flags.writeable = False
        return view

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"Grid(width={self.width}, height={self.height}, dimension={self.dimension})"

    def linear_index_of(self, x: int, y: int) -> int:
        """
        Gets the linear index of the cell at (x, y).

        :param x: int: Column, 0 <= x < width.
        :param y: int: Row, 0 <= y < height.
        :return: int: Linear index of the cell.
        """
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(
                f"Coordinate ({x}, {y}) out of range for a {self.width}x{self.height} grid"
            )
        return int(x) + self.width * int(y)

    def coordinate_of(self, linear_index: int) -> tuple[int, int]:
        """
        Gets the (x, y) coordinate of the cell at a linear index.

        :param linear_index: int: 0 <= linear_index < width * height.
        :return: (int, int): Column and row of the cell.
        """
        if not 0 <= linear_index < len(self._fields):
            raise IndexError(
                f"Linear index {linear_index} out of range for a grid of {len(self._fields)} cells"
            )
        return int(linear_index) % self.width, int(linear_index) // self.width

    def field_at(self, x: int, y: int) -> np.ndarray:
        """
        Gets the feature vector at (x, y). The returned array is a view into the grid.

        :param x: int: Column.
        :param y: int: Row.
        :return: np.ndarray: Feature vector of the cell.
        """
        return self._fields[self.linear_index_of(x, y)]

    def _check_target(self, target: np.ndarray | list) -> np.ndarray:
        target_array = np.asarray(target, dtype=float)
        if target_array.shape != (self.dimension,):
            raise DimensionMismatchError(
                f"Expected a vector of {self.dimension} components, got shape {target_array.shape}"
            )
        return target_array

    # %%
    def best_matching_unit(
        self,
        target: np.ndarray | list,
        distance_fn: DistanceFunction = squared_euclidean_distance,
    ) -> tuple[int, int]:
        """
        Finds the cell whose vector is closest to 'target'.

        'distance_fn' compares two vectors and returns a float. Cells are scanned in
        linear index order; the built-in metrics score all of them in a single call.
        On ties, the cell with the lowest linear index wins.

        :param target: array-like: Vector of D components.
        :param distance_fn: function: Distance metric. Defaults to squared euclidean.
        :return: (int, int): Coordinate of the best-matching unit.
        """
        target_array = self._check_target(target)
        if distance_fn in _VECTORIZED_DISTANCES:
            distances = distance_fn(self._fields, target_array)
        else:
            distances = np.fromiter(
                (float(distance_fn(vector, target_array)) for vector in self._fields),
                dtype=float,
                count=len(self._fields),
            )
        return self.coordinate_of(int(np.argmin(distances)))

    def update_toward(
        self,
        at: tuple[int, int],
        radius: float,
        target: np.ndarray | list,
        neighbourhood_fn: NeighbourhoodFunction,
        rate: float,
    ) -> float:
        """Moves every cell toward 'target', weighted by its neighbourhood factor around 'at'.

        For a cell at (x, y), with scale = neighbourhood_fn(x - at.x, y - at.y, radius):
            new = target * scale * rate + old * (1 - scale * rate)

        The returned magnitude is the mean, over all cells, of the euclidean norm of the
        cell's change divided by D.

        :param at: (int, int): Coordinate of the best-matching unit.
        :param radius: float: Current neighbourhood radius.
        :param target: array-like: Vector of D components.
        :param neighbourhood_fn: function: Neighbourhood kernel, called as (dx, dy, radius)
            for each cell. The built-in kernels are evaluated on all offsets at once.
        :param rate: float: Learning rate.
        :return: float: Mean update magnitude.
        """
        target_array = self._check_target(target)
        self.linear_index_of(*at)
        dxs, dys = self._xs - at[0], self._ys - at[1]
        if neighbourhood_fn in _VECTORIZED_KERNELS:
            scale = neighbourhood_fn(dxs, dys, radius)
        else:
            scale = np.fromiter(
                (
                    float(neighbourhood_fn(int(dx), int(dy), radius))
                    for dx, dy in zip(dxs, dys)
                ),
                dtype=float,
                count=len(self._fields),
            )
        factor = np.asarray(scale, dtype=float)[:, None] * rate

        old = self._fields
        new = target_array * factor + old * (1.0 - factor)
        diff = old - new
        magnitudes = np.sqrt(np.sum(diff * diff, axis=1)) / self.dimension
        self._fields[...] = new
        return float(magnitudes.mean())

    # %%
    def quantization_error(
        self,
        samples: np.ndarray | pd.DataFrame | list,
        distance_fn: DistanceFunction = squared_euclidean_distance,
    ) -> float:
        """Average distance between each sample and the vector of its best-matching unit.

        This error is a quality measure for the training process.

        :param samples: array-like: Dataset to be compared with the grid.
        :param distance_fn: function: Distance metric. Defaults to squared euclidean.
        :return: float: Quantization error.
        """
        data_array = as_sample_array(samples)
        errors = [
            float(distance_fn(self.field_at(*self.best_matching_unit(s, distance_fn)), s))
            for s in data_array
        ]
        return float(np.mean(errors))

    def to_array(self) -> np.ndarray:
        """Copy of the vectors shaped (height, width, D), i.e. indexed [y, x]."""
        return self._fields.reshape(self.height, self.width, self.dimension).copy()

    def to_dataframe(self, columns: Sequence[str] | None = None) -> pd.DataFrame:
        """
        Tabular view of the grid: one row per cell, in linear index order.

        :param columns: list of str or None: Names of the D component columns.
            Defaults to 'w0', 'w1', ...
        :return: pd.DataFrame: Columns 'x', 'y' followed by the components.
        """
        if columns is None:
            columns = [f"w{i}" for i in range(self.dimension)]
        if len(columns) != self.dimension:
            raise DimensionMismatchError(
                f"Expected {self.dimension} column names, got {len(columns)}"
            )
        frame = pd.DataFrame(self._fields.copy(), columns=list(columns))
        frame.insert(0, "y", self._ys)
        frame.insert(0, "x", self._xs)
        return frame

    def to_dict(self) -> dict[str, Any]:
        """Plain-data form of the grid: {'width', 'height', 'fields'}."""
        return {
            "width": self.width,
            "height": self.height,
            "fields": self._fields.tolist(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Grid":
        """
        Rebuilds a grid from the output of to_dict.

        :param data: dict: Mapping with 'width', 'height' and 'fields'.
        :return: Grid: The grid.
        """
        try:
            return cls(data["width"], data["height"], data["fields"])
        except KeyError as exc:
            raise ConfigurationError(f"Missing grid attribute {exc}") from exc
