"""Training configuration and grid definition records."""

import dataclasses
import json
import numbers
import os
from typing import Any, Mapping

from .exceptions import ConfigurationError
from .neighbourhood import NEIGHBOURHOOD_FUNCTIONS


def _is_real(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _is_integer(value: Any) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def _fields_from_mapping(cls: type, data: Mapping[str, Any]) -> dict[str, Any]:
    names = {f.name for f in dataclasses.fields(cls)}
    unknown = set(data) - names
    if unknown:
        raise ConfigurationError(
            f"Unknown {cls.__name__} attribute(s): {sorted(unknown)}"
        )
    return dict(data)


@dataclasses.dataclass
class TrainConfig:
    """Parameters of a training run.

    :param train_rate: float: Learning rate, > 0.
    :param stability_threshold: float: Update magnitude under which an epoch counts as stable.
    :param stability_duration: int: Consecutive stable epochs after which training converges.
    :param initial_radius: float: Neighbourhood radius of the first epoch, > 0.
    :param radius_decay: float: Factor in (0, 1] applied to the radius after each epoch.
    :param min_radius: float or None: Lower bound for the radius, if any.
    :param max_epochs: int: Upper bound on the number of epochs.
    :param neighbourhood: str: Kernel name, one of 'gaussian', 'sinc' or 'expon'.
    """

    train_rate: float
    stability_threshold: float
    stability_duration: int
    initial_radius: float
    radius_decay: float
    max_epochs: int
    min_radius: float | None = None
    neighbourhood: str = "gaussian"

    def validate(self) -> None:
        """Raises ConfigurationError if any value is out of its allowed range."""
        if not (_is_real(self.train_rate) and self.train_rate > 0):
            raise ConfigurationError(f"train_rate must be > 0, got {self.train_rate}")
        if not (_is_real(self.stability_threshold) and self.stability_threshold >= 0):
            raise ConfigurationError(
                f"stability_threshold must be >= 0, got {self.stability_threshold}"
            )
        if not (_is_integer(self.stability_duration) and self.stability_duration >= 0):
            raise ConfigurationError(
                f"stability_duration must be an integer >= 0, got {self.stability_duration}"
            )
        if not (_is_real(self.initial_radius) and self.initial_radius > 0):
            raise ConfigurationError(
                f"initial_radius must be > 0, got {self.initial_radius}"
            )
        if not (_is_real(self.radius_decay) and 0 < self.radius_decay <= 1):
            raise ConfigurationError(
                f"radius_decay must be in (0, 1], got {self.radius_decay}"
            )
        if self.min_radius is not None and not (
            _is_real(self.min_radius) and self.min_radius >= 0
        ):
            raise ConfigurationError(
                f"min_radius must be >= 0, got {self.min_radius}"
            )
        if not (_is_integer(self.max_epochs) and self.max_epochs >= 0):
            raise ConfigurationError(
                f"max_epochs must be an integer >= 0, got {self.max_epochs}"
            )
        if not isinstance(self.neighbourhood, str) or (
            self.neighbourhood not in NEIGHBOURHOOD_FUNCTIONS
        ):
            raise ConfigurationError(
                "Invalid value for 'neighbourhood'. Value should be in "
                + str(list(NEIGHBOURHOOD_FUNCTIONS.keys()))
            )

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TrainConfig":
        """
        Builds a configuration from an already parsed record, e.g. a JSON document.

        :param data: dict: Mapping of attribute names to values.
        :return: TrainConfig: The validated configuration.
        """
        try:
            config = cls(**_fields_from_mapping(cls, data))
        except TypeError as exc:
            raise ConfigurationError(f"Incomplete training configuration: {exc}") from exc
        config.validate()
        return config

    @classmethod
    def from_json(cls, path: str | os.PathLike) -> "TrainConfig":
        """
        Reads a configuration from a JSON file.

        :param path: str or path-like: JSON file holding a single object.
        :return: TrainConfig: The validated configuration.
        """
        with open(path, encoding="utf-8") as config_file:
            return cls.from_dict(json.load(config_file))


@dataclasses.dataclass
class GridDefinition:
    """Size of the grid to create before training."""

    width: int
    height: int

    def validate(self) -> None:
        if not all(_is_integer(v) and v >= 1 for v in (self.width, self.height)):
            raise ConfigurationError(
                f"Grid dimensions must be at least 1x1, got {self.width}x{self.height}"
            )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GridDefinition":
        try:
            definition = cls(**_fields_from_mapping(cls, data))
        except TypeError as exc:
            raise ConfigurationError(f"Incomplete grid definition: {exc}") from exc
        definition.validate()
        return definition

    @classmethod
    def from_json(cls, path: str | os.PathLike) -> "GridDefinition":
        with open(path, encoding="utf-8") as definition_file:
            return cls.from_dict(json.load(definition_file))
