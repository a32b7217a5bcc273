import json
import os
import signal
import tempfile
import unittest

import numpy as np

from rect_som import CancellationToken, ConfigurationError, GridDefinition, RandomSource, TrainConfig

VALID = {
    "train_rate": 0.1,
    "stability_threshold": 0.001,
    "stability_duration": 20,
    "initial_radius": 5.0,
    "radius_decay": 0.99,
    "min_radius": 0.5,
    "max_epochs": 1000,
    "neighbourhood": "gaussian",
}


class TestTrainConfig(unittest.TestCase):

    def test_from_dict(self):
        config = TrainConfig.from_dict(VALID)
        self.assertEqual(config.train_rate, 0.1)
        self.assertEqual(config.to_dict(), VALID)

    def test_defaults(self):
        data = dict(VALID)
        del data["min_radius"]
        del data["neighbourhood"]
        config = TrainConfig.from_dict(data)
        self.assertIsNone(config.min_radius)
        self.assertEqual(config.neighbourhood, "gaussian")

    def test_invalid_values(self):
        invalid = [
            ("train_rate", 0.0),
            ("train_rate", None),
            ("stability_threshold", -1e-9),
            ("stability_duration", -1),
            ("stability_duration", 2.5),
            ("initial_radius", 0.0),
            ("radius_decay", 0.0),
            ("radius_decay", 1.5),
            ("min_radius", -0.1),
            ("max_epochs", -1),
            ("max_epochs", True),
            ("neighbourhood", "bubble"),
            ("neighbourhood", ["gaussian"]),
            ("neighbourhood", None),
        ]
        for key, value in invalid:
            with self.subTest(key=key, value=value):
                data = dict(VALID)
                data[key] = value
                with self.assertRaises(ConfigurationError):
                    TrainConfig.from_dict(data)

    def test_boundary_values(self):
        data = dict(VALID, radius_decay=1.0, stability_threshold=0.0, max_epochs=0, min_radius=0.0)
        TrainConfig.from_dict(data)

    def test_sinc_alias(self):
        self.assertEqual(TrainConfig.from_dict(dict(VALID, neighbourhood="sinc_sq")).neighbourhood, "sinc_sq")

    def test_unknown_and_missing_keys(self):
        with self.assertRaises(ConfigurationError):
            TrainConfig.from_dict(dict(VALID, learning_rate=0.5))
        data = dict(VALID)
        del data["max_epochs"]
        with self.assertRaises(ConfigurationError):
            TrainConfig.from_dict(data)

    def test_from_json(self):
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, "train.json")
            with open(path, "w", encoding="utf-8") as config_file:
                json.dump(VALID, config_file)
            self.assertEqual(TrainConfig.from_json(path), TrainConfig(**VALID))


class TestGridDefinition(unittest.TestCase):

    def test_from_dict(self):
        definition = GridDefinition.from_dict({"width": 16, "height": 9})
        self.assertEqual((definition.width, definition.height), (16, 9))

    def test_invalid(self):
        for data in ({"width": 0, "height": 9}, {"width": 3}, {"width": 3, "height": 3, "depth": 1}):
            with self.subTest(data=data):
                with self.assertRaises(ConfigurationError):
                    GridDefinition.from_dict(data)


class TestRandomSource(unittest.TestCase):

    def test_same_seed_same_sequence(self):
        a, b = RandomSource(seed=5), RandomSource(seed=5)
        items = list(range(100))
        self.assertEqual([a.choice(items) for _ in range(20)], [b.choice(items) for _ in range(20)])
        self.assertEqual(a.uniform(0.0, 1.0), b.uniform(0.0, 1.0))

    def test_seed_is_recorded(self):
        source = RandomSource()
        self.assertIsInstance(source.seed, int)
        replay = RandomSource(seed=source.seed)
        self.assertEqual(source.uniform(0.0, 1.0), replay.uniform(0.0, 1.0))

    def test_uniform_range(self):
        values = RandomSource(seed=1).uniform(-2.0, 3.0, size=1000)
        self.assertTrue(((values >= -2.0) & (values < 3.0)).all())

    def test_uniform_excludes_upper_bound(self):
        # One ulp wide: about half of the raw draws round up to 'high'
        high = np.nextafter(1.0, 2.0)
        values = RandomSource(seed=3).uniform(1.0, high, size=1000)
        self.assertTrue((values < high).all())
        self.assertTrue((values >= 1.0).all())
        bounds = RandomSource(seed=3).uniform([0.0, 1.0], [1.0, high], size=(500, 2))
        self.assertTrue((bounds[:, 1] < high).all())

    def test_choice(self):
        source = RandomSource(seed=2)
        self.assertEqual(source.choice(["only"]), "only")
        with self.assertRaises(ValueError):
            source.choice([])


class TestCancellationToken(unittest.TestCase):

    def test_cancel(self):
        token = CancellationToken()
        self.assertFalse(token.cancelled)
        token.cancel()
        self.assertTrue(token.cancelled)

    def test_signal_handler(self):
        token = CancellationToken()
        previous = token.install_signal_handler(signal.SIGINT)
        try:
            handler = signal.getsignal(signal.SIGINT)
            handler(signal.SIGINT, None)
        finally:
            signal.signal(signal.SIGINT, previous)
        self.assertTrue(token.cancelled)


if __name__ == "__main__":
    unittest.main()
