import random

import pytest

from ridebook.services.ride_service.fare import FareEstimator, random_distance_provider


def test_fixed_distance():
    estimator = FareEstimator(base_fare=5.0, fare_per_km=2.0, distance_provider=lambda p, d: 3.0)

    estimate = estimator.estimate("Main St", "Airport")

    assert estimate.total_fare == 11.0
    assert estimate.distance_fare == 6.0
    assert estimate.distance_km == 3.0


def test_rounds_to_cents():
    estimator = FareEstimator(base_fare=5.0, fare_per_km=2.0, distance_provider=lambda p, d: 1.23456)

    assert estimator.estimate("a b c", "d e f").total_fare == 7.47


@pytest.mark.parametrize("seed", range(20))
def test_default_range(seed):
    provider = random_distance_provider(1.0, 11.0, rng=random.Random(seed))
    estimator = FareEstimator(base_fare=5.0, fare_per_km=2.0, distance_provider=provider)

    fare = estimator.estimate("Main St", "Airport").total_fare

    assert 7.0 <= fare <= 27.0
    assert round(fare, 2) == fare


def test_defaults_come_from_settings():
    estimator = FareEstimator()
    assert estimator.base_fare == 5.0
    assert estimator.fare_per_km == 2.0
    assert estimator.currency == "USD"
