# ridebook/services/ride_service/fare.py
"""
Fare estimation.
There is no routing integration yet: the trip distance is a uniform random
placeholder inside the configured range, and the distance source can be
swapped for a real one.
"""

from __future__ import annotations

import random
from typing import Callable

from ridebook.config import settings
from ridebook.shared.models.ride_dto import FareEstimateDTO

# (pickup, dropoff) -> distance in km
DistanceProvider = Callable[[str, str], float]


def random_distance_provider(
    min_km: float,
    max_km: float,
    rng: random.Random | None = None,
) -> DistanceProvider:
    """Returns a provider drawing a distance from [min_km, max_km)."""
    source = rng or random.Random()

    def provider(pickup: str, dropoff: str) -> float:
        return min_km + (max_km - min_km) * source.random()

    return provider


class FareEstimator:
    """Computes ``base_fare + fare_per_km * distance`` rounded to cents."""

    def __init__(
        self,
        base_fare: float | None = None,
        fare_per_km: float | None = None,
        currency: str | None = None,
        distance_provider: DistanceProvider | None = None,
    ) -> None:
        self.base_fare = settings.fares.BASE_FARE if base_fare is None else base_fare
        self.fare_per_km = settings.fares.FARE_PER_KM if fare_per_km is None else fare_per_km
        self.currency = currency or settings.fares.CURRENCY
        self._distance = distance_provider or random_distance_provider(
            settings.fares.MIN_DISTANCE_KM,
            settings.fares.MAX_DISTANCE_KM,
        )

    def estimate(self, pickup: str, dropoff: str) -> FareEstimateDTO:
        distance_km = self._distance(pickup, dropoff)
        distance_fare = self.fare_per_km * distance_km
        total = round(self.base_fare + distance_fare, 2)

        return FareEstimateDTO(
            distance_km=round(distance_km, 2),
            base_fare=self.base_fare,
            distance_fare=round(distance_fare, 2),
            total_fare=total,
            currency=self.currency,
        )
