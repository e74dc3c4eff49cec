from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from .building import Building
from .passenger import Passenger


@dataclass
class MetricsSnapshot:
    time_step: int
    average_wait: float
    wait_p95: float
    average_ride: float
    ride_p95: float
    throughput: int


class MetricsTracker:
    def __init__(self) -> None:
        self.wait_times: List[int] = []
        self.ride_times: List[int] = []
        self.throughput: int = 0

    def record_wait_time(self, passenger: Passenger) -> None:
        if passenger.wait_time is not None:
            self.wait_times.append(passenger.wait_time)

    def record_ride_time(self, passenger: Passenger) -> None:
        if passenger.ride_time is not None:
            self.ride_times.append(passenger.ride_time)
            self.throughput += 1

    def snapshot(self, time_step: int) -> MetricsSnapshot:
        return MetricsSnapshot(
            time_step=time_step,
            average_wait=_mean(self.wait_times),
            wait_p95=_percentile(self.wait_times, 0.95),
            average_ride=_mean(self.ride_times),
            ride_p95=_percentile(self.ride_times, 0.95),
            throughput=self.throughput,
        )


def _mean(values: List[int]) -> float:
    return sum(values) / len(values) if values else 0.0


def _percentile(values: List[int], percentile: float) -> float:
    """Linear interpolation between the two closest ranks."""
    if not values:
        return 0.0
    ordered = sorted(values)
    rank = (len(ordered) - 1) * percentile
    low, high = math.floor(rank), math.ceil(rank)
    if low == high:
        return float(ordered[low])
    return ordered[low] + (ordered[high] - ordered[low]) * (rank - low)


class Simulation:
    """Tick-driven host that exercises the dispatcher with generated traffic."""

    def __init__(
        self,
        building: Building,
        arrival_rate_per_floor: float = 0.1,
        random_seed: Optional[int] = None,
        metrics_hook_interval: int = 1,
    ) -> None:
        self.building = building
        self.arrival_rate_per_floor = arrival_rate_per_floor
        self.random = random.Random(random_seed)
        self.current_time: int = 0
        self.metrics = MetricsTracker()
        self.event_hooks: Dict[str, List[Callable[[object], None]]] = {}
        self.metrics_hook_interval = max(1, metrics_hook_interval)
        self.passengers: List[Passenger] = []

    def run(self, duration: int) -> None:
        for _ in range(duration):
            self.step()

    def drain(self, max_ticks: int) -> bool:
        """Step without new arrivals until everyone is delivered; False on timeout."""
        rate, self.arrival_rate_per_floor = self.arrival_rate_per_floor, 0.0
        try:
            for _ in range(max_ticks):
                if self.all_delivered():
                    return True
                self.step()
            return self.all_delivered()
        finally:
            self.arrival_rate_per_floor = rate

    def step(self) -> None:
        self._generate_passenger_arrivals()
        self.building.step(self.current_time, self.metrics)

        if self.current_time % self.metrics_hook_interval == 0:
            self._emit_metrics()

        self.current_time += 1

    def all_delivered(self) -> bool:
        return all(p.delivered for p in self.passengers)

    def on_event(self, event: str, callback: Callable[[object], None]) -> None:
        self.event_hooks.setdefault(event, []).append(callback)

    def spawn_passenger(self, origin: int, destination: int) -> Passenger:
        if origin == destination:
            raise ValueError("origin and destination must differ")
        passenger = Passenger(
            passenger_id=len(self.passengers),
            origin=origin,
            destination=destination,
            arrival_time=self.current_time,
        )
        self.building.add_passenger(passenger)
        self.passengers.append(passenger)
        return passenger

    def spawn_passenger_batch(self, origin: int, count: int, destination: Optional[int] = None) -> int:
        for _ in range(count):
            target = destination if destination is not None else self._choose_destination(origin)
            self.spawn_passenger(origin, target)
        if count:
            self._emit("arrival", {"time": self.current_time, "count": count})
        return count

    def _generate_passenger_arrivals(self) -> None:
        total_arrivals = 0
        for floor in self.building.floors:
            for _ in range(self._poisson(self.arrival_rate_per_floor)):
                self.spawn_passenger(floor.number, self._choose_destination(floor.number))
                total_arrivals += 1
        if total_arrivals:
            self._emit("arrival", {"time": self.current_time, "count": total_arrivals})

    def _choose_destination(self, origin: int) -> int:
        return self.random.choice([f for f in range(self.building.num_floors) if f != origin])

    def _poisson(self, lam: float) -> int:
        if lam <= 0:
            return 0
        threshold = math.exp(-lam)
        k, p = 0, 1.0
        while p > threshold:
            k += 1
            p *= self.random.random()
        return k - 1

    def _emit_metrics(self) -> None:
        if not self.event_hooks.get("metrics"):
            return
        snapshot = self.metrics.snapshot(self.current_time)
        self._emit("metrics", {"metrics": snapshot, "building": self.building.snapshot()})

    def _emit(self, event: str, payload: object) -> None:
        for callback in self.event_hooks.get(event, []):
            callback(payload)
