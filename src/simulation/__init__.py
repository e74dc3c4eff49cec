"""Reference host that drives the dispatch core with simulated cars and riders."""

from .building import Building
from .config import ElevatorConstraints
from .elevator import Elevator
from .floor import Floor
from .passenger import Passenger
from .simulation import MetricsSnapshot, MetricsTracker, Simulation

__all__ = [
    "Building",
    "Elevator",
    "ElevatorConstraints",
    "Floor",
    "MetricsSnapshot",
    "MetricsTracker",
    "Passenger",
    "Simulation",
]
