"""Station topology for the metro line.

Stations form a fixed, totally ordered list. A segment is a pair of stations
(pickup, drop-off) with the pickup strictly before the drop-off, and two
segments overlap when their index ranges share at least one hop. Ranges are
half-open, so a segment ending at a station does not overlap one starting
there.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .constants import DEFAULT_STATIONS
from .exceptions import InvalidStationError


# Segment expressed as (pickup index, drop-off index)
SegmentIndices = tuple[int, int]


@dataclass(frozen=True)
class StationTopology:
    """Ordered list of station names with segment helpers.

    Attributes:
        stations: Station names in travel order.
    """

    stations: tuple[str, ...] = field(default_factory=lambda: tuple(DEFAULT_STATIONS))

    def __post_init__(self) -> None:
        if len(self.stations) < 2:
            raise ValueError("A topology needs at least two stations")
        if len(set(self.stations)) != len(self.stations):
            raise ValueError(f"Duplicate station names in {list(self.stations)}")

    @classmethod
    def from_names(cls, names: list[str]) -> StationTopology:
        """Build a topology from a list of station names."""
        return cls(stations=tuple(names))

    def __len__(self) -> int:
        return len(self.stations)

    def __contains__(self, station: object) -> bool:
        return station in self.stations

    @property
    def first(self) -> str:
        return self.stations[0]

    @property
    def last(self) -> str:
        return self.stations[-1]

    def index_of(self, station: str) -> int:
        """Get the position of a station in travel order.

        Raises:
            InvalidStationError: If the station is not part of the topology.
        """
        try:
            return self.stations.index(station)
        except ValueError:
            raise InvalidStationError(f"Unknown station: {station!r}") from None

    def segment_indices(self, pickup: str, drop_off: str) -> SegmentIndices:
        """Validate a segment and return its (pickup, drop-off) indices.

        Raises:
            InvalidStationError: If a station is unknown or the drop-off
                does not come strictly after the pickup.
        """
        start = self.index_of(pickup)
        end = self.index_of(drop_off)
        if start >= end:
            raise InvalidStationError(
                f"Drop-off {drop_off!r} must come after pickup {pickup!r}"
            )
        return start, end

    def validate_segment(self, pickup: str, drop_off: str) -> None:
        """Raise InvalidStationError unless (pickup, drop_off) is a valid segment."""
        self.segment_indices(pickup, drop_off)

    def overlaps(
        self,
        pickup_a: str,
        drop_off_a: str,
        pickup_b: str,
        drop_off_b: str,
    ) -> bool:
        """Check whether two segments share any part of the line.

        Computed as ``max(start_a, start_b) < min(end_a, end_b)`` on station
        indices.

        Raises:
            InvalidStationError: If any station is unknown.
        """
        start_a, end_a = self.index_of(pickup_a), self.index_of(drop_off_a)
        start_b, end_b = self.index_of(pickup_b), self.index_of(drop_off_b)
        return max(start_a, start_b) < min(end_a, end_b)

    def origin_options(self) -> list[str]:
        """Stations a journey can start from (all but the last)."""
        return list(self.stations[:-1])

    def destination_options(self, origin: str) -> list[str]:
        """Stations strictly after the given origin."""
        return list(self.stations[self.index_of(origin) + 1:])

    def hops(self) -> list[SegmentIndices]:
        """Consecutive station hops ``(i, i + 1)`` along the line."""
        return [(i, i + 1) for i in range(len(self.stations) - 1)]

    def hop_labels(self) -> list[str]:
        """Human readable labels for each hop."""
        return [f"{self.stations[i]} > {self.stations[j]}" for i, j in self.hops()]
