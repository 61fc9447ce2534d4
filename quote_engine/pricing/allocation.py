"""Room and vehicle allocation heuristics."""

from __future__ import annotations

import math
from decimal import Decimal

from ..domain.errors import InvalidCapacityError
from ..domain.models import OccupancyReport, OccupancyRule, OccupancyViolation

MAX_ADULTS_PER_ROOM = 3
MAX_OCCUPANTS_PER_ROOM = 4


def required_rooms(adults: int, children: int) -> int:
    """Rooms needed for a party: two adults per room, at least one room.

    A single room is bumped to two when more than two children travel,
    since one room cannot hold two adults plus three or more children.
    """
    rooms = math.ceil(adults / 2)
    if rooms == 1 and children > 2:
        rooms = 2
    return max(1, rooms)


def required_vehicles(total_pax: int, vehicle_capacity: int) -> int:
    """Vehicles needed to seat everybody, at least one.

    Raises:
        InvalidCapacityError: If the capacity is zero or negative.
    """
    if vehicle_capacity <= 0:
        raise InvalidCapacityError(
            f"Vehicle capacity must be positive, got {vehicle_capacity}",
            capacity=vehicle_capacity,
        )
    return max(1, math.ceil(total_pax / vehicle_capacity))


def check_occupancy(adults: int, children: int, rooms: int) -> OccupancyReport:
    """Validate a room allocation against the occupancy limits.

    Violations are reported for the caller to surface; the room count is
    never changed here.
    """
    if rooms < 1:
        violation = OccupancyViolation(
            rule=OccupancyRule.NO_ROOMS,
            message=f"At least one room is required, got {rooms}",
            limit=1,
            actual=Decimal(rooms),
        )
        return OccupancyReport(adults, children, rooms, (violation,))

    violations = []
    adults_per_room = Decimal(adults) / rooms
    if adults_per_room > MAX_ADULTS_PER_ROOM:
        violations.append(
            OccupancyViolation(
                rule=OccupancyRule.MAX_ADULTS_PER_ROOM,
                message=(
                    f"{adults} adults in {rooms} room(s) exceeds "
                    f"{MAX_ADULTS_PER_ROOM} adults per room"
                ),
                limit=MAX_ADULTS_PER_ROOM,
                actual=adults_per_room,
            )
        )

    occupants_per_room = Decimal(adults + children) / rooms
    if occupants_per_room > MAX_OCCUPANTS_PER_ROOM:
        violations.append(
            OccupancyViolation(
                rule=OccupancyRule.MAX_OCCUPANTS_PER_ROOM,
                message=(
                    f"{adults + children} guests in {rooms} room(s) exceeds "
                    f"{MAX_OCCUPANTS_PER_ROOM} occupants per room"
                ),
                limit=MAX_OCCUPANTS_PER_ROOM,
                actual=occupants_per_room,
            )
        )

    return OccupancyReport(adults, children, rooms, tuple(violations))
