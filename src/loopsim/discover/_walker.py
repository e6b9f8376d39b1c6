"""Breadth-first walk of one loop, tagging each device with a direction.

The visitation order produced here is what addresses are assigned
from, so it must be stable for a given adjacency.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Mapping
from dataclasses import dataclass

from loopsim.model.devices import Device, DeviceType
from loopsim.model.modules import Direction

from ._graph import Adjacency


@dataclass(frozen=True)
class Visit:
    device_id: str
    direction: Direction


@dataclass(frozen=True)
class LoopWalk:
    """Result of walking the loop behind one loop driver."""

    loop_driver_id: str
    visits: tuple[Visit, ...] = ()
    adjacent_loop_drivers: tuple[str, ...] = ()
    panel_reached: bool = False

    def __contains__(self, device_id: object) -> bool:
        return any(v.device_id == device_id for v in self.visits)

    def __len__(self) -> int:
        return len(self.visits)


def walk_loop(
    loop_driver_id: str,
    devices: Mapping[str, Device],
    adjacency: Adjacency,
) -> LoopWalk:
    """Walk every device reachable from *loop_driver_id*.

    Each device is visited once: it is marked at enqueue time, so
    branches and rings that lead back to a known device stop there.
    The first field-device branch leaving the loop driver is tagged
    ``out``; every further branch is ``in``. Devices reached later
    inherit the tag of the device they were reached from.

    Panels and other loop drivers are recorded when reached but never
    expanded, so a walk cannot leak into the panel or a second loop.
    """
    seed = devices.get(loop_driver_id)
    if seed is None or seed.type_id != DeviceType.LOOP_DRIVER:
        return LoopWalk(loop_driver_id=loop_driver_id)

    tag: dict[str, Direction] = {loop_driver_id: Direction.OUT}
    visits: list[Visit] = []
    foreign_drivers: list[str] = []
    panel_reached = False
    branches = 0

    queue = deque([loop_driver_id])
    while queue:
        current = queue.popleft()
        for neighbor_id in adjacency.get(current, ()):
            if neighbor_id in tag:
                continue
            neighbor = devices.get(neighbor_id)
            if neighbor is None:
                continue

            if current == loop_driver_id:
                direction = Direction.OUT if branches == 0 else Direction.IN
                if not neighbor.is_structural:
                    branches += 1
            else:
                direction = tag[current]

            tag[neighbor_id] = direction
            visits.append(Visit(neighbor_id, direction))

            if neighbor.type_id == DeviceType.PANEL:
                panel_reached = True
            elif neighbor.type_id == DeviceType.LOOP_DRIVER:
                foreign_drivers.append(neighbor_id)
            else:
                queue.append(neighbor_id)

    return LoopWalk(
        loop_driver_id=loop_driver_id,
        visits=tuple(visits),
        adjacent_loop_drivers=tuple(foreign_drivers),
        panel_reached=panel_reached,
    )
