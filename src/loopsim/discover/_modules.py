"""Panel module list derivation.

Per loop driver the module moves through three states:

- OFFLINE: no direct wire between the loop driver and the panel;
- ONLINE_UNDISCOVERED: wired, loop not powered on, count only;
- ONLINE_DISCOVERED: powered on, devices addressed and attached.

Nothing is cached between calls, so removing the panel wire drops any
addresses on the next derivation.
"""

from __future__ import annotations

import logging

from loopsim.model.devices import Device
from loopsim.model.floorplan import FloorPlan, MountIndex
from loopsim.model.modules import (
    FIRST_LOOP_SLOT,
    ConnectedDeviceInfo,
    ModuleStatus,
    ModuleType,
    PanelModule,
)

from ._addressing import assign_addresses
from ._classifier import classify
from ._graph import Adjacency, are_adjacent, build_adjacency
from ._walker import LoopWalk, walk_loop

logger = logging.getLogger(__name__)


def default_panel_modules() -> list[PanelModule]:
    """Controller and power supply, present in every panel."""
    return [
        PanelModule(
            id="ctrl-1",
            type=ModuleType.CONTROLLER,
            slot_position=1,
            status=ModuleStatus.ONLINE,
            label="Controller",
        ),
        PanelModule(
            id="psu-1",
            type=ModuleType.POWER_SUPPLY,
            slot_position=2,
            status=ModuleStatus.ONLINE,
            label="Power Supply",
        ),
    ]


class ModuleDeriver:
    """Derives the module list for one snapshot of a floor plan.

    Holds the indexes built from the plan for the duration of a single
    derivation; it is not meant to outlive it.
    """

    def __init__(self, plan: FloorPlan, *, first_address: int = 1) -> None:
        self.plan = plan
        self.first_address = first_address
        self.devices = plan.device_map()
        self.adjacency: Adjacency = build_adjacency(plan.devices, plan.connections)
        self.mounts: MountIndex = plan.mount_index()

    def walk(self, loop_driver_id: str) -> LoopWalk:
        return walk_loop(loop_driver_id, self.devices, self.adjacency)

    def count(self, loop_driver_id: str) -> int:
        """Logical field devices on one loop, without assigning addresses.

        A wired head mounted on a reached socket counts once, through its
        socket, so the count matches what discovery reports after power-on.
        """
        walk = self.walk(loop_driver_id)
        return len(classify(walk.visits, self.devices, self.mounts))

    def discover(self, loop_driver_id: str) -> list[ConnectedDeviceInfo]:
        """Run walker, classifier and address assigner for one loop."""
        walk = self.walk(loop_driver_id)
        classified = classify(walk.visits, self.devices, self.mounts)
        discovered = assign_addresses(classified, first_address=self.first_address)
        logger.debug(
            "loop %s: %d devices discovered (%d visited)",
            loop_driver_id, len(discovered), len(walk),
        )
        return discovered

    def is_connected_to_panel(self, loop_driver_id: str, panel_id: str) -> bool:
        return are_adjacent(self.adjacency, loop_driver_id, panel_id)

    def derive(self, *, powered_on: bool = False) -> list[PanelModule]:
        panel = self.plan.panel
        if panel is None:
            return []

        modules = default_panel_modules()
        for idx, ld in enumerate(self.plan.loop_drivers):
            modules.append(self._loop_driver_module(ld, idx, panel.instance_id, powered_on))
        return modules

    def _loop_driver_module(
        self,
        ld: Device,
        idx: int,
        panel_id: str,
        powered_on: bool,
    ) -> PanelModule:
        connected = self.is_connected_to_panel(ld.instance_id, panel_id)

        connected_devices: list[ConnectedDeviceInfo] | None = None
        if powered_on and connected:
            connected_devices = self.discover(ld.instance_id)
            count = len(connected_devices)
        else:
            count = self.count(ld.instance_id)

        return PanelModule(
            id=f"ld-{idx + 1}",
            type=ModuleType.LOOP_DRIVER,
            slot_position=FIRST_LOOP_SLOT + idx,
            status=ModuleStatus.ONLINE if connected else ModuleStatus.OFFLINE,
            label=ld.label or f"Loop Driver {idx + 1}",
            connected_device_count=count,
            connected_devices=connected_devices,
            ip_address=ld.ip_address,
            instance_id=ld.instance_id,
        )
