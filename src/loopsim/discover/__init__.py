"""loopsim discovery — loop scanning and C_Address assignment.

Entry point::

    from loopsim.discover import derive_modules

    modules = derive_modules(plan, powered_on=True)
    loop = modules[2]
    assert loop.connected_devices[0].c_address == 1
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from loopsim.model.floorplan import FloorPlan
from loopsim.model.modules import ConnectedDeviceInfo, PanelModule

from ._addressing import assign_addresses
from ._classifier import UNKNOWN_HEAD, ClassifiedDevice, classify
from ._graph import build_adjacency
from ._modules import ModuleDeriver, default_panel_modules
from ._walker import LoopWalk, Visit, walk_loop


def derive_modules(
    plan: Any,
    *,
    powered_on: bool = False,
    first_address: int = 1,
) -> list[PanelModule]:
    """Derive the panel module list for a floor plan.

    Parameters
    ----------
    plan
        A ``FloorPlan`` or a mapping that validates into one.
    powered_on
        Whether the loop has been raised. Without it, wired loop drivers
        only report a device count.
    first_address
        C_Address given to the first discovered device (default 1).

    Returns
    -------
    list[PanelModule]
        Empty when no panel is placed; otherwise controller, power supply
        and one module per loop driver in placement order.
    """
    resolved = _resolve_plan(plan)
    return ModuleDeriver(resolved, first_address=first_address).derive(powered_on=powered_on)


def discover_loop_devices(
    plan: Any,
    loop_driver_id: str,
    *,
    first_address: int = 1,
) -> list[ConnectedDeviceInfo]:
    """Discover and address the devices on one loop, ignoring panel wiring."""
    resolved = _resolve_plan(plan)
    return ModuleDeriver(resolved, first_address=first_address).discover(loop_driver_id)


def discover_all_loops(
    plan: Any,
    *,
    first_address: int = 1,
) -> dict[str, list[ConnectedDeviceInfo]]:
    """Discover every loop, keyed by loop driver instance id."""
    resolved = _resolve_plan(plan)
    deriver = ModuleDeriver(resolved, first_address=first_address)
    return {ld.instance_id: deriver.discover(ld.instance_id) for ld in resolved.loop_drivers}


def is_loop_driver_connected_to_panel(plan: Any, loop_driver_id: str, panel_id: str) -> bool:
    """True when a wire runs directly between the two devices."""
    resolved = _resolve_plan(plan)
    return ModuleDeriver(resolved).is_connected_to_panel(loop_driver_id, panel_id)


def _resolve_plan(plan: Any) -> FloorPlan:
    """Resolve a target to a FloorPlan."""
    if isinstance(plan, FloorPlan):
        return plan
    if isinstance(plan, Mapping):
        return FloorPlan.model_validate(dict(plan))
    raise TypeError(
        f"expected a FloorPlan or a mapping, got {type(plan).__name__}"
    )


__all__ = [
    "derive_modules",
    "discover_loop_devices",
    "discover_all_loops",
    "is_loop_driver_connected_to_panel",
    "default_panel_modules",
    "build_adjacency",
    "walk_loop",
    "classify",
    "assign_addresses",
    "ClassifiedDevice",
    "LoopWalk",
    "Visit",
    "ModuleDeriver",
    "UNKNOWN_HEAD",
]
