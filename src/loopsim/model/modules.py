"""Panel modules and discovered loop devices.

These are read-models: derived from a FloorPlan on every call and
never stored or edited.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

FIRST_LOOP_SLOT = 3


class ModuleType(str, Enum):
    CONTROLLER = "controller"
    POWER_SUPPLY = "power-supply"
    LOOP_DRIVER = "loop-driver"


class ModuleStatus(str, Enum):
    ONLINE = "online"
    OFFLINE = "offline"
    FAULT = "fault"


class Direction(str, Enum):
    """Which side of the loop driver a device was discovered from."""

    OUT = "out"
    IN = "in"


class LoopState(str, Enum):
    OFFLINE = "OFFLINE"
    ONLINE_UNDISCOVERED = "ONLINE_UNDISCOVERED"
    ONLINE_DISCOVERED = "ONLINE_DISCOVERED"


class ConnectedDeviceInfo(BaseModel):
    """A field device as reported by a powered-up loop driver."""

    instance_id: str
    label: str
    type_id: str
    sn: int
    head_sn: int | None = None
    head_label: str | None = None
    features: list[str] = []
    c_address: int
    discovered_from: Direction


class PanelModule(BaseModel):
    """A hardware module in a panel slot.

    Only loop-driver modules carry the ``connected_*`` fields,
    ``ip_address`` and ``instance_id``.
    """

    id: str
    type: ModuleType
    slot_position: int
    status: ModuleStatus
    label: str

    connected_device_count: int | None = None
    connected_devices: list[ConnectedDeviceInfo] | None = None
    ip_address: str | None = None
    instance_id: str | None = None

    @property
    def loop_state(self) -> LoopState | None:
        if self.type != ModuleType.LOOP_DRIVER:
            return None
        if self.status != ModuleStatus.ONLINE:
            return LoopState.OFFLINE
        if self.connected_devices is None:
            return LoopState.ONLINE_UNDISCOVERED
        return LoopState.ONLINE_DISCOVERED
