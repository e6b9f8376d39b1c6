"""Field devices and wiring for a fire-alarm floor plan.

Only what loop discovery needs is modelled here: identity, type,
labels, serial numbers and the wire edges between device terminals.
Positions, rotation and terminal geometry belong to the editor.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, model_validator

MAX_LABEL_LENGTH = 20
SERIAL_BITS = 48
MAX_C_ADDRESS = 255


class DeviceType(str, Enum):
    """Device type ids known to the discovery engine.

    ``Device.type_id`` is a plain string so that types added by the
    editor pass through untouched; compare against these members.
    """

    PANEL = "panel"
    LOOP_DRIVER = "loop-driver"
    AG_SOCKET = "AG-socket"
    AG_HEAD = "AG-head"
    AG_DETECTOR = "AG-detector"  # socket + mounted head, produced by classification
    MCP = "mcp"
    SOUNDER = "sounder"
    INPUT_UNIT = "input-unit"
    OUTPUT_UNIT = "output-unit"


STRUCTURAL_TYPES = frozenset({DeviceType.PANEL.value, DeviceType.LOOP_DRIVER.value})


class Device(BaseModel):
    """A device placed on the floor plan."""

    instance_id: str
    type_id: str
    label: str = ""
    sn: int = 0
    c_address: int | None = None
    ip_address: str | None = None
    features: list[str] = []

    @model_validator(mode="after")
    def _validate_fields(self):
        if len(self.label) > MAX_LABEL_LENGTH:
            raise ValueError(
                f"label {self.label!r} exceeds {MAX_LABEL_LENGTH} characters"
            )
        if not 0 <= self.sn < 2 ** SERIAL_BITS:
            raise ValueError(f"sn ({self.sn}) must be a {SERIAL_BITS}-bit unsigned value")
        if self.c_address is not None and not 0 <= self.c_address <= MAX_C_ADDRESS:
            raise ValueError(
                f"c_address ({self.c_address}) must be in 0..{MAX_C_ADDRESS}"
            )
        return self

    @property
    def is_structural(self) -> bool:
        """Panels and loop drivers are never addressed on a loop."""
        return self.type_id in STRUCTURAL_TYPES


class Connection(BaseModel):
    """An undirected wire between two device terminals.

    A wire looping back onto its own device is accepted here and
    ignored when the wiring graph is built.
    """

    id: str
    from_device_id: str
    from_terminal_id: str = ""
    to_device_id: str
    to_terminal_id: str = ""


class Mount(BaseModel):
    """An AG-head mounted on an AG-socket.

    This is the single source of truth for the socket/head pairing;
    neither device carries a reference to the other.
    """

    socket_id: str
    head_id: str
