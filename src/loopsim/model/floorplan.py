"""Top-level FloorPlan container handed over by the editor."""

from __future__ import annotations

from typing import Self

from pydantic import BaseModel, model_validator

from .devices import Connection, Device, DeviceType, Mount


class MountIndex:
    """Two-way lookup over a list of mounts.

    Built from one authoritative relation, so ``head_for`` and
    ``socket_for`` can never disagree.
    """

    def __init__(self, mounts: list[Mount]) -> None:
        self._head_by_socket: dict[str, str] = {}
        self._socket_by_head: dict[str, str] = {}
        for mount in mounts:
            self._head_by_socket[mount.socket_id] = mount.head_id
            self._socket_by_head[mount.head_id] = mount.socket_id

    def head_for(self, socket_id: str) -> str | None:
        return self._head_by_socket.get(socket_id)

    def socket_for(self, head_id: str) -> str | None:
        return self._socket_by_head.get(head_id)


class FloorPlan(BaseModel):
    """Devices, wires and socket/head mounts, in placement order."""

    devices: list[Device] = []
    connections: list[Connection] = []
    mounts: list[Mount] = []

    @model_validator(mode="after")
    def _validate_references(self) -> Self:
        seen: set[str] = set()
        for device in self.devices:
            if device.instance_id in seen:
                raise ValueError(f"duplicate device instance_id {device.instance_id!r}")
            seen.add(device.instance_id)

        sockets: set[str] = set()
        heads: set[str] = set()
        for mount in self.mounts:
            if mount.socket_id in sockets:
                raise ValueError(f"socket {mount.socket_id!r} has more than one head mounted")
            if mount.head_id in heads:
                raise ValueError(f"head {mount.head_id!r} is mounted on more than one socket")
            sockets.add(mount.socket_id)
            heads.add(mount.head_id)
        return self

    # -- lookups ------------------------------------------------------------

    def device_map(self) -> dict[str, Device]:
        return {d.instance_id: d for d in self.devices}

    def device(self, instance_id: str) -> Device | None:
        for d in self.devices:
            if d.instance_id == instance_id:
                return d
        return None

    def mount_index(self) -> MountIndex:
        return MountIndex(self.mounts)

    @property
    def panel(self) -> Device | None:
        """The first panel in placement order, if any."""
        for d in self.devices:
            if d.type_id == DeviceType.PANEL:
                return d
        return None

    @property
    def loop_drivers(self) -> list[Device]:
        return [d for d in self.devices if d.type_id == DeviceType.LOOP_DRIVER]

    # -- non-mutating edits -------------------------------------------------

    def with_mount(self, socket_id: str, head_id: str) -> FloorPlan:
        """Return a copy with *head_id* mounted on *socket_id*.

        Any existing mount involving either device is replaced.
        """
        kept = [
            m for m in self.mounts
            if m.socket_id != socket_id and m.head_id != head_id
        ]
        kept.append(Mount(socket_id=socket_id, head_id=head_id))
        return self.model_copy(update={"mounts": kept})

    def without_mount(self, socket_id: str) -> FloorPlan:
        """Return a copy with the head on *socket_id* removed."""
        kept = [m for m in self.mounts if m.socket_id != socket_id]
        return self.model_copy(update={"mounts": kept})

    def without_connection(self, connection_id: str) -> FloorPlan:
        """Return a copy with the wire *connection_id* removed."""
        kept = [c for c in self.connections if c.id != connection_id]
        return self.model_copy(update={"connections": kept})
