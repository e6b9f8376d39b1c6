"""Resolve walked devices to the logical devices a loop reports."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from loopsim.model.devices import Device, DeviceType
from loopsim.model.floorplan import MountIndex
from loopsim.model.modules import Direction

from ._walker import Visit

logger = logging.getLogger(__name__)

UNKNOWN_HEAD = "Unknown"


@dataclass(frozen=True)
class ClassifiedDevice:
    """A field device ready for addressing."""

    instance_id: str
    label: str
    type_id: str
    sn: int
    direction: Direction
    head_sn: int | None = None
    head_label: str | None = None
    features: tuple[str, ...] = ()


def classify(
    visits: Iterable[Visit],
    devices: Mapping[str, Device],
    mounts: MountIndex,
) -> list[ClassifiedDevice]:
    """Classify *visits* in order, dropping anything not addressable.

    - panels and loop drivers are dropped;
    - a socket with a mounted head becomes one ``AG-detector``;
    - a head mounted on a placed socket is reported through that socket;
    - everything else passes through with its own type.

    Mounts are only honoured between an AG-socket and an AG-head; a
    mount naming any other device type is treated as absent.
    """
    result: list[ClassifiedDevice] = []
    for visit in visits:
        device = devices.get(visit.device_id)
        if device is None or device.is_structural:
            continue

        if (
            device.type_id == DeviceType.AG_HEAD
            and _absorbing_socket(device, devices, mounts) is not None
        ):
            continue

        if device.type_id == DeviceType.AG_SOCKET:
            head_id = mounts.head_for(device.instance_id)
            if head_id is not None:
                result.append(_classify_socket(device, head_id, devices, visit.direction))
                continue

        result.append(ClassifiedDevice(
            instance_id=device.instance_id,
            label=device.label,
            type_id=device.type_id,
            sn=device.sn,
            direction=visit.direction,
        ))
    return result


def _absorbing_socket(
    head: Device,
    devices: Mapping[str, Device],
    mounts: MountIndex,
) -> Device | None:
    """The placed AG-socket *head* is mounted on, if any."""
    socket_id = mounts.socket_for(head.instance_id)
    if socket_id is None:
        return None
    socket = devices.get(socket_id)
    if socket is None or socket.type_id != DeviceType.AG_SOCKET:
        return None
    return socket


def _classify_socket(
    socket: Device,
    head_id: str,
    devices: Mapping[str, Device],
    direction: Direction,
) -> ClassifiedDevice:
    head = devices.get(head_id)
    if head is None or head.type_id != DeviceType.AG_HEAD:
        logger.warning(
            "socket %s references %s, which is not a placed AG-head; "
            "reporting plain socket",
            socket.instance_id, head_id,
        )
        return ClassifiedDevice(
            instance_id=socket.instance_id,
            label=socket.label,
            type_id=DeviceType.AG_SOCKET.value,
            sn=socket.sn,
            direction=direction,
            head_label=UNKNOWN_HEAD,
        )

    return ClassifiedDevice(
        instance_id=socket.instance_id,
        label=head.label or socket.label,
        type_id=DeviceType.AG_DETECTOR.value,
        sn=socket.sn,
        direction=direction,
        head_sn=head.sn,
        head_label=head.label,
        features=tuple(head.features),
    )
