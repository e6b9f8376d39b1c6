"""Shared test helpers for the loopsim test suite."""

from loopsim.model.devices import Connection, Device, DeviceType, Mount
from loopsim.model.floorplan import FloorPlan


def dev(instance_id, type_id=DeviceType.MCP, label="", sn=0, **kwargs):
    """Build a Device; type_id accepts a DeviceType member or a raw string."""
    if isinstance(type_id, DeviceType):
        type_id = type_id.value
    return Device(instance_id=instance_id, type_id=type_id, label=label, sn=sn, **kwargs)


def wire(a, b, cid=None, a_terminal="", b_terminal=""):
    """Build a Connection between devices *a* and *b*."""
    return Connection(
        id=cid or f"{a}--{b}",
        from_device_id=a,
        from_terminal_id=a_terminal,
        to_device_id=b,
        to_terminal_id=b_terminal,
    )


def chain(*ids):
    """Wires joining consecutive ids: chain("A", "B", "C") -> A-B, B-C."""
    return [wire(a, b) for a, b in zip(ids, ids[1:])]


def make_plan(devices, connections=(), mounts=()):
    """Build a FloorPlan; mounts may be (socket_id, head_id) tuples."""
    return FloorPlan(
        devices=list(devices),
        connections=list(connections),
        mounts=[
            m if isinstance(m, Mount) else Mount(socket_id=m[0], head_id=m[1])
            for m in mounts
        ],
    )


def basic_plan():
    """Panel P wired to loop driver L; L -> socket S1 -> MCP M1."""
    return make_plan(
        [
            dev("P", DeviceType.PANEL, label="Panel"),
            dev("L", DeviceType.LOOP_DRIVER, label="Loop A", ip_address="10.0.0.5"),
            dev("S1", DeviceType.AG_SOCKET, label="Socket 1", sn=0x1001),
            dev("M1", DeviceType.MCP, label="MCP 1", sn=0x2001),
        ],
        [wire("P", "L"), wire("L", "S1"), wire("S1", "M1")],
    )
