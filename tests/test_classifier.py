"""Tests for device classification and address assignment."""

import logging

from conftest import dev

from loopsim.discover._addressing import assign_addresses
from loopsim.discover._classifier import UNKNOWN_HEAD, ClassifiedDevice, classify
from loopsim.discover._walker import Visit
from loopsim.model.devices import DeviceType, Mount
from loopsim.model.floorplan import MountIndex
from loopsim.model.modules import ConnectedDeviceInfo, Direction

OUT = Direction.OUT
IN = Direction.IN


def _classify(devices, visits, mounts=()):
    device_map = {d.instance_id: d for d in devices}
    index = MountIndex([Mount(socket_id=s, head_id=h) for s, h in mounts])
    return classify(visits, device_map, index)


# ===========================================================================
# Classifier
# ===========================================================================


class TestStructural:
    def test_panel_and_loop_driver_dropped(self):
        devices = [
            dev("P", DeviceType.PANEL),
            dev("L2", DeviceType.LOOP_DRIVER),
            dev("A", label="a"),
        ]
        result = _classify(devices, [Visit("P", OUT), Visit("L2", OUT), Visit("A", OUT)])
        assert [c.instance_id for c in result] == ["A"]

    def test_unknown_visit_skipped(self):
        assert _classify([], [Visit("ghost", OUT)]) == []

    def test_passthrough_keeps_order_and_type(self):
        devices = [
            dev("S", DeviceType.SOUNDER, label="Bell", sn=3),
            dev("I", DeviceType.INPUT_UNIT, sn=4),
            dev("X", "beacon", sn=5),
        ]
        result = _classify(devices, [Visit("X", IN), Visit("S", OUT), Visit("I", OUT)])
        assert result == [
            ClassifiedDevice(instance_id="X", label="", type_id="beacon", sn=5, direction=IN),
            ClassifiedDevice(instance_id="S", label="Bell", type_id="sounder", sn=3, direction=OUT),
            ClassifiedDevice(instance_id="I", label="", type_id="input-unit", sn=4, direction=OUT),
        ]


class TestDetectorComposition:
    def test_mounted_socket_becomes_detector(self):
        devices = [
            dev("S", DeviceType.AG_SOCKET, label="Base", sn=0xAAA),
            dev("H", DeviceType.AG_HEAD, label="Office smoke", sn=0xBBB,
                features=["smoke", "heat"]),
        ]
        [det] = _classify(devices, [Visit("S", OUT)], mounts=[("S", "H")])
        assert det.instance_id == "S"
        assert det.type_id == "AG-detector"
        assert det.sn == 0xAAA
        assert det.head_sn == 0xBBB
        assert det.label == "Office smoke"
        assert det.features == ("smoke", "heat")

    def test_label_falls_back_to_socket(self):
        devices = [
            dev("S", DeviceType.AG_SOCKET, label="Base"),
            dev("H", DeviceType.AG_HEAD, label=""),
        ]
        [det] = _classify(devices, [Visit("S", OUT)], mounts=[("S", "H")])
        assert det.label == "Base"

    def test_label_never_type_string(self):
        devices = [dev("S", DeviceType.AG_SOCKET), dev("H", DeviceType.AG_HEAD)]
        [det] = _classify(devices, [Visit("S", OUT)], mounts=[("S", "H")])
        assert det.label == ""

    def test_unmounted_socket_stays_socket(self):
        [sock] = _classify([dev("S", DeviceType.AG_SOCKET, sn=7)], [Visit("S", OUT)])
        assert sock.type_id == "AG-socket"
        assert sock.head_sn is None
        assert sock.head_label is None

    def test_unresolved_head_degrades(self, caplog):
        devices = [dev("S", DeviceType.AG_SOCKET, label="Base", sn=7)]
        with caplog.at_level(logging.WARNING, logger="loopsim.discover._classifier"):
            [sock] = _classify(devices, [Visit("S", OUT)], mounts=[("S", "gone")])
        assert sock.type_id == "AG-socket"
        assert sock.head_label == UNKNOWN_HEAD
        assert sock.head_sn is None
        assert sock.sn == 7
        assert "gone, which is not a placed AG-head" in caplog.text

    def test_mounted_head_absorbed(self):
        """A wired head that sits on a socket is reported through the socket."""
        devices = [
            dev("S", DeviceType.AG_SOCKET),
            dev("H", DeviceType.AG_HEAD, label="Head"),
        ]
        result = _classify(
            devices, [Visit("S", OUT), Visit("H", OUT)], mounts=[("S", "H")],
        )
        assert [c.instance_id for c in result] == ["S"]

    def test_standalone_head_is_field_device(self):
        [head] = _classify([dev("H", DeviceType.AG_HEAD, sn=9)], [Visit("H", IN)])
        assert head.type_id == "AG-head"
        assert head.direction == IN

    def test_head_on_missing_socket_is_standalone(self):
        result = _classify(
            [dev("H", DeviceType.AG_HEAD)], [Visit("H", OUT)], mounts=[("gone", "H")],
        )
        assert [c.instance_id for c in result] == ["H"]

    def test_head_on_non_socket_is_standalone(self):
        """A head whose mount names an MCP is still reported on the loop."""
        devices = [dev("M1", DeviceType.MCP, sn=1), dev("H", DeviceType.AG_HEAD, sn=2)]
        result = _classify(
            devices, [Visit("M1", OUT), Visit("H", OUT)], mounts=[("M1", "H")],
        )
        assert [(c.instance_id, c.type_id) for c in result] == [
            ("M1", "mcp"),
            ("H", "AG-head"),
        ]

    def test_socket_mounted_with_non_head_degrades(self, caplog):
        """An MCP named as the head is not composed into a detector."""
        devices = [
            dev("S", DeviceType.AG_SOCKET, label="Base", sn=7),
            dev("M1", DeviceType.MCP, label="Call point", sn=8),
        ]
        with caplog.at_level(logging.WARNING, logger="loopsim.discover._classifier"):
            result = _classify(
                devices, [Visit("S", OUT), Visit("M1", OUT)], mounts=[("S", "M1")],
            )
        sock, mcp = result
        assert sock.type_id == "AG-socket"
        assert sock.head_label == UNKNOWN_HEAD
        assert sock.head_sn is None
        assert sock.label == "Base"
        assert (mcp.instance_id, mcp.type_id, mcp.sn) == ("M1", "mcp", 8)
        assert "M1, which is not a placed AG-head" in caplog.text


# ===========================================================================
# Address assigner
# ===========================================================================


def _cd(instance_id, direction=OUT, **kwargs):
    kwargs.setdefault("label", instance_id)
    kwargs.setdefault("type_id", "mcp")
    kwargs.setdefault("sn", 0)
    return ClassifiedDevice(instance_id=instance_id, direction=direction, **kwargs)


class TestAssignAddresses:
    def test_sequential_from_one(self):
        result = assign_addresses([_cd("A"), _cd("B"), _cd("C", IN)])
        assert [(d.instance_id, d.c_address) for d in result] == [("A", 1), ("B", 2), ("C", 3)]
        assert result[2].discovered_from == IN

    def test_empty(self):
        assert assign_addresses([]) == []

    def test_first_address(self):
        result = assign_addresses([_cd("A"), _cd("B")], first_address=10)
        assert [d.c_address for d in result] == [10, 11]

    def test_sorted_by_address(self):
        result = assign_addresses([_cd("Z"), _cd("A")])
        assert [d.c_address for d in result] == sorted(d.c_address for d in result)
        assert result[0].instance_id == "Z"

    def test_detector_fields_carried(self):
        det = _cd("S", type_id="AG-detector", sn=1, head_sn=2, head_label="H",
                  features=("smoke",))
        [info] = assign_addresses([det])
        assert info == ConnectedDeviceInfo(
            instance_id="S", label="S", type_id="AG-detector", sn=1, head_sn=2,
            head_label="H", features=["smoke"], c_address=1, discovered_from=OUT,
        )

    def test_idempotent(self):
        devices = [_cd("A"), _cd("B", IN)]
        assert assign_addresses(devices) == assign_addresses(devices)
