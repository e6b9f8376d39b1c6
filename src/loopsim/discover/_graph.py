"""Adjacency construction from the flat wire list."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from loopsim.model.devices import Connection, Device

logger = logging.getLogger(__name__)

Adjacency = dict[str, list[str]]


def build_adjacency(devices: Iterable[Device], connections: Iterable[Connection]) -> Adjacency:
    """Map each device id to its directly wired neighbors.

    Neighbor lists keep first-seen connection order, which fixes the
    traversal order downstream. Parallel wires between the same pair
    collapse to one edge. Wires naming a device that is not placed, and
    wires looping back onto their own device, are dropped.
    """
    adjacency: Adjacency = {d.instance_id: [] for d in devices}

    for conn in connections:
        a, b = conn.from_device_id, conn.to_device_id
        if a not in adjacency or b not in adjacency:
            logger.debug("dropping dangling connection %s (%s -> %s)", conn.id, a, b)
            continue
        if a == b:
            logger.debug("dropping self-wired connection %s on %s", conn.id, a)
            continue
        if b in adjacency[a]:
            continue
        adjacency[a].append(b)
        adjacency[b].append(a)

    return adjacency


def are_adjacent(adjacency: Adjacency, a: str, b: str) -> bool:
    """Single-hop check; unknown ids are simply not adjacent."""
    return b in adjacency.get(a, ())
