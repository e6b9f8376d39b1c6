"""Sequential C_Address assignment in discovery order."""

from __future__ import annotations

from collections.abc import Iterable

from loopsim.model.modules import ConnectedDeviceInfo

from ._classifier import ClassifiedDevice


def assign_addresses(
    classified: Iterable[ClassifiedDevice],
    *,
    first_address: int = 1,
) -> list[ConnectedDeviceInfo]:
    """Number devices in the order given, as loop auto-addressing does.

    The returned list is sorted by address.
    """
    assigned = [
        ConnectedDeviceInfo(
            instance_id=c.instance_id,
            label=c.label,
            type_id=c.type_id,
            sn=c.sn,
            head_sn=c.head_sn,
            head_label=c.head_label,
            features=list(c.features),
            c_address=address,
            discovered_from=c.direction,
        )
        for address, c in enumerate(classified, start=first_address)
    ]
    return sorted(assigned, key=lambda d: d.c_address)
