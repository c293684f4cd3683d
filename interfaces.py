import socket
from dataclasses import dataclass
from typing import Callable, Iterable, List
import psutil


@dataclass(frozen=True)
class AddressRecord:
    interface: str
    family: str  # "IPv4" or "IPv6"
    address: str


AddressSource = Callable[[], Iterable[AddressRecord]]

_FAMILIES = {socket.AF_INET: "IPv4", socket.AF_INET6: "IPv6"}


def host_addresses() -> List[AddressRecord]:
    """Enumerate the host's network interface addresses."""
    records = []
    for interface, addrs in psutil.net_if_addrs().items():
        for addr in addrs:
            family = _FAMILIES.get(addr.family)
            if family and addr.address:
                records.append(AddressRecord(interface=interface, family=family, address=addr.address))
    return records
