"""
Traffic-control command synthesis for network chaos.

Builds the ordered `tc` argument lists that start or stop netem on a network
interface. Synthesis is pure: no I/O, same output for the same input. The
`tc` binary name itself is not part of a command; executors prepend it.

See: http://www.linuxfoundation.org/collaborate/workgroups/networking/netem
"""

from typing import List, Optional, Sequence

# One tc invocation, e.g. ["qdisc", "add", "dev", "eth0", "root", "netem", "delay", "100ms"]
TcCommand = List[str]

# Band of the prio qdisc that receives filtered traffic. Bands 1 and 2 keep
# the default priomap traffic, band 3 is empty unless a filter routes to it.
PRIO_HANDLE = "1:"
FILTERED_BAND = "1:3"


def build_start(interface: str, netem_args: Sequence[str]) -> List[TcCommand]:
    """
    Build the command adding netem as root qdisc of an interface.

    Args:
        interface: Network interface name (e.g., "eth0")
        netem_args: Netem arguments, appended verbatim

    Returns:
        One command: `qdisc add dev <interface> root netem <netem_args>`

    Example:
        >>> build_start("eth0", ["loss", "10%"])
        [['qdisc', 'add', 'dev', 'eth0', 'root', 'netem', 'loss', '10%']]
    """
    return [["qdisc", "add", "dev", interface, "root", "netem", *netem_args]]


def build_start_filtered(
    interface: str,
    netem_args: Sequence[str],
    destination_ip: str
) -> List[TcCommand]:
    """
    Build the commands applying netem only to traffic toward one address.

    A qdisc cannot be attached conditionally, so a prio qdisc is installed
    as root, netem is attached to its third band, and a u32 filter routes
    matching packets into that band. Each command depends on the previous
    one and must run in order.

    Args:
        interface: Network interface name
        netem_args: Netem arguments, appended verbatim
        destination_ip: Address whose traffic is disrupted

    Returns:
        Three commands: prio root, netem on band 3, filter to band 3
    """
    return [
        ["qdisc", "add", "dev", interface, "root", "handle", PRIO_HANDLE, "prio"],
        ["qdisc", "add", "dev", interface, "parent", FILTERED_BAND, "netem", *netem_args],
        [
            "filter", "add", "dev", interface, "protocol", "ip", "parent", "1:0",
            "prio", "3", "u32", "match", "ip", "dport", destination_ip.lower(),
            "flowid", FILTERED_BAND,
        ],
    ]


def build_stop(interface: str) -> List[TcCommand]:
    """
    Build the command removing netem from an interface.

    Deleting the root qdisc removes both the plain and the filtered setup.
    Running it against a clean interface fails inside `tc`, not here.

    Returns:
        One command: `qdisc del dev <interface> root netem`
    """
    return [["qdisc", "del", "dev", interface, "root", "netem"]]


def build_commands(
    interface: str,
    netem_args: Sequence[str],
    destination_ip: Optional[str] = None
) -> List[TcCommand]:
    """Build start commands, filtered when a destination address is given."""
    if destination_ip:
        return build_start_filtered(interface, netem_args, destination_ip)
    return build_start(interface, netem_args)
