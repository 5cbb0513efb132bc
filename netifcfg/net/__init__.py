# This file is part of netifcfg. See LICENSE file for license information.

import errno
import logging
import os
import re
from typing import List, Optional, Tuple

from netifcfg import util

LOG = logging.getLogger(__name__)
SYS_CLASS_NET = "/sys/class/net/"
MAC_ADDRESS_RE = re.compile(r"^([0-9a-f]{2}:){5}[0-9a-f]{2}$", re.I)


def natural_sort_key(s, _nsre=re.compile("([0-9]+)")):
    """Sorting for Humans: natural sort order. Can be use as the key to sort
    functions.
    This will sort ['eth0', 'ens3', 'ens10', 'ens12', 'ens8', 'ens0'] as
    ['ens0', 'ens3', 'ens8', 'ens10', 'ens12', 'eth0'] instead of the simple
    python way which will produce ['ens0', 'ens10', 'ens12', 'ens3', 'ens8',
    'eth0']."""
    return [
        int(text) if text.isdigit() else text.lower()
        for text in re.split(_nsre, s)
    ]


def is_mac_address(value) -> bool:
    """Return True when value is six colon separated hex octets."""
    if not isinstance(value, str):
        return False
    return bool(MAC_ADDRESS_RE.match(value))


def get_sys_class_path():
    """Simple function to return the global SYS_CLASS_NET."""
    return SYS_CLASS_NET


def sys_dev_path(devname, path=""):
    return get_sys_class_path() + devname + "/" + path


def read_sys_net(devname, path, on_enoent=None):
    dev_path = sys_dev_path(devname, path)
    try:
        contents = util.load_text_file(dev_path)
    except OSError as e:
        e_errno = getattr(e, "errno", None)
        if e_errno in (errno.ENOENT, errno.ENOTDIR, errno.EINVAL):
            if on_enoent is not None:
                return on_enoent(e)
        raise
    return contents.strip()


def read_sys_net_safe(iface, field):
    return read_sys_net(iface, field, on_enoent=lambda e: False)


def read_sys_net_int(iface, field):
    val = read_sys_net_safe(iface, field)
    if val is False:
        return None
    try:
        return int(val)
    except ValueError:
        return None


def is_bridge(devname):
    return os.path.exists(sys_dev_path(devname, "bridge"))


def is_bond(devname):
    return os.path.exists(sys_dev_path(devname, "bonding"))


def is_vlan(devname):
    uevent = str(read_sys_net_safe(devname, "uevent"))
    return "DEVTYPE=vlan" in uevent.splitlines()


def get_interface_mac(ifname):
    """Returns the string value of an interface's MAC Address"""
    path = "address"
    if os.path.isdir(sys_dev_path(ifname, "bonding_slave")):
        # for a bond slave, get the nic's hwaddress, not the address it
        # is using because its part of a bond.
        path = "bonding_slave/perm_hwaddr"
    return read_sys_net_safe(ifname, path)


def get_devicelist():
    try:
        devs = os.listdir(get_sys_class_path())
    except OSError as e:
        if e.errno == errno.ENOENT:
            devs = []
        else:
            raise
    return devs


def get_interfaces() -> List[Tuple[str, str]]:
    """Return list of interface tuples (name, mac)

    Loopback, bridges, bonds, vlans and devices without a usable mac are
    excluded."""
    ret = []
    zero_mac = ":".join(("00",) * 6)
    for name in get_devicelist():
        if name == "lo":
            continue
        if is_bridge(name):
            LOG.debug("Ignoring bridge interface: %s", name)
            continue
        if is_bond(name):
            LOG.debug("Ignoring bond interface: %s", name)
            continue
        if is_vlan(name):
            continue
        mac = get_interface_mac(name)
        # some devices may not have a mac (tun0)
        if not mac:
            LOG.debug("Ignoring interface without mac: %s", name)
            continue
        if mac == zero_mac:
            continue
        ret.append((name, mac))
    return ret


def get_interfaces_by_mac() -> dict:
    """Build a dictionary of {mac: name}."""
    ret: dict = {}
    for name, mac in get_interfaces():
        mac = mac.lower()
        if mac in ret:
            msg = "duplicate mac found! both '%s' and '%s' have mac '%s'." % (
                name,
                ret[mac],
                mac,
            )
            raise RuntimeError(msg)
        ret[mac] = name
    return ret


def find_interface_name_from_mac(mac: str) -> Optional[str]:
    for interface_mac, interface_name in get_interfaces_by_mac().items():
        if mac.lower() == interface_mac.lower():
            return interface_name
    return None


def get_interfaces_by_index() -> List[str]:
    """Return interface names in creation order.

    The kernel hands out ifindex values incrementally, so sorting on it
    reproduces the order in which the devices appeared. Names break ties
    for devices whose ifindex cannot be read."""

    def _order(name):
        ifindex = read_sys_net_int(name, "ifindex")
        if ifindex is None:
            ifindex = float("inf")
        return (ifindex, natural_sort_key(name))

    return sorted((name for name, _mac in get_interfaces()), key=_order)


def find_interface_name_from_index(index: int) -> Optional[str]:
    names = get_interfaces_by_index()
    if 0 <= index < len(names):
        return names[index]
    LOG.debug(
        "No interface at sequence index %s, found %d: %s",
        index,
        len(names),
        names,
    )
    return None
