# This file is part of netifcfg. See LICENSE file for license information.
"""Normalize interface parameters into a resolved ifcfg record.

A record is built once from the caller supplied parameters and is never
changed afterwards. Every parameter is validated up front; a single bad
value aborts the whole record.
"""

import logging
import os
import re
from enum import Enum
from typing import Any, Mapping, NamedTuple, Optional, Tuple

from netifcfg import distros, net

LOG = logging.getLogger(__name__)

VALID_STATES = ("up", "down")

# state -> value of ONBOOT (primary) or ONPARENT (alias)
BOOT_FLAGS = {"up": "yes", "down": "no"}

# The designated booleans and their defaults
BOOL_FIELDS = {
    "is_ethernet": True,
    "ipv6_init": False,
    "ipv6_autoconf": False,
    "ipv6_peer_dns": False,
    "user_control": False,
    "check_link_down": False,
}

# Toggles that follow the same strict boolean rule
TOGGLE_FIELDS = {
    "is_alias": False,
    "manage_hwaddr": True,
    "restart": True,
}

STR_FIELDS = (
    "ip_address",
    "netmask",
    "mac_address",
    "gateway",
    "ipv6_address",
    "ipv6_gateway",
    "dhcp_hostname",
    "ethtool_opts",
    "bonding_opts",
    "bridge",
    "scope",
    "link_type",
    "dns_primary",
    "dns_secondary",
    "domain",
    "zone",
)

# field -> smallest accepted value
INT_FIELDS = {
    "mtu": 1,
    "vlan_id": 0,
    "metric": 0,
}

# Handed to the renderer untouched, any scalar is accepted
PASSTHROUGH_FIELDS = ("link_delay", "default_route")

KNOWN_FIELDS = frozenset(
    ("state", "boot_protocol", "peer_dns", "alias_id")
    + tuple(BOOL_FIELDS)
    + tuple(TOGGLE_FIELDS)
    + STR_FIELDS
    + tuple(INT_FIELDS)
    + PASSTHROUGH_FIELDS
)


class ValidationError(ValueError):
    """Raised when a parameter violates its type or value constraint."""

    def __init__(self, field: str, value: Any, expected: str):
        self.field = field
        self.value = value
        self.expected = expected
        super().__init__(
            "Invalid value for %s: %r (expected %s)" % (field, value, expected)
        )


class RecordShape(Enum):
    """Primary interfaces boot with the system, aliases with their parent."""

    PRIMARY = "primary"
    ALIAS = "alias"

    def __str__(self):  # pylint: disable=invalid-str-returned
        return self.value


class InterfaceConfig(NamedTuple):
    name: str
    state: str
    shape: RecordShape
    boot_flag: str
    file_path: str
    is_ethernet: bool = True
    ip_address: Optional[str] = None
    netmask: Optional[str] = None
    mac_address: Optional[str] = None
    gateway: Optional[str] = None
    ipv6_address: Optional[str] = None
    ipv6_gateway: Optional[str] = None
    ipv6_init: bool = False
    ipv6_autoconf: bool = False
    ipv6_peer_dns: bool = False
    boot_protocol: str = "none"
    user_control: bool = False
    mtu: Optional[int] = None
    dhcp_hostname: Optional[str] = None
    ethtool_opts: Optional[str] = None
    bonding_opts: Optional[str] = None
    bridge: Optional[str] = None
    link_delay: Any = None
    scope: Optional[str] = None
    check_link_down: bool = False
    default_route: Any = None
    link_type: Optional[str] = None
    dns_primary: Optional[str] = None
    dns_secondary: Optional[str] = None
    domain: Optional[str] = None
    vlan_id: Optional[int] = None
    zone: Optional[str] = None
    metric: Optional[int] = None
    peer_dns: Optional[bool] = None
    manage_hwaddr: bool = True
    restart: bool = True

    @property
    def is_alias(self) -> bool:
        return self.shape is RecordShape.ALIAS

    @property
    def onboot(self) -> Optional[str]:
        if self.shape is RecordShape.PRIMARY:
            return self.boot_flag
        return None

    @property
    def onparent(self) -> Optional[str]:
        if self.shape is RecordShape.ALIAS:
            return self.boot_flag
        return None


def _check_bool(field, value):
    if value is not True and value is not False:
        raise ValidationError(field, value, "true or false")
    return value


def _check_str(field, value):
    if value is None or isinstance(value, str):
        return value
    raise ValidationError(field, value, "a string")


def _check_int(field, value, minimum):
    if value is None:
        return value
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(field, value, "an integer")
    if value < minimum:
        raise ValidationError(field, value, "an integer >= %d" % minimum)
    return value


def _check_passthrough(field, value):
    if value is None or isinstance(value, (str, int)):
        return value
    raise ValidationError(field, value, "a string, integer or boolean")


def validate_state(state) -> str:
    if not isinstance(state, str) or state not in VALID_STATES:
        raise ValidationError("state", state, "one of 'up' or 'down'")
    return state


def normalize_dns(
    dns_primary: Optional[str], dns_secondary: Optional[str]
) -> Tuple[Optional[str], Optional[str]]:
    """Promote a lone secondary nameserver to primary.

    >>> normalize_dns(None, "8.8.8.8")
    ('8.8.8.8', None)
    """
    if dns_secondary and not dns_primary:
        return dns_secondary, None
    return dns_primary, dns_secondary


def boot_flag_for(state: str) -> str:
    return BOOT_FLAGS[validate_state(state)]


def alias_name(name: str, alias_id=None) -> str:
    """Return the device name of an alias on interface name.

    The label is taken from alias_id, ``eth0`` with ``1`` is ``eth0:1``,
    or from name itself when it already carries one.
    """
    if alias_id is None:
        if ":" not in name:
            raise ValidationError(
                "alias_id", alias_id, "an alias label for %s" % name
            )
        return name
    if isinstance(alias_id, bool) or not isinstance(alias_id, (str, int)):
        raise ValidationError("alias_id", alias_id, "a label or a number")
    label = str(alias_id)
    if not label or label.startswith("-") or re.search(r"[:\s/]", label):
        raise ValidationError("alias_id", alias_id, "a label or a number")
    if ":" in name:
        raise ValidationError(
            "alias_id", alias_id, "unset, %s is already an alias" % name
        )
    return "%s:%s" % (name, label)


def ifcfg_path(base_dir: str, name: str, vlan_id: Optional[int] = None):
    """Return the ifcfg file path for interface name.

    Vlan interfaces get a '.<vlan_id>' suffix, ``ifcfg-eth0.10``. Aliases keep
    their label, ``ifcfg-eth0:1``.
    """
    filename = "ifcfg-%s" % name
    if vlan_id is not None:
        filename += ".%d" % vlan_id
    return os.path.join(base_dir, filename)


def normalize(
    name: str, params: Mapping[str, Any], *, osfamily: str = "redhat"
) -> InterfaceConfig:
    """Validate params and fill in defaults for interface name.

    @param name: canonical interface name as returned by identity.resolve.
    @param params: mapping of interface parameters, see KNOWN_FIELDS.
    @param osfamily: selects the directory the ifcfg file lives in.
    @raises: ValidationError on the first invalid parameter.
    """
    if not name or not isinstance(name, str):
        raise ValidationError("name", name, "a non-empty interface name")
    unknown = sorted(set(params) - KNOWN_FIELDS)
    if unknown:
        raise ValidationError(unknown[0], params[unknown[0]], "a known key")

    fields: dict = {}
    for key, default in BOOL_FIELDS.items():
        fields[key] = _check_bool(key, params.get(key, default))
    for key, default in TOGGLE_FIELDS.items():
        fields[key] = _check_bool(key, params.get(key, default))
    state = validate_state(params.get("state"))

    for key in STR_FIELDS:
        fields[key] = _check_str(key, params.get(key))
    for key, minimum in INT_FIELDS.items():
        fields[key] = _check_int(key, params.get(key), minimum)
    for key in PASSTHROUGH_FIELDS:
        fields[key] = _check_passthrough(key, params.get(key))
    if params.get("peer_dns") is not None:
        fields["peer_dns"] = _check_bool("peer_dns", params["peer_dns"])
    boot_protocol = _check_str("boot_protocol", params.get("boot_protocol"))
    fields["boot_protocol"] = boot_protocol or "none"

    mac = fields["mac_address"]
    if mac is not None:
        if not net.is_mac_address(mac):
            raise ValidationError("mac_address", mac, "aa:bb:cc:dd:ee:ff")
        fields["mac_address"] = mac.lower()

    fields["dns_primary"], fields["dns_secondary"] = normalize_dns(
        fields["dns_primary"], fields["dns_secondary"]
    )

    alias_id = params.get("alias_id")
    if fields.pop("is_alias"):
        shape = RecordShape.ALIAS
        name = alias_name(name, alias_id)
    elif alias_id is not None:
        raise ValidationError(
            "alias_id", alias_id, "unset on a primary interface"
        )
    else:
        shape = RecordShape.PRIMARY

    file_path = ifcfg_path(
        distros.base_path_for_family(osfamily), name, fields["vlan_id"]
    )
    record = InterfaceConfig(
        name=name,
        state=state,
        shape=shape,
        boot_flag=boot_flag_for(state),
        file_path=file_path,
        **fields,
    )
    LOG.debug(
        "Normalized %s interface %s (state=%s) for %s",
        shape,
        name,
        state,
        file_path,
    )
    return record
