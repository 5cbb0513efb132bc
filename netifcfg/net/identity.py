# This file is part of netifcfg. See LICENSE file for license information.
"""Map interface identifiers to canonical interface names.

An interface may be addressed three ways:

 * by sequence index, the position of the device in creation order. This is
   how virtualized deployments refer to their nics.
 * by hardware address, ``aa:bb:cc:dd:ee:ff``.
 * by literal name, ``eth0`` or ``eth0:1`` for an alias.
"""

import logging
from typing import Callable, NamedTuple, Optional, Union

from netifcfg import net
from netifcfg.net.ifcfg import ValidationError

LOG = logging.getLogger(__name__)


class ResolutionError(LookupError):
    """Raised when an identifier does not map to any interface."""

    def __init__(self, identifier, reason):
        self.identifier = identifier
        self.reason = reason
        super().__init__("%s: %s" % (reason, identifier))


class SequenceIndex(NamedTuple):
    index: int

    def __str__(self):
        return str(self.index)


class HardwareAddress(NamedTuple):
    address: str

    def __str__(self):
        return self.address


class LiteralName(NamedTuple):
    name: str

    def __str__(self):
        return self.name


Identifier = Union[SequenceIndex, HardwareAddress, LiteralName]
IDENTIFIER_TYPES = (SequenceIndex, HardwareAddress, LiteralName)

# YAML 1.1 reads an unquoted all-digit mac, 10:20:30:40:50:59, as a base 60
# integer. No host has this many nics, so larger values are refused.
MAX_SEQUENCE_INDEX = 4095


def classify(value) -> Identifier:
    """Turn a raw identifier from the interface description into a variant.

    @raises: ValidationError when value can not identify an interface.
    """
    if isinstance(value, IDENTIFIER_TYPES):
        return value
    # bool is an int subclass, but 'interface: yes' is surely a typo
    if isinstance(value, bool):
        raise ValidationError(
            "interface", value, "an index, a mac address or a name"
        )
    if isinstance(value, int):
        if value < 0:
            raise ValidationError(
                "interface", value, "a non-negative sequence index"
            )
        if value > MAX_SEQUENCE_INDEX:
            raise ValidationError(
                "interface",
                value,
                "a sequence index up to %d, quote mac addresses in yaml"
                % MAX_SEQUENCE_INDEX,
            )
        return SequenceIndex(value)
    if isinstance(value, str) and value:
        if net.is_mac_address(value):
            return HardwareAddress(value.lower())
        return LiteralName(value)
    raise ValidationError(
        "interface", value, "an index, a mac address or a name"
    )


def resolve(
    identifier,
    *,
    mac_lookup: Optional[Callable[[str], Optional[str]]] = None,
    index_lookup: Optional[Callable[[int], Optional[str]]] = None,
) -> str:
    """Return the canonical interface name for identifier.

    @param identifier: an Identifier variant or a raw value accepted by
        classify.
    @param mac_lookup: callable mapping a mac to a name or None.
        Defaults to net.find_interface_name_from_mac.
    @param index_lookup: callable mapping a sequence index to a name or None.
        Defaults to net.find_interface_name_from_index.
    @raises: ResolutionError when no interface matches.
    """
    identifier = classify(identifier)
    if isinstance(identifier, SequenceIndex):
        lookup = index_lookup or net.find_interface_name_from_index
        name = lookup(identifier.index)
        if not name:
            raise ResolutionError(
                identifier.index, "No interface found at sequence index"
            )
    elif isinstance(identifier, HardwareAddress):
        lookup = mac_lookup or net.find_interface_name_from_mac
        name = lookup(identifier.address)
        if not name:
            raise ResolutionError(
                identifier.address,
                "No interface found for given hardware address",
            )
    else:
        name = identifier.name
    LOG.debug("Resolved interface identifier %r to %s", identifier, name)
    return name
