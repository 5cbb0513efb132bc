# This file is part of netifcfg. See LICENSE file for license information.

import logging
import re

from netifcfg import settings, templater
from netifcfg.net.ifcfg import InterfaceConfig, RecordShape

LOG = logging.getLogger(__name__)


def _make_header(sep="#"):
    lines = [
        "Created by netifcfg automatically, do not edit.",
        "",
    ]
    for i in range(len(lines)):
        if lines[i]:
            lines[i] = sep + " " + lines[i]
        else:
            lines[i] = sep
    return "\n".join(lines)


def _quote_value(value):
    if re.search(r"\s", value):
        # This doesn't handle complex cases...
        if value.startswith('"') and value.endswith('"'):
            return value
        else:
            return '"%s"' % value
    else:
        return value


class Renderer:
    """Renders interface records in a /etc/sysconfig ifcfg format."""

    # Why does redhat prefer yes/no to true/false??
    _bool_map = {
        True: "yes",
        False: "no",
    }

    shape_templates = {
        RecordShape.PRIMARY: "ifcfg.tmpl",
        RecordShape.ALIAS: "ifcfg-alias.tmpl",
    }

    cfg_key_maps = {
        "rhel": {
            "mac_address": "HWADDR",
            "boot_flag": {
                RecordShape.PRIMARY: "ONBOOT",
                RecordShape.ALIAS: "ONPARENT",
            },
        },
        "suse": {
            "mac_address": "LLADDR",
            "boot_flag": {
                RecordShape.PRIMARY: "STARTMODE",
                RecordShape.ALIAS: "STARTMODE",
            },
        },
    }

    # STARTMODE speaks its own language
    suse_startmodes = {"yes": "auto", "no": "off"}

    def __init__(self, config=None):
        if not config:
            config = {}
        self.flavor = config.get("flavor", "rhel")
        if self.flavor not in self.cfg_key_maps:
            raise ValueError("Unknown ifcfg flavor '%s'" % self.flavor)
        self.templates_dir = settings.get_templates_dir(config)

    def _format(self, value):
        if value is None:
            return None
        if isinstance(value, bool):
            return self._bool_map[value]
        return _quote_value(str(value))

    def _boot_value(self, record: InterfaceConfig):
        if self.flavor == "suse":
            return self.suse_startmodes[record.boot_flag]
        return record.boot_flag

    def template_params(self, record: InterfaceConfig) -> dict:
        """Map a record onto the sysconfig keys used by the templates."""
        key_map = self.cfg_key_maps[self.flavor]
        link_type = record.link_type
        if link_type is None and record.is_ethernet:
            link_type = "Ethernet"
        hwaddr = None
        if record.manage_hwaddr:
            hwaddr = record.mac_address
        settings_map = {
            "DEVICE": record.name,
            "BOOTPROTO": record.boot_protocol,
            "TYPE": link_type,
            "IPADDR": record.ip_address,
            "NETMASK": record.netmask,
            "GATEWAY": record.gateway,
            "MTU": record.mtu,
            "BONDING_OPTS": record.bonding_opts,
            "ETHTOOL_OPTS": record.ethtool_opts,
            "IPV6INIT": record.ipv6_init,
            "IPV6_AUTOCONF": record.ipv6_autoconf,
            "IPV6ADDR": record.ipv6_address,
            "IPV6_DEFAULTGW": record.ipv6_gateway,
            "IPV6_PEERDNS": record.ipv6_peer_dns,
            "DHCP_HOSTNAME": record.dhcp_hostname,
            "PEERDNS": record.peer_dns,
            "DNS1": record.dns_primary,
            "DNS2": record.dns_secondary,
            "DOMAIN": record.domain,
            "BRIDGE": record.bridge,
            "LINKDELAY": record.link_delay,
            "SCOPE": record.scope,
            "DEFROUTE": record.default_route,
            "METRIC": record.metric,
            "ZONE": record.zone,
            "USERCTL": record.user_control,
            "NM_CONTROLLED": False,
        }
        params = {k: self._format(v) for k, v in settings_map.items()}
        params.update(
            {
                "header": _make_header(),
                "flavor": self.flavor,
                "hwaddr_key": key_map["mac_address"],
                "hwaddr": self._format(hwaddr),
                "boot_key": key_map["boot_flag"][record.shape],
                "boot_value": self._boot_value(record),
                "vlan": record.vlan_id is not None,
                "check_link_down": record.check_link_down,
            }
        )
        return params

    def render(self, record: InterfaceConfig) -> str:
        template = templater.find_template(
            self.templates_dir, self.shape_templates[record.shape]
        )
        LOG.debug(
            "Rendering %s record for %s with %s",
            record.shape,
            record.name,
            template,
        )
        content = templater.render_from_file(
            template, self.template_params(record)
        )
        return content.rstrip() + "\n"
