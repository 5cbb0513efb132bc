# This file is part of netifcfg. See LICENSE file for license information.

from netifcfg import distros


class Distro(distros.Distro):
    # See: https://access.redhat.com/documentation/en-US/Red_Hat_Enterprise_Linux/7/html/Networking_Guide/sec-Network_Configuration_Using_sysconfig_Files.html # noqa
    osfamily = "redhat"
    renderer_flavor = "rhel"
    network_service = "network"
    # network-scripts are gone from EL10 onwards
    supported_releases = (6, 9)
