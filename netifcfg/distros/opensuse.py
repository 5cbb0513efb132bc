# This file is part of netifcfg. See LICENSE file for license information.

from netifcfg import distros


class Distro(distros.Distro):
    osfamily = "suse"
    renderer_flavor = "suse"
    # wicked installs network.service as an alias of itself
    network_service = "network"
    supported_releases = (12, None)

    def check_supported(self):
        # Tumbleweed and MicroOS are rolling, VERSION_ID is a date
        if self.name in ("opensuse-tumbleweed", "opensuse-microos"):
            return
        super().check_supported()
