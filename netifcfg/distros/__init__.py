# This file is part of netifcfg. See LICENSE file for license information.

import abc
import importlib
import logging
import os
import stat
from typing import Optional, Tuple, Type

from netifcfg import subp, util

OSFAMILIES = {
    "redhat": [
        "almalinux",
        "centos",
        "cloudlinux",
        "eurolinux",
        "miraclelinux",
        "oracle",
        "ol",
        "redhat",
        "rocky",
        "scientific",
        "virtuozzo",
    ],
    "suse": [
        "opensuse",
        "opensuse-leap",
        "opensuse-microos",
        "opensuse-tumbleweed",
        "sle_hpc",
        "sles",
        "suse",
    ],
}

# Directory holding the ifcfg files of each family
SYSCONFIG_DIRS = {
    "redhat": "/etc/sysconfig/network-scripts",
    "suse": "/etc/sysconfig/network",
}

# Module under netifcfg.distros implementing each family
FAMILY_MODULES = {
    "redhat": "rhel",
    "suse": "opensuse",
}

LOG = logging.getLogger(__name__)


class UnsupportedPlatformError(ValueError):
    """Raised when ifcfg files can not be managed on this platform."""


def family_for(distro_name: str) -> Optional[str]:
    for family, names in OSFAMILIES.items():
        if distro_name in names:
            return family
    return None


def base_path_for_family(family: str) -> str:
    """Return the directory where family keeps its ifcfg files."""
    try:
        return SYSCONFIG_DIRS[family]
    except KeyError as e:
        raise UnsupportedPlatformError(
            "No ifcfg directory known for osfamily {}".format(family)
        ) from e


class Distro(metaclass=abc.ABCMeta):
    init_cmd = ["service"]  # systemctl, service etc
    network_service = "network"
    network_manager_service = "NetworkManager"
    osfamily: str
    # Flavor of the ifcfg syntax, see net.renderer
    renderer_flavor: str
    # Inclusive range of supported major releases, None for open ended
    supported_releases: Tuple[Optional[int], Optional[int]] = (None, None)

    def __init__(self, name, version=""):
        self.name = name
        self.version = version or ""

    def __repr__(self):
        return "%s(name=%r, version=%r)" % (
            self.__class__.__name__,
            self.name,
            self.version,
        )

    @property
    def sysconfig_dir(self) -> str:
        return base_path_for_family(self.osfamily)

    @property
    def major_release(self) -> Optional[int]:
        return util.safe_int(self.version.split(".")[0])

    def check_supported(self):
        """Fail unless this release can be configured through ifcfg files.

        @raises: UnsupportedPlatformError
        """
        if self.osfamily not in SYSCONFIG_DIRS:
            raise UnsupportedPlatformError(
                "Distro %s (osfamily %s) is not supported"
                % (self.name, self.osfamily)
            )
        low, high = self.supported_releases
        major = self.major_release
        if major is None:
            if low is None and high is None:
                return
            raise UnsupportedPlatformError(
                "Unable to determine the release of %s from '%s'"
                % (self.name, self.version)
            )
        if (low is not None and major < low) or (
            high is not None and major > high
        ):
            raise UnsupportedPlatformError(
                "%s release %s is not supported (supported: %s to %s)"
                % (self.name, self.version, low or "any", high or "latest")
            )

    @staticmethod
    def uses_systemd():
        """Wrapper to report whether this distro uses systemd or sysvinit."""
        return uses_systemd()

    @classmethod
    def manage_service(
        cls, action: str, service: str, *extra_args: str, rcs=None
    ):
        """
        Perform the requested action on a service. This handles the common
        'systemctl' and 'service' cases and may be overridden in subclasses
        as necessary.
        May raise ProcessExecutionError
        """
        init_cmd = cls.init_cmd
        if cls.uses_systemd() or "systemctl" in init_cmd:
            init_cmd = ["systemctl"]
            cmds = {
                "stop": ["stop", service],
                "start": ["start", service],
                "enable": ["enable", service],
                "disable": ["disable", service],
                "restart": ["restart", service],
                "status": ["status", service],
            }
        else:
            cmds = {
                "stop": [service, "stop"],
                "start": [service, "start"],
                "enable": [service, "start"],
                "disable": [service, "stop"],
                "restart": [service, "restart"],
                "status": [service, "status"],
            }
        cmd = list(init_cmd) + list(cmds[action]) + list(extra_args)
        return subp.subp(cmd, capture=True, rcs=rcs)

    def disable_network_manager(self) -> bool:
        """Stop and disable NetworkManager so it leaves ifcfg files alone.

        Return True if successful, otherwise return False
        """
        service = self.network_manager_service
        for action in ("stop", "disable"):
            try:
                self.manage_service(action, service)
            except subp.ProcessExecutionError:
                util.logexc(LOG, "Failed to %s %s", action, service)
                return False
        LOG.info("Disabled %s", service)
        return True

    def restart_network_service(self):
        """Restart the service that reads the ifcfg files.

        May raise ProcessExecutionError
        """
        LOG.info("Restarting %s service", self.network_service)
        return self.manage_service("restart", self.network_service)


def fetch(family: str) -> Type[Distro]:
    if family not in FAMILY_MODULES:
        raise UnsupportedPlatformError(
            "No distribution found for osfamily {}".format(family)
        )
    mod = importlib.import_module(
        "%s.%s" % (__name__, FAMILY_MODULES[family])
    )
    return getattr(mod, "Distro")


def from_system() -> Distro:
    """Return a Distro for the running system.

    @raises: UnsupportedPlatformError when the distro is not in a known
        osfamily.
    """
    name, version = util.get_linux_distro()
    family = family_for(name)
    if family is None:
        raise UnsupportedPlatformError(
            "Distro '%s' is not part of a supported osfamily (%s)"
            % (name or "unknown", ", ".join(sorted(OSFAMILIES)))
        )
    cls = fetch(family)
    LOG.debug("Detected %s %s (osfamily %s)", name, version, family)
    return cls(name, version)


def uses_systemd():
    try:
        res = os.lstat("/run/systemd/system")
        return stat.S_ISDIR(res.st_mode)
    except OSError:
        return False
