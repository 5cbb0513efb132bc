# This file is part of netifcfg. See LICENSE file for license information.
"""Turn interface descriptions into ifcfg files on disk.

The flow for every interface is identify, normalize, render and write.
Failures of one interface are reported in its ApplyResult and never stop
the others. The network service is restarted at most once per run.
"""

import logging
from typing import Any, Iterable, List, Mapping, NamedTuple, Optional, Tuple

from netifcfg import atomic_helper, net, settings, subp, util
from netifcfg.config.schema import validate_interfaces_config
from netifcfg.net import identity
from netifcfg.net.ifcfg import InterfaceConfig, ValidationError, normalize
from netifcfg.net.renderer import Renderer

LOG = logging.getLogger(__name__)


class ApplyResult(NamedTuple):
    identifier: Any
    record: Optional[InterfaceConfig] = None
    path: Optional[str] = None
    changed: bool = False
    error: Optional[Exception] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


def read_interfaces_config(fname) -> dict:
    """Load and validate an interface description document.

    The returned mapping has the builtin defaults filled in.

    @raises: ValueError when the file is not a yaml mapping,
        SchemaValidationError when it does not match the schema.
    """
    cfg = util.read_conf(fname)
    validate_interfaces_config(cfg)
    return util.mergemanydict([cfg, settings.CFG_BUILTIN])


def build_configuration(
    identifier,
    params: Mapping[str, Any],
    *,
    osfamily: str = "redhat",
    mac_lookup=None,
    index_lookup=None,
    hwaddr_lookup=None,
) -> Tuple[InterfaceConfig, str]:
    """Resolve identifier and normalize params into a record.

    Primary interfaces always carry a hardware address. Unless params hold
    one it is the address the interface was identified by, or the one
    hwaddr_lookup (default net.get_interface_mac) reports for its name.
    Records that do not manage the hardware address are exempt.

    @return: tuple of the record and the path of its ifcfg file.
    @raises: ResolutionError, ValidationError
    """
    ident = identity.classify(identifier)
    name = identity.resolve(
        ident, mac_lookup=mac_lookup, index_lookup=index_lookup
    )
    record = normalize(name, params, osfamily=osfamily)
    if record.is_alias or not record.manage_hwaddr or record.mac_address:
        return record, record.file_path

    if isinstance(ident, identity.HardwareAddress):
        mac = ident.address
    else:
        mac = (hwaddr_lookup or net.get_interface_mac)(name)
    if not mac or not net.is_mac_address(mac):
        raise ValidationError(
            "mac_address",
            None,
            "a hardware address, none is known for %s" % name,
        )
    record = record._replace(mac_address=mac.lower())
    return record, record.file_path


def apply_interface(
    entry: Mapping[str, Any],
    osfamily: str,
    renderer: Renderer,
    *,
    target=None,
    dry_run=False,
    mac_lookup=None,
    index_lookup=None,
    hwaddr_lookup=None,
) -> ApplyResult:
    """Write the ifcfg file for one interface entry.

    Identification and validation problems are logged and returned in the
    result, file system errors propagate.
    """
    params = dict(entry)
    identifier = params.pop("interface", None)
    try:
        record, path = build_configuration(
            identifier,
            params,
            osfamily=osfamily,
            mac_lookup=mac_lookup,
            index_lookup=index_lookup,
            hwaddr_lookup=hwaddr_lookup,
        )
    except (identity.ResolutionError, ValidationError) as e:
        LOG.error("Skipping interface %s: %s", identifier, e)
        return ApplyResult(identifier, error=e)

    content = renderer.render(record)
    out_path = subp.target_path(target, path)
    if dry_run:
        changed = atomic_helper.content_changed(out_path, content)
        LOG.info(
            "Dry run, not writing %s (%s)",
            out_path,
            "changed" if changed else "unchanged",
        )
    else:
        changed = atomic_helper.write_if_changed(out_path, content)
        if changed:
            LOG.info("Wrote %s for interface %s", out_path, record.name)
    return ApplyResult(identifier, record, out_path, changed)


def apply_interfaces(
    entries: Iterable[Mapping[str, Any]],
    distro,
    *,
    target=None,
    dry_run=False,
    restart=True,
    disable_network_manager=True,
    renderer: Optional[Renderer] = None,
    mac_lookup=None,
    index_lookup=None,
    hwaddr_lookup=None,
) -> List[ApplyResult]:
    """Apply every interface entry on distro.

    @param entries: interface mappings, each holding an 'interface'
        identifier next to its parameters.
    @param distro: netifcfg.distros.Distro to configure.
    @param target: root directory prefixed to every written path.
    @param dry_run: render and compare only, never write or restart.
    @param restart: allow restarting the network service.
    @param disable_network_manager: stop NetworkManager before writing.
    @raises: UnsupportedPlatformError before anything is touched when
        distro can not be managed.
    """
    distro.check_supported()
    if renderer is None:
        renderer = Renderer({"flavor": distro.renderer_flavor})
    if disable_network_manager and not dry_run:
        distro.disable_network_manager()

    results = [
        apply_interface(
            entry,
            distro.osfamily,
            renderer,
            target=target,
            dry_run=dry_run,
            mac_lookup=mac_lookup,
            index_lookup=index_lookup,
            hwaddr_lookup=hwaddr_lookup,
        )
        for entry in entries
    ]

    pending = [
        r.record.name for r in results if r.changed and r.record.restart
    ]
    if not pending:
        LOG.debug("No changed interface requests a network restart")
    elif dry_run:
        LOG.info(
            "Dry run, not restarting network for %s", ", ".join(pending)
        )
    elif not restart:
        LOG.info(
            "Network restart disabled, changes pending for %s",
            ", ".join(pending),
        )
    else:
        distro.restart_network_service()
    failed = [r for r in results if r.failed]
    if failed:
        LOG.warning(
            "%d of %d interfaces could not be configured",
            len(failed),
            len(results),
        )
    return results
