#!/usr/bin/env python3

# This file is part of netifcfg. See LICENSE file for license information.

import argparse
import logging
import sys

from netifcfg import distros, log, stages, util, version
from netifcfg.net import identity
from netifcfg.net.ifcfg import ValidationError
from netifcfg.net.renderer import Renderer

LOG = logging.getLogger(__name__)


def parse_identifier(value):
    """Digit-only arguments address an interface by sequence index."""
    if value.isdigit():
        return int(value)
    return value


def _load_config(fname):
    try:
        return stages.read_interfaces_config(fname)
    except (OSError, ValueError) as e:
        util.error(str(e))
        return None


def handle_resolve(name, args):
    try:
        print(identity.resolve(parse_identifier(args.identifier)))
    except (identity.ResolutionError, ValidationError) as e:
        return util.error(str(e))
    return 0


def handle_render(name, args):
    cfg = _load_config(args.config)
    if cfg is None:
        return 1
    try:
        osfamily = args.osfamily or distros.from_system().osfamily
        distro_cls = distros.fetch(osfamily)
    except distros.UnsupportedPlatformError as e:
        return util.error(str(e))
    renderer = Renderer(
        {
            "flavor": distro_cls.renderer_flavor,
            "templates_dir": cfg.get("templates_dir"),
        }
    )
    failures = 0
    for entry in cfg["interfaces"]:
        params = dict(entry)
        identifier = params.pop("interface")
        try:
            record, path = stages.build_configuration(
                identifier, params, osfamily=osfamily
            )
        except (identity.ResolutionError, ValidationError) as e:
            util.error("%s: %s" % (identifier, e), fmt="Error rendering {}")
            failures += 1
            continue
        print("# %s" % path)
        print(renderer.render(record))
    return 1 if failures else 0


def handle_apply(name, args):
    cfg = _load_config(args.config)
    if cfg is None:
        return 1
    LOG.debug(
        "Applying %d interfaces from %s", len(cfg["interfaces"]), args.config
    )
    try:
        distro = distros.from_system()
        results = stages.apply_interfaces(
            cfg["interfaces"],
            distro,
            target=args.target,
            dry_run=args.dry_run,
            restart=cfg["network_service_restart"] and not args.no_restart,
            disable_network_manager=cfg["disable_network_manager"],
            renderer=Renderer(
                {
                    "flavor": distro.renderer_flavor,
                    "templates_dir": cfg.get("templates_dir"),
                }
            ),
        )
    except (OSError, ValueError) as e:
        return util.error(str(e))
    for result in results:
        if result.failed:
            print("%s: failed (%s)" % (result.identifier, result.error))
        else:
            print(
                "%s: %s"
                % (result.path, "changed" if result.changed else "unchanged")
            )
    return 1 if any(r.failed for r in results) else 0


def get_parser(parser=None):
    if not parser:
        parser = argparse.ArgumentParser(
            prog="netifcfg",
            description="Manage ifcfg network interface files.",
        )
    parser.add_argument(
        "--version",
        "-v",
        action="version",
        version="%(prog)s " + (version.version_string()),
        help="Show program's version number and exit.",
    )
    parser.add_argument(
        "--debug",
        "-d",
        action="store_true",
        help="Show additional pre-action logging (default: %(default)s).",
        default=False,
    )
    subparsers = parser.add_subparsers(title="Subcommands", dest="subcommand")
    subparsers.required = True

    parser_resolve = subparsers.add_parser(
        "resolve", help="Print the interface name an identifier maps to."
    )
    parser_resolve.add_argument(
        "identifier",
        help="Sequence index, hardware address or interface name.",
    )
    parser_resolve.set_defaults(action=("resolve", handle_resolve))

    parser_render = subparsers.add_parser(
        "render", help="Print the ifcfg files for an interface description."
    )
    parser_render.add_argument(
        "-c",
        "--config",
        required=True,
        help="Path to the yaml interface description.",
    )
    parser_render.add_argument(
        "--osfamily",
        choices=sorted(distros.FAMILY_MODULES),
        default=None,
        help="Render for this osfamily instead of the running system's.",
    )
    parser_render.set_defaults(action=("render", handle_render))

    parser_apply = subparsers.add_parser(
        "apply", help="Write the ifcfg files and restart the network."
    )
    parser_apply.add_argument(
        "-c",
        "--config",
        required=True,
        help="Path to the yaml interface description.",
    )
    parser_apply.add_argument(
        "--target",
        default=None,
        help="Root directory to write the ifcfg files under.",
    )
    parser_apply.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        help="Report what would change without writing anything.",
    )
    parser_apply.add_argument(
        "--no-restart",
        action="store_true",
        default=False,
        help="Do not restart the network service after changes.",
    )
    parser_apply.set_defaults(action=("apply", handle_apply))
    return parser


def main(sysv_args=None):
    log.configure_root_logger()
    if sysv_args is None:
        sysv_args = sys.argv[1:]
    parser = get_parser()
    args = parser.parse_args(args=sysv_args)

    log.setup_basic_logging(logging.DEBUG if args.debug else logging.WARNING)

    # Subparsers.required = True and each subparser sets action=(name, functor)
    (name, functor) = args.action
    return functor(name, args)


if __name__ == "__main__":
    sys.exit(main())
