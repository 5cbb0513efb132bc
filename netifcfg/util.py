# This file is part of netifcfg. See LICENSE file for license information.

import logging
import os
import re
import shlex
import sys
from functools import lru_cache
from typing import Mapping, Sequence, Union

import yaml

from netifcfg import type_utils

LOG = logging.getLogger(__name__)


def decode_binary(blob: Union[str, bytes], encoding="utf-8") -> str:
    # Converts a binary type into a text type using given encoding.
    return blob if isinstance(blob, str) else blob.decode(encoding=encoding)


def load_text_file(fname: Union[str, os.PathLike], *, quiet=False) -> str:
    LOG.debug("Reading from %s (quiet=%s)", fname, quiet)
    try:
        with open(fname, "rb") as ifh:
            contents = ifh.read()
    except FileNotFoundError:
        if not quiet:
            raise
        contents = b""
    LOG.debug("Read %s bytes from %s", len(contents), fname)
    return decode_binary(contents)


def safe_int(possible_int):
    try:
        return int(possible_int)
    except (ValueError, TypeError):
        return None


def chmod(path, mode):
    real_mode = safe_int(mode)
    if path and real_mode:
        os.chmod(path, real_mode)


def ensure_dir(path, mode=None):
    if not os.path.isdir(path):
        os.makedirs(path)
    chmod(path, mode)


def load_yaml(blob, default=None, allowed=(dict,)):
    loaded = default
    blob = decode_binary(blob)
    try:
        LOG.debug(
            "Attempting to load yaml from string "
            "of length %s with allowed root types %s",
            len(blob),
            allowed,
        )
        converted = yaml.safe_load(blob)
        if converted is None:
            LOG.debug("loaded blob returned None, returning default.")
            converted = default
        elif not isinstance(converted, allowed):
            # Yes this will just be caught, but thats ok for now...
            raise TypeError(
                "Yaml load allows %s root types, but got %s instead"
                % (allowed, type_utils.obj_name(converted))
            )
        loaded = converted
    except (yaml.YAMLError, TypeError, ValueError) as e:
        msg = "Failed loading yaml blob"
        mark = getattr(e, "context_mark", None) or getattr(
            e, "problem_mark", None
        )
        if mark:
            msg += (
                '. Invalid format at line {line} column {col}: "{err}"'.format(
                    line=mark.line + 1, col=mark.column + 1, err=e
                )
            )
        else:
            msg += ". {err}".format(err=e)
        LOG.warning(msg)
    return loaded


def read_conf(fname) -> dict:
    """Read a yaml interface description, raising if it is not a mapping."""
    contents = load_text_file(fname)
    loaded = load_yaml(contents, default=None)
    if loaded is None:
        raise ValueError("%s does not hold a yaml mapping" % fname)
    return loaded


def mergemanydict(sources: Sequence[Mapping]) -> dict:
    """Merge dicts, the first source holding a key wins.

    Nested mappings are merged recursively, other values are never
    replaced once set.
    """
    merged: dict = {}
    for cfg in sources:
        if not cfg:
            continue
        for key, value in cfg.items():
            if key not in merged:
                merged[key] = value
            elif isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = mergemanydict([merged[key], value])
    return merged


def load_shell_content(content, add_empty=False, empty_val=None):
    r"""Given shell like syntax (key=value\nkey2=value2\n) in content
    return the data in dictionary form.  If 'add_empty' is True
    then add entries in to the returned dictionary for 'VAR='
    variables.  Set their value to empty_val."""

    data = {}
    for line in shlex.split(content, comments=True):
        key, value = line.split("=", 1)
        if not value:
            value = empty_val
        if add_empty or value:
            data[key] = value

    return data


def _parse_redhat_release(release_file=None):
    """Return a dictionary of distro info fields from /etc/redhat-release.

    Dict keys will align with /etc/os-release keys:
        ID, VERSION_ID, VERSION_CODENAME
    """

    if not release_file:
        release_file = "/etc/redhat-release"
    if not os.path.exists(release_file):
        return {}
    redhat_release = load_text_file(release_file)
    redhat_regex = (
        r"(?P<name>.+) release (?P<version>[\d\.]+) "
        r"\((?P<codename>[^)]+)\)"
    )
    match = re.match(redhat_regex, redhat_release)
    if match:
        group = match.groupdict()
        group["name"] = group["name"].lower().partition(" linux")[0]
        if group["name"] == "red hat enterprise":
            group["name"] = "redhat"
        return {
            "ID": group["name"],
            "VERSION_ID": group["version"],
            "VERSION_CODENAME": group["codename"],
        }
    return {}


@lru_cache()
def get_linux_distro():
    """Return (distro_name, distro_version) of the running system.

    Both members are empty strings when nothing could be detected.
    """
    os_release = {}
    if os.path.exists("/etc/os-release"):
        os_release = load_shell_content(load_text_file("/etc/os-release"))
    if not os_release:
        os_release = _parse_redhat_release()
    if not os_release:
        LOG.warning("Unable to determine distribution")
        return ("", "")
    distro_name = os_release.get("ID", "")
    if distro_name == "rhel":
        distro_name = "redhat"
    return (distro_name, os_release.get("VERSION_ID", ""))


def logexc(
    log, msg, *args, log_level: int = logging.WARNING, exc_info=True
) -> None:
    log.log(log_level, msg, *args)
    log.debug(msg, exc_info=exc_info, *args)


def error(msg, rc=1, fmt="Error:\n{}", sys_exit=False):
    r"""Print error to stderr and return or exit

    @param msg: message to print
    @param rc: return code (default: 1)
    @param fmt: format string for putting message in (default: 'Error:\n {}')
    @param sys_exit: exit when called (default: false)
    """
    print(fmt.format(msg), file=sys.stderr)
    if sys_exit:
        sys.exit(rc)
    return rc
