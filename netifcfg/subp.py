# This file is part of netifcfg. See LICENSE file for license information.
"""Run service control commands."""

import collections
import logging
import os
import subprocess
import time
from typing import List

LOG = logging.getLogger(__name__)

SubpResult = collections.namedtuple("SubpResult", ["stdout", "stderr"])


class ProcessExecutionError(IOError):
    MESSAGE_TMPL = (
        "%(description)s\n"
        "Command: %(cmd)s\n"
        "Exit code: %(exit_code)s\n"
        "Reason: %(reason)s\n"
        "Stdout: %(stdout)s\n"
        "Stderr: %(stderr)s"
    )
    empty_attr = "-"

    def __init__(
        self,
        stdout=None,
        stderr=None,
        exit_code=None,
        cmd=None,
        reason=None,
        errno=None,
    ):
        self.cmd = cmd or self.empty_attr
        self.description = "Unexpected error while running command."
        self.exit_code = (
            exit_code if isinstance(exit_code, int) else self.empty_attr
        )
        self.stdout = self._indent_text(stdout)
        self.stderr = self._indent_text(stderr)
        self.reason = reason or self.empty_attr
        if errno:
            self.errno = errno
        IOError.__init__(
            self,
            self.MESSAGE_TMPL
            % {
                "description": self.description,
                "cmd": self.cmd,
                "exit_code": self.exit_code,
                "stdout": self.stdout,
                "stderr": self.stderr,
                "reason": self.reason,
            },
        )

    def _indent_text(self, text, indent_level=8):
        """Indent all but the first line of captured output."""
        if text is None:
            return self.empty_attr
        return text.rstrip("\n").replace("\n", "\n" + " " * indent_level)


def subp(args: List[str], *, rcs=None, capture=True) -> SubpResult:
    """Run a command and return its decoded output.

    :param args: command to run in a list. [cmd, arg1, arg2...]
    :param rcs:
        a list of allowed return codes.  If the command exits with a value
        not in this list, a ProcessExecutionError will be raised.
    :param capture:
        when True stdout and stderr are returned, otherwise they go to the
        terminal and (None, None) is returned.
    """
    if rcs is None:
        rcs = [0]
    LOG.debug(
        "Running command %s with allowed return codes %s (capture=%s)",
        args,
        rcs,
        capture,
    )
    pipe = subprocess.PIPE if capture else None
    try:
        before = time.monotonic()
        sp = subprocess.Popen(
            args, stdout=pipe, stderr=pipe, stdin=subprocess.DEVNULL
        )
        out, err = sp.communicate()
        total = time.monotonic() - before
        if total > 0.1:
            LOG.debug("%s took %.3ss to run", args, total)
    except OSError as e:
        raise ProcessExecutionError(
            cmd=args, reason=e, errno=e.errno, stdout="-", stderr="-"
        ) from e
    if out is not None:
        out = out.decode("utf-8", "replace")
    if err is not None:
        err = err.decode("utf-8", "replace")
    if sp.returncode not in rcs:
        raise ProcessExecutionError(
            stdout=out, stderr=err, exit_code=sp.returncode, cmd=args
        )
    return SubpResult(out, err)


def target_path(target=None, path=None):
    # return 'path' inside target, accepting target as None
    if target in (None, ""):
        target = "/"
    elif not isinstance(target, str):
        raise ValueError("Unexpected input for target: %s" % target)
    else:
        target = os.path.abspath(target)
        # abspath("//") returns "//" specifically for 2 slashes.
        if target.startswith("//"):
            target = target[1:]

    if not path:
        return target

    # os.path.join("/etc", "/foo") returns "/foo". Chomp all leading /.
    return os.path.join(target, path.lstrip("/"))
