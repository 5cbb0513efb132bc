# This file is part of netifcfg. See LICENSE file for license information.

import logging
import os
import stat
import tempfile

from netifcfg import util

_DEF_PERMS = 0o644
LOG = logging.getLogger(__name__)


def write_file(
    filename, content, mode=_DEF_PERMS, omode="wb", preserve_mode=False
):
    """open filename in mode omode, write content, set permissions to mode"""

    if preserve_mode:
        try:
            file_stat = os.stat(filename)
            mode = stat.S_IMODE(file_stat.st_mode)
        except OSError:
            pass

    tf = None
    try:
        dirname = os.path.dirname(filename)
        util.ensure_dir(dirname)
        tf = tempfile.NamedTemporaryFile(dir=dirname, delete=False, mode=omode)
        LOG.debug(
            "Atomically writing to file %s (via temporary file %s) - %s: [%o]"
            " %d bytes/chars",
            filename,
            tf.name,
            omode,
            mode,
            len(content),
        )
        tf.write(content)
        tf.close()
        os.chmod(tf.name, mode)
        os.rename(tf.name, filename)
    except Exception as e:
        if tf is not None:
            os.unlink(tf.name)
        raise e


def content_changed(filename, content) -> bool:
    """Return True unless filename exists and holds exactly content."""
    if not os.path.exists(filename):
        return True
    return util.load_text_file(filename) != content


def write_if_changed(filename, content, mode=_DEF_PERMS) -> bool:
    """Atomically replace filename with content unless it already holds it.

    @return: True when the file was created or its content changed.
    """
    if not content_changed(filename, content):
        LOG.debug("%s is up to date, not rewriting", filename)
        return False
    write_file(filename, content, mode=mode, omode="w", preserve_mode=True)
    return True
