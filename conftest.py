"""Global conftest.py

This conftest is used for unit tests in ``tests/unittests/``.

Any imports that are performed at the top-level here must be installed wherever
any of these tests run: that is to say, they must be listed in
``test-requirements.txt``.
"""
import os
from unittest import mock

import pytest

from netifcfg import net, util


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "allow_all_subp: allow tests to run real commands"
    )


@pytest.fixture(autouse=True, scope="function")
def cleanup_lru_cache():
    yield

    util.get_linux_distro.cache_clear()


class UnexpectedSubpError(BaseException):
    """Error thrown when subp.subp is unexpectedly used.

    We inherit from BaseException so it doesn't get silently swallowed
    by other error handlers.
    """


@pytest.fixture(autouse=True)
def disable_subp_usage(request):
    """
    Across all (pytest) tests, ensure that subp.subp is not invoked.

    Any test-local patching of ``netifcfg.subp.subp`` replaces this mock, so
    tests asserting on the commands run are written normally. To allow a
    test to really run commands, mark it::

        @pytest.mark.allow_all_subp
        def test_whoami(self):
            subp.subp(["whoami"])
    """
    if request.node.get_closest_marker("allow_all_subp") is not None:
        yield
        return

    def side_effect(args, *other_args, **kwargs):
        raise UnexpectedSubpError("Unexpectedly used subp.subp: %s" % args)

    with mock.patch("netifcfg.subp.subp", autospec=True) as m_subp:
        m_subp.side_effect = side_effect
        yield


@pytest.fixture
def sys_class_net(tmp_path):
    """Point netifcfg.net at a fake /sys/class/net.

    Returns a callable creating a device:
    ``add_device("eth0", mac="aa:bb:cc:dd:ee:ff", ifindex=2)``.
    """
    sys_dir = tmp_path / "sys" / "class" / "net"
    sys_dir.mkdir(parents=True)

    def add_device(name, mac=None, ifindex=None, devtype=None, bridge=False):
        dev_dir = sys_dir / name
        dev_dir.mkdir()
        if mac is not None:
            (dev_dir / "address").write_text(mac + "\n")
        if ifindex is not None:
            (dev_dir / "ifindex").write_text("%d\n" % ifindex)
        if devtype is not None:
            (dev_dir / "uevent").write_text("DEVTYPE=%s\n" % devtype)
        if bridge:
            (dev_dir / "bridge").mkdir()
        return dev_dir

    with mock.patch.object(
        net, "get_sys_class_path", return_value=str(sys_dir) + os.sep
    ):
        yield add_device
