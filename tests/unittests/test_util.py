# This file is part of netifcfg. See LICENSE file for license information.

import logging
from unittest import mock

import pytest

from netifcfg import util

M_PATH = "netifcfg.util."


class TestLoadYaml:
    def test_mapping(self):
        assert {"a": [1, 2]} == util.load_yaml("a: [1, 2]\n")

    def test_empty_returns_default(self):
        assert {} == util.load_yaml("", default={})

    def test_wrong_root_type(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert util.load_yaml("- a\n- b\n") is None
        assert "Yaml load allows" in caplog.text

    def test_invalid_yaml_reports_position(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert "dflt" == util.load_yaml("a: [1\nb: 2\n", default="dflt")
        assert "Failed loading yaml blob. Invalid format at line" in (
            caplog.text
        )

    def test_bytes(self):
        assert {"a": 1} == util.load_yaml(b"a: 1\n")


class TestReadConf:
    def test_mapping(self, tmp_path):
        conf = tmp_path / "conf.yaml"
        conf.write_text("interfaces: []\n")
        assert {"interfaces": []} == util.read_conf(str(conf))

    def test_empty_file(self, tmp_path):
        conf = tmp_path / "conf.yaml"
        conf.write_text("")
        with pytest.raises(ValueError):
            util.read_conf(str(conf))


class TestMergeManyDict:
    def test_first_source_wins(self):
        merged = util.mergemanydict(
            [
                {"a": 1, "b": {"x": 1}},
                {"a": 2, "b": {"x": 3, "y": 2}, "c": 3},
                None,
            ]
        )
        assert {"a": 1, "b": {"x": 1, "y": 2}, "c": 3} == merged

    def test_falsy_values_are_kept(self):
        merged = util.mergemanydict([{"flag": False}, {"flag": True}])
        assert {"flag": False} == merged


class TestLoadShellContent:
    def test_quoted_values_and_comments(self):
        content = 'ID="rhel"\n# comment\nVERSION_ID="8.9"\nEMPTY=\n'
        assert {"ID": "rhel", "VERSION_ID": "8.9"} == util.load_shell_content(
            content
        )

    def test_add_empty(self):
        assert {"EMPTY": None} == util.load_shell_content(
            "EMPTY=\n", add_empty=True
        )


class TestGetLinuxDistro:
    @mock.patch(M_PATH + "load_text_file")
    @mock.patch(M_PATH + "os.path.exists", return_value=True)
    def test_os_release(self, m_exists, m_load_text_file):
        m_load_text_file.return_value = 'ID="rhel"\nVERSION_ID="8.9"\n'
        assert ("redhat", "8.9") == util.get_linux_distro()

    @mock.patch(M_PATH + "load_text_file")
    @mock.patch(M_PATH + "os.path.exists", return_value=True)
    def test_suse_os_release(self, m_exists, m_load_text_file):
        m_load_text_file.return_value = 'ID="sles"\nVERSION_ID="15.5"\n'
        assert ("sles", "15.5") == util.get_linux_distro()

    @pytest.mark.parametrize(
        "release,expected",
        [
            ("CentOS Linux release 7.9.2009 (Core)", ("centos", "7.9.2009")),
            (
                "Red Hat Enterprise Linux Server release 6.10 (Santiago)",
                ("redhat", "6.10"),
            ),
        ],
    )
    @mock.patch(M_PATH + "load_text_file")
    @mock.patch(M_PATH + "os.path.exists")
    def test_redhat_release_fallback(
        self, m_exists, m_load_text_file, release, expected
    ):
        m_exists.side_effect = lambda path: path == "/etc/redhat-release"
        m_load_text_file.return_value = release
        assert expected == util.get_linux_distro()

    @mock.patch(M_PATH + "os.path.exists", return_value=False)
    def test_unknown(self, m_exists, caplog):
        assert ("", "") == util.get_linux_distro()
        assert "Unable to determine distribution" in caplog.text


class TestParseRedhatRelease:
    def test_missing_file(self, tmp_path):
        assert {} == util._parse_redhat_release(str(tmp_path / "nope"))

    def test_unparseable(self, tmp_path):
        release = tmp_path / "redhat-release"
        release.write_text("something else\n")
        assert {} == util._parse_redhat_release(str(release))

    def test_rocky(self, tmp_path):
        release = tmp_path / "redhat-release"
        release.write_text("Rocky Linux release 9.3 (Blue Onyx)\n")
        assert {
            "ID": "rocky",
            "VERSION_ID": "9.3",
            "VERSION_CODENAME": "Blue Onyx",
        } == util._parse_redhat_release(str(release))


class TestSafeInt:
    @pytest.mark.parametrize(
        "value,expected", [("7", 7), (3, 3), ("", None), (None, None)]
    )
    def test_safe_int(self, value, expected):
        assert expected == util.safe_int(value)


class TestError:
    def test_returns_rc(self, capsys):
        assert 1 == util.error("boom")
        assert "Error:\nboom\n" == capsys.readouterr().err

    def test_sys_exit(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            util.error("boom", rc=3, sys_exit=True)
        assert 3 == exc_info.value.code
