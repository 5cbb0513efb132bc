# This file is part of netifcfg. See LICENSE file for license information.

from unittest import mock

import pytest

from netifcfg import util
from netifcfg.net import identity
from netifcfg.net.identity import (
    HardwareAddress,
    LiteralName,
    ResolutionError,
    SequenceIndex,
)
from netifcfg.net.ifcfg import ValidationError

MAC = "aa:bb:cc:dd:ee:ff"


class TestClassify:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (0, SequenceIndex(0)),
            (3, SequenceIndex(3)),
            (MAC, HardwareAddress(MAC)),
            ("AA:BB:CC:DD:EE:FF", HardwareAddress(MAC)),
            ("eth0", LiteralName("eth0")),
            ("eth0:1", LiteralName("eth0:1")),
            # five octets is not a mac, so it must be a name
            ("aa:bb:cc:dd:ee", LiteralName("aa:bb:cc:dd:ee")),
            ("0", LiteralName("0")),
        ],
    )
    def test_classify(self, value, expected):
        result = identity.classify(value)
        assert type(expected) is type(result)
        assert expected == result

    @pytest.mark.parametrize(
        "value",
        [SequenceIndex(2), HardwareAddress(MAC), LiteralName("eth1")],
    )
    def test_variants_pass_through(self, value):
        assert value is identity.classify(value)

    @pytest.mark.parametrize(
        "value", [-1, True, False, "", None, 1.5, ["eth0"], {"a": 1}]
    )
    def test_invalid_identifiers(self, value):
        with pytest.raises(ValidationError) as exc_info:
            identity.classify(value)
        assert "interface" == exc_info.value.field
        assert value == exc_info.value.value

    def test_unquoted_all_digit_mac_in_yaml(self):
        value = util.load_yaml("interface: 10:20:30:40:50:59\n")["interface"]
        assert isinstance(value, int)
        with pytest.raises(ValidationError, match="quote mac addresses"):
            identity.classify(value)
        assert HardwareAddress("10:20:30:40:50:59") == identity.classify(
            "10:20:30:40:50:59"
        )

    def test_largest_sequence_index(self):
        largest = identity.MAX_SEQUENCE_INDEX
        assert SequenceIndex(largest) == identity.classify(largest)
        with pytest.raises(ValidationError):
            identity.classify(largest + 1)

    def test_str_is_the_raw_form(self):
        assert "2" == str(SequenceIndex(2))
        assert MAC == str(HardwareAddress(MAC))
        assert "eth0" == str(LiteralName("eth0"))


class TestResolve:
    def test_literal_name_is_returned_verbatim(self):
        mac_lookup = mock.Mock()
        index_lookup = mock.Mock()
        assert "eth0:1" == identity.resolve(
            "eth0:1", mac_lookup=mac_lookup, index_lookup=index_lookup
        )
        assert 0 == mac_lookup.call_count
        assert 0 == index_lookup.call_count

    def test_literal_name_need_not_exist(self):
        with mock.patch("netifcfg.net.get_devicelist", return_value=[]):
            assert "eth9" == identity.resolve("eth9")

    def test_sequence_index(self):
        index_lookup = mock.Mock(return_value="ens4")
        assert "ens4" == identity.resolve(1, index_lookup=index_lookup)
        index_lookup.assert_called_once_with(1)

    def test_sequence_index_out_of_range(self):
        with pytest.raises(ResolutionError) as exc_info:
            identity.resolve(5, index_lookup=lambda index: None)
        assert 5 == exc_info.value.identifier
        assert "No interface found at sequence index: 5" == str(
            exc_info.value
        )

    def test_hardware_address_is_looked_up_lowercase(self):
        mac_lookup = mock.Mock(return_value="eth1")
        assert "eth1" == identity.resolve(
            "AA:BB:CC:DD:EE:FF", mac_lookup=mac_lookup
        )
        mac_lookup.assert_called_once_with(MAC)

    def test_unknown_hardware_address(self):
        with pytest.raises(ResolutionError) as exc_info:
            identity.resolve(MAC, mac_lookup=lambda mac: None)
        assert MAC == exc_info.value.identifier
        assert "No interface found for given hardware address" in str(
            exc_info.value
        )

    def test_resolution_error_is_a_lookup_error(self):
        with pytest.raises(LookupError):
            identity.resolve(0, index_lookup=lambda index: None)

    def test_invalid_identifier_is_not_looked_up(self):
        index_lookup = mock.Mock()
        with pytest.raises(ValidationError):
            identity.resolve(-2, index_lookup=index_lookup)
        assert 0 == index_lookup.call_count

    def test_default_lookups_read_sysfs(self, sys_class_net):
        sys_class_net("lo", mac="00:00:00:00:00:00", ifindex=1)
        sys_class_net("eth1", mac="aa:bb:cc:dd:ee:02", ifindex=3)
        sys_class_net("eth0", mac="AA:BB:CC:DD:EE:01", ifindex=2)
        assert "eth0" == identity.resolve(0)
        assert "eth1" == identity.resolve(1)
        assert "eth0" == identity.resolve("aa:bb:cc:dd:ee:01")
        with pytest.raises(ResolutionError):
            identity.resolve(2)
        with pytest.raises(ResolutionError):
            identity.resolve("aa:bb:cc:dd:ee:99")
