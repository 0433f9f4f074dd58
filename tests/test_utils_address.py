# SPDX-FileCopyrightText: © 2024 Jip-Hop and the Jailmakers <https://github.com/Jip-Hop/jailmaker>
#
# SPDX-License-Identifier: LGPL-3.0-only

import ipaddress

import pytest

from iocage_provision.errors import InvalidAddress, NetworkTooSmall
from iocage_provision.utils.address import resolve_address


def test_default_gateway_is_first_host_address():
    interface, gateway = resolve_address("192.168.0.100/24")
    assert interface == ipaddress.ip_interface("192.168.0.100/24")
    assert gateway == ipaddress.ip_address("192.168.0.1")


@pytest.mark.parametrize(
    "address, expected",
    [
        ("10.0.0.25/24", "10.0.0.1"),
        ("10.1.200.3/16", "10.1.0.1"),
        ("172.16.5.9/12", "172.16.0.1"),
        ("192.168.7.2/30", "192.168.7.1"),
        ("2001:db8::25/64", "2001:db8::1"),
        ("fd00:1:2:3::abcd/48", "fd00:1:2::1"),
    ],
)
def test_default_gateway_values(address, expected):
    _, gateway = resolve_address(address)
    assert gateway == ipaddress.ip_address(expected)


@pytest.mark.parametrize("version, base", [(4, "10.20.30.40"), (6, "2001:db8::40")])
def test_default_gateway_for_every_usable_prefix(version, base):
    width = 32 if version == 4 else 128
    for prefix in range(0, width - 1):
        network = ipaddress.ip_network(f"{base}/{prefix}", strict=False)
        jail_ip = network.network_address + 2

        interface, gateway = resolve_address(f"{jail_ip}/{prefix}")

        assert gateway == network.network_address + 1
        assert gateway != interface.ip


@pytest.mark.parametrize(
    "address", ["10.0.0.1/31", "10.0.0.1/32", "2001:db8::1/127", "2001:db8::1/128"]
)
def test_network_too_small(address):
    with pytest.raises(NetworkTooSmall):
        resolve_address(address)


@pytest.mark.parametrize(
    "address",
    ["192.168.0.100", "192.168.0.300/24", "192.168.0.1/33", "not-an-ip/24", "", "/24"],
)
def test_invalid_address(address):
    with pytest.raises(InvalidAddress):
        resolve_address(address)


@pytest.mark.parametrize("address", ["192.168.0.0/24", "192.168.0.255/24", "2001:db8::/64"])
def test_unusable_host_address(address):
    with pytest.raises(InvalidAddress):
        resolve_address(address)


def test_address_colliding_with_default_gateway():
    with pytest.raises(InvalidAddress, match="pass a gateway explicitly"):
        resolve_address("192.168.0.1/24")


def test_gateway_override_is_taken_verbatim():
    _, gateway = resolve_address("10.1.0.20/16", "10.1.0.254")
    assert gateway == ipaddress.ip_address("10.1.0.254")

    # Doesn't need to be inside the network
    _, gateway = resolve_address("10.1.0.20/16", "192.168.99.1")
    assert gateway == ipaddress.ip_address("192.168.99.1")


def test_gateway_override_skips_network_size_check():
    interface, gateway = resolve_address("203.0.113.7/32", "203.0.113.1")
    assert interface.network.prefixlen == 32
    assert gateway == ipaddress.ip_address("203.0.113.1")


@pytest.mark.parametrize("gateway", ["10.1.0.256", "gateway", "10.1.0.254/24", "2001:db8::1"])
def test_invalid_gateway_override(gateway):
    with pytest.raises(InvalidAddress):
        resolve_address("10.1.0.20/16", gateway)
