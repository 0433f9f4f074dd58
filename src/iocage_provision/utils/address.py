# SPDX-FileCopyrightText: © 2024 Jip-Hop and the Jailmakers <https://github.com/Jip-Hop/jailmaker>
#
# SPDX-License-Identifier: LGPL-3.0-only

import ipaddress

from iocage_provision.errors import InvalidAddress, NetworkTooSmall


def parse_interface(address_with_prefix):
    """
    Parse an address with an explicit prefix length, e.g. 10.200.0.50/24.
    """
    if "/" not in address_with_prefix:
        raise InvalidAddress(
            f"Address {address_with_prefix} is missing a prefix length (e.g. /24)."
        )

    try:
        return ipaddress.ip_interface(address_with_prefix)
    except ValueError as e:
        raise InvalidAddress(f"Invalid address {address_with_prefix}: {e}.") from e


def parse_gateway(gateway):
    try:
        return ipaddress.ip_address(gateway)
    except ValueError as e:
        raise InvalidAddress(f"Invalid gateway address {gateway}: {e}.") from e


def default_gateway(interface):
    """
    Return the first host address of the network, by convention the router.
    """
    network = interface.network

    # Need room for at least the router and the jail itself
    if network.prefixlen > network.max_prefixlen - 2:
        raise NetworkTooSmall(
            f"Network {network} has no room for a default gateway, "
            "pass a gateway explicitly."
        )

    if interface.ip == network.network_address or (
        network.version == 4 and interface.ip == network.broadcast_address
    ):
        raise InvalidAddress(
            f"Address {interface.ip} is not a usable host address in {network}."
        )

    gateway = network.network_address + 1
    if gateway == interface.ip:
        raise InvalidAddress(
            f"Address {interface.ip} is the default gateway of {network}, "
            "pass a gateway explicitly."
        )

    return gateway


def resolve_address(address_with_prefix, gateway_override=None):
    """
    Return the jail interface and the gateway to route through.
    An explicit gateway is taken verbatim, it need not be inside the network.
    """
    interface = parse_interface(address_with_prefix)

    if gateway_override:
        gateway = parse_gateway(gateway_override)
        if gateway.version != interface.version:
            raise InvalidAddress(
                f"Gateway {gateway} is not an IPv{interface.version} address."
            )
        return interface, gateway

    return interface, default_gateway(interface)
