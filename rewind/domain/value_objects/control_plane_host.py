"""
Control Plane Host Value Object

Architectural Intent:
- Immutable SSH target for running kubectl on a remote control-plane node
- Validates hostname (DNS, IPv4, IPv6), port bounds and a non-empty user
- parse() accepts 'host', 'user@host', 'user@host:port' and 'user@[::1]:port'
"""

import ipaddress
import re
from dataclasses import dataclass

_DNS_LABEL_RE = re.compile(r"^(?!-)[A-Za-z0-9-]{1,63}(?<!-)$")

DEFAULT_SSH_USER = "root"
DEFAULT_SSH_PORT = 22


def _is_valid_host(host: str) -> bool:
    if not host:
        return False
    try:
        ipaddress.ip_address(host)
        return True
    except ValueError:
        pass
    if len(host) > 253:
        return False
    return all(_DNS_LABEL_RE.match(label) for label in host.split("."))


@dataclass(frozen=True)
class ControlPlaneHost:
    """
    Value Object naming the node kubectl is executed on over SSH.
    """
    host: str
    user: str = DEFAULT_SSH_USER
    port: int = DEFAULT_SSH_PORT

    def __post_init__(self) -> None:
        if not self.user:
            raise ValueError("Control plane user cannot be empty")
        if not (1 <= self.port <= 65535):
            raise ValueError(f"Port must be 1-65535, got {self.port}")
        if not _is_valid_host(self.host):
            raise ValueError(f"Invalid control plane host: {self.host!r}")

    def __str__(self) -> str:
        return f"{self.user}@{self.host}:{self.port}"

    @staticmethod
    def parse(target: str) -> "ControlPlaneHost":
        user = DEFAULT_SSH_USER
        port = DEFAULT_SSH_PORT
        host = target.strip()

        if "@" in host:
            user, host = host.split("@", 1)

        if host.startswith("["):
            end = host.find("]")
            if end == -1:
                raise ValueError(f"Unterminated IPv6 bracket in: {target}")
            remainder = host[end + 1:]
            host = host[1:end]
            if remainder.startswith(":"):
                port = int(remainder[1:])
        elif host.count(":") == 1:
            host, _, raw_port = host.partition(":")
            port = int(raw_port)

        return ControlPlaneHost(host=host, user=user, port=port)
