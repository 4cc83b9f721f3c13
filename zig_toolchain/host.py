"""
Host platform detection.

Maps the running interpreter's OS and machine names onto the (os, arch) pairs
the upstream index publishes builds for.
"""

from __future__ import annotations

import platform
from dataclasses import dataclass
from enum import Enum

from .common import vlog
from .errors import UnsupportedHostError


class HostOS(str, Enum):
    LINUX = "linux"
    MACOS = "macos"
    WINDOWS = "windows"


class HostArch(str, Enum):
    X86_64 = "x86_64"
    AARCH64 = "aarch64"
    X86 = "x86"


# platform.system() -> HostOS
_SYSTEM_NAMES = {
    "linux": HostOS.LINUX,
    "darwin": HostOS.MACOS,
    "windows": HostOS.WINDOWS,
}

# platform.machine() -> HostArch
_MACHINE_NAMES = {
    "x86_64": HostArch.X86_64,
    "amd64": HostArch.X86_64,
    "aarch64": HostArch.AARCH64,
    "arm64": HostArch.AARCH64,
    "i386": HostArch.X86,
    "i686": HostArch.X86,
    "x86": HostArch.X86,
}

SUPPORTED_HOSTS = frozenset({
    (HostOS.MACOS, HostArch.X86_64),
    (HostOS.MACOS, HostArch.AARCH64),
    (HostOS.LINUX, HostArch.X86_64),
    (HostOS.LINUX, HostArch.AARCH64),
    (HostOS.LINUX, HostArch.X86),
    (HostOS.WINDOWS, HostArch.X86_64),
    (HostOS.WINDOWS, HostArch.AARCH64),
    (HostOS.WINDOWS, HostArch.X86),
})


@dataclass(frozen=True)
class HostPlatform:
    """
    An (OS, architecture) pair.

    Attributes:
        os: Operating system
        arch: CPU architecture
    """
    os: HostOS
    arch: HostArch

    @property
    def index_key(self) -> str:
        """Key of this host's download descriptor in an index record."""
        return f"{self.arch.value}-{self.os.value}"

    @property
    def archive_tag(self) -> str:
        """The os-arch segment of archive and extraction directory names."""
        return f"{self.os.value}-{self.arch.value}"

    def __str__(self) -> str:
        return self.index_key


def parse_host(value: str) -> HostPlatform:
    """
    Parse an index-style host key such as "x86_64-linux".

    Raises:
        UnsupportedHostError: If the pair is not a published target
    """
    arch_name, _, os_name = value.strip().partition("-")
    try:
        host = HostPlatform(HostOS(os_name), HostArch(arch_name))
    except ValueError:
        raise UnsupportedHostError(f"Unknown host platform: {value!r}") from None
    if (host.os, host.arch) not in SUPPORTED_HOSTS:
        raise UnsupportedHostError(f"No builds are published for {host}")
    return host


def detect_host(
    system: str | None = None,
    machine: str | None = None,
    verbose: bool = False,
) -> HostPlatform:
    """
    Detect the running host platform.

    Args:
        system: OS name override (defaults to platform.system())
        machine: Machine name override (defaults to platform.machine())
        verbose: Enable verbose logging

    Returns:
        HostPlatform for this machine

    Raises:
        UnsupportedHostError: If the OS or architecture is not supported
    """
    system = (system if system is not None else platform.system()).lower()
    machine = (machine if machine is not None else platform.machine()).lower()

    host_os = _SYSTEM_NAMES.get(system)
    host_arch = _MACHINE_NAMES.get(machine)
    if host_os is None or host_arch is None:
        raise UnsupportedHostError(
            f"Unsupported host: {system}/{machine}",
            remediation="Set 'host' in the config file to one of the published targets",
        )
    if (host_os, host_arch) not in SUPPORTED_HOSTS:
        raise UnsupportedHostError(f"No builds are published for {host_arch.value}-{host_os.value}")

    host = HostPlatform(host_os, host_arch)
    vlog(f"Detected host platform: {host}", verbose)
    return host
