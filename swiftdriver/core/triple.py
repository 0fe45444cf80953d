# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Target triple parsing (`arch-vendor-os[version][-environment]`).

Only the pieces the planner branches on are modeled: the platform family
(Darwin vs ELF), the architecture, and the deployment version.
"""

from __future__ import annotations

import platform
import re
from dataclasses import dataclass
from enum import Enum, auto

from .errors import DriverError


class PlatformFamily(Enum):
	DARWIN = auto()
	ELF = auto()


_DARWIN_OSES = {"macosx", "macos", "darwin", "ios", "tvos", "watchos"}
_ELF_OSES = {"linux", "freebsd", "openbsd", "android"}

# Deployment targets used when the triple carries no version.
_DEFAULT_DARWIN_VERSIONS: dict[str, tuple[int, int, int]] = {
	"macosx": (10, 9, 0),
	"ios": (7, 0, 0),
	"tvos": (9, 0, 0),
	"watchos": (2, 0, 0),
}

_OS_RE = re.compile(r"^([a-z_]+?)([0-9][0-9.]*)?$")


@dataclass(frozen=True)
class Triple:
	triple: str
	arch: str
	vendor: str
	os_name: str
	os_version: tuple[int, int, int] = (0, 0, 0)
	environment: str | None = None

	@classmethod
	def parse(cls, text: str) -> "Triple":
		parts = text.split("-")
		if len(parts) < 3 or not all(parts[:3]):
			raise DriverError("unsupported-target", f"invalid target triple '{text}'")
		arch, vendor, os_part = parts[0], parts[1], parts[2]
		environment = "-".join(parts[3:]) or None
		m = _OS_RE.match(os_part)
		if m is None:
			raise DriverError("unsupported-target", f"invalid operating system '{os_part}' in '{text}'")
		os_name = m.group(1)
		if os_name in ("macos", "darwin"):
			os_name = "macosx"
		if os_name not in _DARWIN_OSES and os_name not in _ELF_OSES:
			raise DriverError("unsupported-target", f"unsupported target '{text}'")
		version = _parse_version(m.group(2))
		if version == (0, 0, 0) and os_name in _DEFAULT_DARWIN_VERSIONS:
			version = _DEFAULT_DARWIN_VERSIONS[os_name]
		return cls(
			triple=text,
			arch=arch,
			vendor=vendor,
			os_name=os_name,
			os_version=version,
			environment=environment,
		)

	@classmethod
	def host(cls) -> "Triple":
		system = platform.system()
		machine = _normalize_arch(platform.machine())
		if system == "Darwin":
			mac_version = platform.mac_ver()[0] or "10.15"
			return cls.parse(f"{machine}-apple-macosx{mac_version}")
		if system == "Linux":
			return cls.parse(f"{machine}-unknown-linux-gnu")
		if system == "FreeBSD":
			return cls.parse(f"{machine}-unknown-freebsd")
		raise DriverError("unsupported-target", f"unsupported host platform '{system}'")

	@property
	def family(self) -> PlatformFamily:
		if self.os_name in _DARWIN_OSES:
			return PlatformFamily.DARWIN
		return PlatformFamily.ELF

	@property
	def is_darwin(self) -> bool:
		return self.family is PlatformFamily.DARWIN

	@property
	def requires_autolink_extract(self) -> bool:
		"""ELF objects cannot carry autolink entries the linker understands."""
		return self.family is PlatformFamily.ELF

	@property
	def is_simulator(self) -> bool:
		return self.environment == "simulator"

	@property
	def version_string(self) -> str:
		return ".".join(str(part) for part in self.os_version)

	@property
	def min_version_flag(self) -> str | None:
		"""Darwin linker flag pinning the deployment target."""
		if self.os_name == "macosx":
			return "-macosx_version_min"
		if self.os_name == "ios":
			return "-ios_simulator_version_min" if self.is_simulator else "-iphoneos_version_min"
		if self.os_name == "tvos":
			return "-tvos_simulator_version_min" if self.is_simulator else "-tvos_version_min"
		if self.os_name == "watchos":
			return "-watchos_simulator_version_min" if self.is_simulator else "-watchos_version_min"
		return None

	@property
	def dynamic_library_extension(self) -> str:
		return "dylib" if self.is_darwin else "so"

	@property
	def static_library_extension(self) -> str:
		return "a"

	def __str__(self) -> str:
		return self.triple


def _parse_version(text: str | None) -> tuple[int, int, int]:
	if not text:
		return (0, 0, 0)
	nums = [int(p) for p in text.split(".") if p]
	nums = (nums + [0, 0, 0])[:3]
	return (nums[0], nums[1], nums[2])


def _normalize_arch(machine: str) -> str:
	machine = machine.lower()
	if machine in ("amd64", "x64"):
		return "x86_64"
	return machine or "x86_64"


__all__ = ["PlatformFamily", "Triple"]
