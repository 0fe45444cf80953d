# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from swiftdriver.driver import Driver
from swiftdriver.jobs import Job


@pytest.fixture
def plan():
	"""Plan a build for an invocation, isolated from SWIFT_DRIVER_* overrides in the environment."""

	def _plan(*args: str, env: dict[str, str] | None = None) -> list[Job]:
		return Driver(list(args), env=env or {}).plan_build()

	return _plan
