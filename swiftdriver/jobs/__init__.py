# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Job model and build planning.
"""

from .job import ArgTemplate, CommandLine, Flag, Job, JobKind, PathArg, render_path
from .link import link_output_path, plan_dsym_job, plan_link_job
from .planner import BuildPlanner, plan_build

__all__ = [
	"ArgTemplate",
	"BuildPlanner",
	"CommandLine",
	"Flag",
	"Job",
	"JobKind",
	"PathArg",
	"link_output_path",
	"plan_build",
	"plan_dsym_job",
	"plan_link_job",
	"render_path",
]
