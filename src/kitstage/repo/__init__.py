"""Wrappers around the external repository tools."""

from kitstage.repo.base import RepoTool, RepoToolResult
from kitstage.repo.createrepo import CreaterepoTool
from kitstage.repo.query import RepoQueryTool

__all__ = ["CreaterepoTool", "RepoQueryTool", "RepoTool", "RepoToolResult"]
