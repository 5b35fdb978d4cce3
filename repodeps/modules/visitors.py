# repodeps/modules/visitors.py
"""Visitors driven by DependencyWalker."""

from __future__ import annotations
from typing import List, Tuple

from repodeps.modules import logger as _logger
from repodeps.modules.manifest import Dependency, Manifest
from repodeps.modules.returncode import ReturnCode
from repodeps.modules.utils import Utils


class Visitor:
    """
    Base visitor: both hooks succeed without doing anything.

    return_code holds the outcome of the last walk; the walker writes it and
    the hooks may too.
    """

    def __init__(self):
        self.return_code = ReturnCode.SUCCESS

    def visit_dependency(self, directory: str, dependency: Dependency) -> ReturnCode:
        return ReturnCode.SUCCESS

    def visit_project(self, directory: str, manifest: Manifest) -> ReturnCode:
        return ReturnCode.SUCCESS


class CheckOutBranchVisitor(Visitor):
    """Puts every dependency on the branch its owner asks for."""

    def __init__(self, git):
        super().__init__()
        self.git = git
        self.log = _logger.Logger("checkout")

    def visit_dependency(self, directory: str, dependency: Dependency) -> ReturnCode:
        target = Utils.canonical_path(directory, dependency.directory)
        self.log.info(f"Checking out {dependency.branch} for {dependency.name}")
        self.return_code = self.git.checkout(target, dependency.branch)
        return self.return_code


class BuildAndUpdateVisitor(Visitor):
    """Builds each project and collects the packages it was updated with."""

    def __init__(self, builder):
        super().__init__()
        self.builder = builder
        self.updated_packages: List[str] = []

    def visit_project(self, directory: str, manifest: Manifest) -> ReturnCode:
        code, packages = self.builder.build_and_update(directory, manifest)
        if code.ok:
            self.updated_packages.extend(packages)
        self.return_code = code
        return code


class ListVisitor(Visitor):
    def __init__(self):
        super().__init__()
        self.projects: List[Tuple[str, Manifest]] = []

    def visit_project(self, directory: str, manifest: Manifest) -> ReturnCode:
        self.projects.append((directory, manifest))
        return ReturnCode.SUCCESS
