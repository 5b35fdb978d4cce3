# repodeps/modules/walker.py
"""
Depth-first dependency walker.

Starting at a project directory, the walker loads its repodeps.yaml, clones
every dependency that is missing on disk, recurses into it, and calls back
into a visitor:

 - visit_dependency(owner_dir, dependency) once per distinct dependency target
 - visit_project(project_dir, manifest) once per distinct project, after all of
   its dependencies are done (post-order)

The first non-success code stops the whole walk and ends up in
visitor.return_code. Nothing already done (clones, hooks) is rolled back.
"""

from __future__ import annotations
import os
from typing import Optional, Set

from repodeps.modules import logger as _logger
from repodeps.modules.config import config
from repodeps.modules.git import Git
from repodeps.modules.manifest import ManifestManager
from repodeps.modules.returncode import ReturnCode
from repodeps.modules.utils import Utils
from repodeps.modules.visitors import Visitor


class DependencyWalker:
    def __init__(self,
                 manifests: Optional[ManifestManager] = None,
                 git: Optional[Git] = None,
                 require_git: Optional[bool] = None):
        self.manifests = manifests or ManifestManager()
        self.git = git or Git()
        if require_git is None:
            require_git = config.getboolean("walker", "require_git", fallback=False)
        self.require_git = require_git
        self.log = _logger.Logger("walker")

    def traverse(self, visitor: Optional[Visitor], directory: Optional[str]) -> None:
        if visitor is None or not directory:
            return
        root = Utils.canonical_path(directory)
        if self.require_git and os.path.isdir(root) and not Utils.is_git_repository(root):
            self.log.error(f"{root} is not a git repository")
            visitor.return_code = ReturnCode.REPOSITORY_NOT_FOUND
            return
        self.log.info(f"Traversing dependencies of {root} with {type(visitor).__name__}")
        visitor.return_code = self._visit_node(visitor, root, set(), set(), set(), search_parents=True)

    def _visit_node(self, visitor: Visitor, directory: str,
                    visited_projects: Set[str],
                    visited_dependencies: Set[str],
                    in_progress: Set[str],
                    search_parents: bool = False) -> ReturnCode:
        if directory in visited_projects:
            return ReturnCode.SUCCESS
        if directory in in_progress:
            self.log.error(f"Circular dependency through {directory}")
            return ReturnCode.CIRCULAR_DEPENDENCY

        if not os.path.isdir(directory):
            self.log.error(f"Repository not found: {directory}")
            return ReturnCode.REPOSITORY_NOT_FOUND

        # only the starting directory may resolve to an enclosing project;
        # a dependency target must hold its own manifest
        manifest, resolved, code = self.manifests.load_from_directory(directory, search_parents=search_parents)
        if manifest is None or (not search_parents and resolved != directory):
            self.log.error(f"Unable to load manifest for {directory} ({code.describe()})")
            return ReturnCode.REPOSITORY_NOT_FOUND
        directory = resolved

        in_progress.add(directory)
        for dependency in manifest.dependencies:
            target = Utils.canonical_path(directory, dependency.directory)

            if not os.path.exists(target):
                self.log.info(f"{dependency.name} missing at {target}, cloning")
                code = self.git.clone(dependency.url, target, dependency.branch)
                if not code.ok:
                    return code

            code = self._visit_node(visitor, target, visited_projects, visited_dependencies, in_progress)
            if not code.ok:
                return code

            if target in visited_dependencies:
                continue
            visited_dependencies.add(target)
            code = visitor.visit_dependency(directory, dependency)
            if not code.ok:
                return code
        in_progress.discard(directory)

        visited_projects.add(directory)
        return visitor.visit_project(directory, manifest)
