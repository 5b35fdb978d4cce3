# repodeps/modules/build.py
"""
Build and package-update procedure for a single project.

For a project whose dependencies are already built:
 - collect the package artifacts each dependency produced
 - apply them to the project with its update command (package manager)
 - run pre-build hooks, the build script, post-build hooks
 - report which packages were applied
"""

from __future__ import annotations
import glob
import os
import subprocess
import time
from typing import Dict, List, Optional, Tuple, Any

from repodeps.modules import logger as _logger
from repodeps.modules import hooks as _hooks
from repodeps.modules.config import config
from repodeps.modules.manifest import Manifest, ManifestManager
from repodeps.modules.returncode import ReturnCode
from repodeps.modules.utils import Utils


class BuildManager:
    def __init__(self,
                 manifests: Optional[ManifestManager] = None,
                 hooks: Optional[_hooks.HookManager] = None,
                 dry_run: bool = False,
                 shell: Optional[str] = None):
        self.manifests = manifests or ManifestManager()
        self.dry_run = dry_run
        self.shell = shell or config.get("build", "shell", fallback=None)
        self.hooks = hooks or _hooks.HookManager(dry_run=dry_run, shell=self.shell)
        self.log = _logger.Logger("build")

        # runtime metrics
        self.metrics: Dict[str, Any] = {
            "built": 0,
            "failed": 0,
            "packages": {}
        }

    # ---------------------------
    # Command runner
    # ---------------------------
    def _run(self, command: str, cwd: str) -> int:
        self.log.info(f"Running '{command}' in {cwd}")
        if self.dry_run:
            self.log.info(f"[DRY-RUN] Would run: {command}")
            return 0
        try:
            res = subprocess.run(command, shell=True, cwd=cwd, executable=self.shell,
                                 stdout=subprocess.PIPE, stderr=subprocess.STDOUT, text=True)
        except OSError as e:
            self.log.error(f"Unable to run '{command}': {e}")
            return 127
        if res.returncode != 0:
            self.log.error(f"'{command}' exited with {res.returncode}:\n{res.stdout}")
        else:
            self.log.debug(res.stdout)
        return res.returncode

    # ---------------------------
    # Artifacts
    # ---------------------------
    def find_artifacts(self, directory: str, manifest: Manifest) -> List[str]:
        """Package files a project produced, sorted by name."""
        pattern = os.path.join(directory, manifest.packages_dir, manifest.packages_pattern)
        return sorted(p for p in glob.glob(pattern) if os.path.isfile(p))

    def update_dependencies(self, directory: str, manifest: Manifest) -> Tuple[ReturnCode, List[str]]:
        """Apply every dependency artifact to the project at directory."""
        updated: List[str] = []
        if not manifest.update_command:
            self.log.debug(f"{directory} has no update command; skipping package update")
            return ReturnCode.SUCCESS, updated

        for dep in manifest.dependencies:
            dep_manifest, dep_dir, code = self.manifests.load_from_directory(
                Utils.canonical_path(directory, dep.directory), search_parents=False)
            if dep_manifest is None:
                self.log.error(f"Dependency {dep.name} has no loadable manifest in {dep_dir}")
                return ReturnCode.REPOSITORY_NOT_FOUND, updated
            source = os.path.join(dep_dir, dep_manifest.packages_dir)
            for path in self.find_artifacts(dep_dir, dep_manifest):
                package = Utils.strip_archive_ext(os.path.basename(path))
                command = manifest.update_command.format(package=package, path=path, source=source)
                if self._run(command, directory) != 0:
                    return ReturnCode.PACKAGE_MANAGER_COMMAND_FAILED, updated
                updated.append(package)
        return ReturnCode.SUCCESS, updated

    # ---------------------------
    # Build
    # ---------------------------
    def build(self, directory: str, manifest: Manifest) -> ReturnCode:
        try:
            self.hooks.run_hooks("pre-build", manifest, directory)
            if manifest.build_script and self._run(manifest.build_script, directory) != 0:
                return ReturnCode.BUILD_SCRIPT_FAILED
            self.hooks.run_hooks("post-build", manifest, directory)
        except (subprocess.CalledProcessError, OSError) as e:
            self.log.error(f"Build hook failed for {directory}: {e}")
            return ReturnCode.BUILD_SCRIPT_FAILED
        return ReturnCode.SUCCESS

    def build_and_update(self, directory: str, manifest: Manifest) -> Tuple[ReturnCode, List[str]]:
        name = manifest.name or os.path.basename(directory)
        start = time.time()
        self.log.info(f"Starting build pipeline for {name} (dry_run={self.dry_run})")

        code, updated = self.update_dependencies(directory, manifest)
        if code.ok:
            code = self.build(directory, manifest)

        if code.ok:
            self.metrics["built"] += 1
            self.log.success(f"Built: {name}")
        else:
            self.metrics["failed"] += 1
            self.log.error(f"Failed building {name}: {code.describe()}")
        self.metrics["packages"][directory] = {
            "name": name,
            "status": code.name,
            "updated": list(updated),
            "duration": time.time() - start,
        }
        return code, (updated if code.ok else [])
