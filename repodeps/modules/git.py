# repodeps/modules/git.py
"""
git.py - acesso ao git para clonar e trocar de branch nas dependências.

- Executável configurável em [git] executable (default "git").
- Todas as operações devolvem um ReturnCode; falhas de subprocess nunca escapam.
- Modo dry-run apenas registra os comandos.
"""

import os
import subprocess
from typing import List, Optional

from repodeps.modules import logger as _logger
from repodeps.modules.config import config
from repodeps.modules.returncode import ReturnCode


class GitError(Exception):
    pass


class Git:
    def __init__(self, executable: Optional[str] = None, dry_run: bool = False):
        self.executable = executable or config.get("git", "executable", fallback="git")
        self.dry_run = dry_run
        self.log = _logger.Logger("git")

    def _run(self, args: List[str], cwd: Optional[str] = None) -> str:
        cmd = [self.executable] + args
        if self.dry_run:
            self.log.info(f"[DRY-RUN] Would run: {' '.join(cmd)}")
            return ""
        self.log.debug(f"Running: {' '.join(cmd)} (cwd={cwd})")
        try:
            res = subprocess.run(cmd, cwd=cwd,
                                 stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True)
        except OSError as e:
            raise GitError(f"Unable to run {cmd[0]}: {e}") from e
        if res.returncode != 0:
            raise GitError(f"Command failed: {' '.join(cmd)}\nstdout: {res.stdout}\nstderr: {res.stderr}")
        return res.stdout.strip()

    def clone(self, url: str, directory: str, branch: str) -> ReturnCode:
        """Clona url em directory já na branch pedida."""
        self.log.info(f"Cloning {url} ({branch}) into {directory}")
        parent = os.path.dirname(os.path.abspath(directory))
        if not self.dry_run:
            os.makedirs(parent, exist_ok=True)
        try:
            self._run(["clone", "--branch", branch, url, directory])
        except GitError as e:
            self.log.error(str(e))
            return ReturnCode.GIT_COMMAND_FAILED
        return ReturnCode.SUCCESS

    def checkout(self, directory: str, branch: str) -> ReturnCode:
        """Troca para branch em directory; não faz nada se já estiver nela."""
        try:
            if not self.dry_run and self.current_branch(directory) == branch:
                self.log.debug(f"{directory} already on {branch}")
                return ReturnCode.SUCCESS
            self.log.info(f"Checking out {branch} in {directory}")
            self._run(["checkout", branch], cwd=directory)
        except GitError as e:
            self.log.error(str(e))
            return ReturnCode.GIT_COMMAND_FAILED
        return ReturnCode.SUCCESS

    def current_branch(self, directory: str) -> str:
        return self._run(["rev-parse", "--abbrev-ref", "HEAD"], cwd=directory)
