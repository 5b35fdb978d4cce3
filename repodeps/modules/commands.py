# repodeps/modules/commands.py
"""
Commands behind each CLI verb.

Every command gets its collaborators through the constructor and exposes
execute() -> ReturnCode. User-facing output goes to a rich Console; logging
goes through Logger.
"""

from __future__ import annotations
import os
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from repodeps.modules import logger as _logger
from repodeps.modules.build import BuildManager
from repodeps.modules.git import Git
from repodeps.modules.manifest import ManifestManager, ManifestError, MANIFEST_FILE
from repodeps.modules.returncode import ReturnCode
from repodeps.modules.visitors import (
    Visitor,
    CheckOutBranchVisitor,
    BuildAndUpdateVisitor,
    ListVisitor,
)
from repodeps.modules.walker import DependencyWalker


class Command:
    name = ""

    def __init__(self,
                 directory: Optional[str] = None,
                 console: Optional[Console] = None,
                 manifests: Optional[ManifestManager] = None,
                 git: Optional[Git] = None,
                 walker: Optional[DependencyWalker] = None,
                 dry_run: bool = False):
        self.directory = os.path.abspath(directory or os.getcwd())
        self.console = console or Console()
        self.dry_run = dry_run
        self.manifests = manifests or ManifestManager()
        self.git = git or Git(dry_run=dry_run)
        self.walker = walker or DependencyWalker(self.manifests, self.git)
        self.log = _logger.Logger(self.name or "command")

    def execute(self) -> ReturnCode:
        raise NotImplementedError

    def fail(self, code: ReturnCode) -> ReturnCode:
        self.console.print(f"[red]{self.name} failed: {code.describe()} ({int(code)})[/red]")
        self.log.error(f"{self.name} failed in {self.directory}: {code.name}")
        return code


class InitCommand(Command):
    name = "init"

    def __init__(self, build_script: str = "", packages_dir: str = "artifacts", **kwargs):
        super().__init__(**kwargs)
        self.build_script = build_script
        self.packages_dir = packages_dir

    def execute(self) -> ReturnCode:
        try:
            path = self.manifests.create(self.directory,
                                         build_script=self.build_script,
                                         packages_dir=self.packages_dir)
        except ManifestError as e:
            self.log.error(str(e))
            return self.fail(ReturnCode.MANIFEST_ALREADY_EXISTS)
        self.console.print(f"[green]Created {path}[/green]")
        return ReturnCode.SUCCESS


class ShowConfigCommand(Command):
    name = "config"

    def execute(self) -> ReturnCode:
        manifest, directory, code = self.manifests.load_from_directory(self.directory)
        if manifest is None:
            return self.fail(code)
        text = self.manifests.dump(manifest)
        self.console.print(Panel(Syntax(text, "yaml"), title=os.path.join(directory, MANIFEST_FILE)))
        return ReturnCode.SUCCESS


class CloneCommand(Command):
    name = "clone"

    def execute(self) -> ReturnCode:
        # the walker clones whatever is missing; the visitor has nothing to add
        visitor = Visitor()
        self.walker.traverse(visitor, self.directory)
        if not visitor.return_code.ok:
            return self.fail(visitor.return_code)
        self.console.print("[green]Successfully cloned all dependencies[/green]")
        return ReturnCode.SUCCESS


class ListCommand(Command):
    name = "list"

    def execute(self) -> ReturnCode:
        visitor = ListVisitor()
        self.walker.traverse(visitor, self.directory)
        if not visitor.return_code.ok:
            return self.fail(visitor.return_code)

        table = Table(title="Projects in build order")
        table.add_column("#", justify="right")
        table.add_column("Project", style="bold")
        table.add_column("Directory", overflow="fold")
        table.add_column("Dependencies")
        for idx, (directory, manifest) in enumerate(visitor.projects, 1):
            deps = ", ".join(f"{d.name}@{d.branch}" for d in manifest.dependencies) or "-"
            table.add_row(str(idx), manifest.name or os.path.basename(directory), directory, deps)
        self.console.print(table)
        return ReturnCode.SUCCESS


class UpdateCommand(Command):
    """Checks out every dependency branch, then builds bottom-up and updates packages."""

    name = "update"

    def __init__(self, builder: Optional[BuildManager] = None, **kwargs):
        super().__init__(**kwargs)
        self.builder = builder or BuildManager(self.manifests, dry_run=self.dry_run)

    def execute(self) -> ReturnCode:
        checkout = CheckOutBranchVisitor(self.git)
        self.walker.traverse(checkout, self.directory)
        if not checkout.return_code.ok:
            return self.fail(checkout.return_code)

        build = BuildAndUpdateVisitor(self.builder)
        self.walker.traverse(build, self.directory)
        if not build.return_code.ok:
            return self.fail(build.return_code)

        if build.updated_packages:
            self.console.print("Updated packages:")
            for package in build.updated_packages:
                self.console.print(f"    {package}", markup=False, highlight=False)
        self.console.print("[green]Update complete![/green]")
        return ReturnCode.SUCCESS


COMMANDS = {
    InitCommand.name: InitCommand,
    ShowConfigCommand.name: ShowConfigCommand,
    CloneCommand.name: CloneCommand,
    UpdateCommand.name: UpdateCommand,
    ListCommand.name: ListCommand,
}
