import io
import os

import pytest
import yaml
from rich.console import Console

from repodeps.modules.config import config

# keep test runs out of the user's log file and off the terminal
config.update("logging", log_to_file=False, log_to_console=False)

from repodeps.modules.returncode import ReturnCode  # noqa: E402
from repodeps.modules.visitors import Visitor  # noqa: E402


def write_manifest(directory, name=None, dependencies=None, **extra):
    os.makedirs(directory, exist_ok=True)
    data = {"name": name or os.path.basename(str(directory))}
    data.update(extra)
    data["dependencies"] = dependencies or []
    with open(os.path.join(directory, "repodeps.yaml"), "w", encoding="utf-8") as fh:
        yaml.safe_dump(data, fh, sort_keys=False)
    return str(directory)


def dep(name, directory, url=None, branch="main"):
    return {"name": name, "directory": directory, "url": url or f"https://example.com/{name}.git", "branch": branch}


class FakeGit:
    """Stands in for Git; cloning lays down the manifest registered for the url."""

    def __init__(self, remotes=None, clone_code=ReturnCode.SUCCESS, checkout_code=ReturnCode.SUCCESS):
        self.remotes = remotes or {}
        self.clone_code = clone_code
        self.checkout_code = checkout_code
        self.clones = []
        self.checkouts = []

    def clone(self, url, directory, branch):
        self.clones.append((url, directory, branch))
        if not self.clone_code.ok:
            return self.clone_code
        remote = self.remotes.get(url)
        if remote is None:
            os.makedirs(directory, exist_ok=True)
        else:
            write_manifest(directory, **remote)
        return ReturnCode.SUCCESS

    def checkout(self, directory, branch):
        self.checkouts.append((directory, branch))
        return self.checkout_code


class RecordingVisitor(Visitor):
    def __init__(self, dependency_code=ReturnCode.SUCCESS, project_code=ReturnCode.SUCCESS):
        super().__init__()
        self.dependency_code = dependency_code
        self.project_code = project_code
        self.calls = []

    @property
    def projects(self):
        return [c[1] for c in self.calls if c[0] == "project"]

    @property
    def dependencies(self):
        return [(c[1], c[2].name) for c in self.calls if c[0] == "dependency"]

    def visit_dependency(self, directory, dependency):
        self.calls.append(("dependency", directory, dependency))
        return self.dependency_code

    def visit_project(self, directory, manifest):
        self.calls.append(("project", directory, manifest))
        return self.project_code


def real(path):
    return os.path.normcase(os.path.realpath(str(path)))


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=200, color_system=None)


def console_lines(console):
    return [line.rstrip() for line in console.file.getvalue().splitlines()]
