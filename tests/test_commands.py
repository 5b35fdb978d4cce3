from conftest import FakeGit, console_lines, dep, real, write_manifest
from repodeps.modules.build import BuildManager
from repodeps.modules.commands import (
    CloneCommand,
    InitCommand,
    ListCommand,
    ShowConfigCommand,
    UpdateCommand,
)
from repodeps.modules.manifest import ManifestManager
from repodeps.modules.returncode import ReturnCode
from repodeps.modules.visitors import BuildAndUpdateVisitor, CheckOutBranchVisitor
from repodeps.modules.walker import DependencyWalker


class ScriptedWalker:
    """Replaces the real walker; each traverse call runs the next scripted step."""

    def __init__(self, *steps):
        self.steps = list(steps)
        self.visitors = []

    def traverse(self, visitor, directory):
        self.visitors.append(visitor)
        self.steps.pop(0)(visitor)


def set_code(code, packages=()):
    def step(visitor):
        if packages:
            visitor.updated_packages.extend(packages)
        visitor.return_code = code
    return step


def update_command(tmp_path, console, walker):
    return UpdateCommand(directory=str(tmp_path), console=console, git=FakeGit(), walker=walker)


def test_update_stops_when_checkout_fails(tmp_path, console):
    walker = ScriptedWalker(set_code(ReturnCode.GIT_COMMAND_FAILED))
    code = update_command(tmp_path, console, walker).execute()

    assert code == ReturnCode.GIT_COMMAND_FAILED
    assert len(walker.visitors) == 1
    assert isinstance(walker.visitors[0], CheckOutBranchVisitor)
    assert "Update complete!" not in console.file.getvalue()


def test_update_returns_build_failure(tmp_path, console):
    walker = ScriptedWalker(set_code(ReturnCode.SUCCESS), set_code(ReturnCode.BUILD_SCRIPT_FAILED))
    code = update_command(tmp_path, console, walker).execute()

    assert code == ReturnCode.BUILD_SCRIPT_FAILED
    assert isinstance(walker.visitors[0], CheckOutBranchVisitor)
    assert isinstance(walker.visitors[1], BuildAndUpdateVisitor)
    assert "Updated packages" not in console.file.getvalue()


def test_update_reports_updated_packages(tmp_path, console):
    packages = ["P.0.1.2", "P.Busi.3.1.2"]
    walker = ScriptedWalker(set_code(ReturnCode.SUCCESS), set_code(ReturnCode.SUCCESS, packages))
    code = update_command(tmp_path, console, walker).execute()

    assert code == ReturnCode.SUCCESS
    assert console_lines(console) == [
        "Updated packages:",
        "    P.0.1.2",
        "    P.Busi.3.1.2",
        "Update complete!",
    ]


def test_update_without_packages_only_reports_completion(tmp_path, console):
    walker = ScriptedWalker(set_code(ReturnCode.SUCCESS), set_code(ReturnCode.SUCCESS))
    assert update_command(tmp_path, console, walker).execute() == ReturnCode.SUCCESS
    assert console_lines(console) == ["Update complete!"]


def test_update_end_to_end(tmp_path, console):
    lib_url = "https://example.com/lib.git"
    git = FakeGit(remotes={lib_url: {
        "name": "lib",
        "build": {"script": "mkdir -p out && touch out/lib.1.0.tar.gz"},
        "packages": {"directory": "out"},
    }})
    write_manifest(
        tmp_path / "app", "app", [dep("lib", "../lib", url=lib_url, branch="release")],
        update={"command": "echo {package} >> applied.txt"},
    )
    manifests = ManifestManager()
    command = UpdateCommand(
        directory=str(tmp_path / "app"),
        console=console,
        manifests=manifests,
        git=git,
        walker=DependencyWalker(manifests, git),
        builder=BuildManager(manifests),
    )

    assert command.execute() == ReturnCode.SUCCESS
    assert git.checkouts == [(real(tmp_path / "lib"), "release")]
    assert console_lines(console) == ["Updated packages:", "    lib.1.0", "Update complete!"]
    assert (tmp_path / "app" / "applied.txt").read_text().split() == ["lib.1.0"]


def test_clone_clones_missing_dependencies(tmp_path, console):
    git = FakeGit(remotes={"https://example.com/lib.git": {"name": "lib"}})
    write_manifest(tmp_path / "app", "app", [dep("lib", "../lib")])
    command = CloneCommand(directory=str(tmp_path / "app"), console=console, git=git)

    assert command.execute() == ReturnCode.SUCCESS
    assert (tmp_path / "lib" / "repodeps.yaml").exists()
    assert "Successfully cloned all dependencies" in console.file.getvalue()


def test_clone_failure_is_reported(tmp_path, console):
    git = FakeGit(clone_code=ReturnCode.GIT_COMMAND_FAILED)
    write_manifest(tmp_path / "app", "app", [dep("lib", "../lib")])
    command = CloneCommand(directory=str(tmp_path / "app"), console=console, git=git)

    assert command.execute() == ReturnCode.GIT_COMMAND_FAILED
    assert "clone failed" in console.file.getvalue()


def test_init_creates_manifest_once(tmp_path, console):
    command = InitCommand(directory=str(tmp_path), console=console, git=FakeGit(), build_script="make")
    assert command.execute() == ReturnCode.SUCCESS
    assert ManifestManager().load(str(tmp_path)).build_script == "make"
    assert command.execute() == ReturnCode.MANIFEST_ALREADY_EXISTS


def test_show_config(tmp_path, console):
    write_manifest(tmp_path / "app", "app", [dep("lib", "../lib")])
    command = ShowConfigCommand(directory=str(tmp_path / "app"), console=console, git=FakeGit())
    assert command.execute() == ReturnCode.SUCCESS
    output = console.file.getvalue()
    assert "name: app" in output
    assert "../lib" in output


def test_show_config_without_manifest(tmp_path, console):
    (tmp_path / ".git").mkdir()
    command = ShowConfigCommand(directory=str(tmp_path), console=console, git=FakeGit())
    assert command.execute() == ReturnCode.MANIFEST_NOT_FOUND


def test_list_prints_projects_in_build_order(tmp_path, console):
    write_manifest(tmp_path / "lib", "LibProject")
    write_manifest(tmp_path / "app", "AppProject", [dep("lib", "../lib")])
    command = ListCommand(directory=str(tmp_path / "app"), console=console, git=FakeGit())

    assert command.execute() == ReturnCode.SUCCESS
    output = console.file.getvalue()
    assert output.index("LibProject") < output.index("AppProject")
    assert "lib@main" in output
