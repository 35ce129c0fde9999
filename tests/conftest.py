import os
import shutil
import tempfile

import pytest

import cmdorg.config


@pytest.fixture(autouse=True)
def clean_cmdorg_env(monkeypatch, tmp_path):
    """
    Keep every test away from the real configuration.

    Removes CMDORG_ environment variables, points HOME at a temp directory,
    runs from an empty working directory and drops the cached config.
    """
    for key in list(os.environ.keys()):
        if key.startswith("CMDORG_"):
            monkeypatch.delenv(key, raising=False)

    mock_home = tmp_path / "home"
    mock_home.mkdir()
    monkeypatch.setenv("HOME", str(mock_home))

    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)

    monkeypatch.setattr(cmdorg.config, "_config", None)

    return tmp_path


@pytest.fixture
def temp_db():
    """Create a temporary database file path."""
    temp_dir = tempfile.mkdtemp(prefix="cmdorg_test_db_")
    db_path = os.path.join(temp_dir, "test.db")
    yield db_path
    shutil.rmtree(temp_dir)


@pytest.fixture
def storage(temp_db):
    """An initialized, empty CommandStorage."""
    from cmdorg.db import CommandStorage

    store = CommandStorage(path=temp_db)
    yield store
    store.close()


@pytest.fixture
def service(storage):
    """A CommandService over an empty store."""
    from cmdorg.service import CommandService

    return CommandService(storage)


@pytest.fixture
def populated_service(service):
    """A CommandService holding git, ls and ssh commands."""
    service.insert_command("git pull", "git_pull", "Pulls changes")
    service.insert_command("ls -a", "ls_all")
    service.insert_command("ls .", "ls_current")
    service.insert_command("ssh --version", "ssh_version", "Just a ssh version")
    return service


@pytest.fixture
def sample_commands():
    """Commands as they come back from storage: git x1, ls x4."""
    from cmdorg.models import Command

    return [
        Command(alias="git_pull", executable="git", command="git pull", description="Pulls changes"),
        Command(alias="ls_current", executable="ls", command="ls .", description="Just a ls"),
        Command(alias="ls_all", executable="ls", command="ls -a", description="Just a ls all"),
        Command(alias="ls_previous", executable="ls", command="ls ..", description="Just a ls previous"),
        Command(alias="ls_version", executable="ls", command="ls --version"),
    ]


@pytest.fixture
def sample_toml(tmp_path):
    """A bulk import file with two valid records and one duplicate alias."""
    path = tmp_path / "commands.toml"
    path.write_text(
        '[[commands]]\n'
        'command = "git pull"\n'
        'alias = "git_pull"\n'
        'description = "Pulls changes"\n'
        '\n'
        '[[commands]]\n'
        'command = "ls -a"\n'
        'alias = "ls_all"\n'
        '\n'
        '[[commands]]\n'
        'command = "ls ."\n'
        'alias = "git_pull"\n',
        encoding="utf-8",
    )
    return path
