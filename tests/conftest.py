"""
pytest configuration and fixtures for sortphotos tests.
"""

import io
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from sortphotos.config import RunConfig
from sortphotos.core import PhotoSorter
from sortphotos.file_operations import make_backend
from sortphotos.models import TransferMode


@dataclass
class CliResult:
    """Result from running CLI command."""
    exit_code: int
    output: str
    error: str


class CaptureTimes:
    """Stand-in for exiftool: capture times keyed by file name or full path."""

    def __init__(self):
        self.by_key: Dict[str, Optional[str]] = {}
        self.calls: List[Path] = []

    def __setitem__(self, key: str, value: Optional[str]) -> None:
        self.by_key[key] = value

    def __call__(self, path: Path) -> Optional[str]:
        self.calls.append(Path(path))
        if str(path) in self.by_key:
            return self.by_key[str(path)]
        return self.by_key.get(Path(path).name)


@pytest.fixture
def capture_times(monkeypatch):
    """Replace the exiftool collaborator with an in-memory table."""
    times = CaptureTimes()
    monkeypatch.setattr("sortphotos.core.read_capture_time", times)
    return times


@pytest.fixture
def target_dir(tmp_path):
    target = tmp_path / "out"
    target.mkdir()
    return target


@pytest.fixture
def make_sorter(target_dir, capture_times):
    """Build a PhotoSorter for the test target with overridable settings."""

    def build(**overrides) -> PhotoSorter:
        settings = dict(target=target_dir, recursive=False, mode=TransferMode.COPY,
                        fake=False, rename_on_conflict=True, unsupported_dir=None)
        settings.update(overrides)
        run_config = RunConfig(**settings)
        return PhotoSorter(run_config, backend=make_backend(run_config.fake),
                           capture_time_reader=capture_times)

    return build


@pytest.fixture
def test_config_path(tmp_path):
    """Test-specific config path in a clean directory."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir / "config.yml"


@pytest.fixture
def cli_runner(monkeypatch):
    """Create a CLI runner that captures output and uses test config."""

    def run_cli(*args, config_path=None, answer="n"):
        """Run sort-photos CLI with given arguments.

        Args:
            *args: Command line arguments (sources, target, --flags, etc)
            config_path: Optional config path for test isolation
            answer: Reply given to confirmation prompts

        Returns:
            CliResult with exit_code, output, and error
        """
        from sortphotos.cli import main
        from sortphotos.constants import get_console

        stdout = io.StringIO()
        stderr = io.StringIO()
        monkeypatch.setattr(sys, "stdout", stdout)
        monkeypatch.setattr(sys, "stderr", stderr)
        monkeypatch.setattr(sys, "argv", ['sort-photos'] + [str(a) for a in args])

        # Never block on confirmation prompts
        monkeypatch.setattr(get_console(), "input", lambda prompt="": answer)

        try:
            exit_code = main(config_path=config_path)
        except SystemExit as e:
            exit_code = e.code if e.code is not None else 0

        return CliResult(
            exit_code=exit_code,
            output=stdout.getvalue(),
            error=stderr.getvalue()
        )

    return run_cli


@pytest.fixture
def create_test_files(tmp_path):
    """Helper to create test files with specific properties."""

    def create_files(file_specs: List[dict], base: str = "source") -> Path:
        """Create test files based on specifications.

        Args:
            file_specs: List of dicts with keys:
                - name: path relative to the base directory
                - content: file content (optional)
            base: Name of the directory under tmp_path to create files in

        Returns:
            Path to directory containing created files
        """
        test_dir = tmp_path / base
        test_dir.mkdir(exist_ok=True)

        for spec in file_specs:
            file_path = test_dir / spec['name']
            file_path.parent.mkdir(parents=True, exist_ok=True)

            content = spec.get('content', b'test file content')
            if isinstance(content, str):
                file_path.write_text(content)
            else:
                file_path.write_bytes(content)

        return test_dir

    return create_files


@pytest.fixture
def assert_file_structure():
    """Helper to assert expected file structure."""

    def check_structure(base_path: Path, expected_structure: dict):
        """Assert that directory has expected structure.

        Args:
            base_path: Root directory to check
            expected_structure: Dict describing expected structure
                e.g., {
                    "2013": {
                        "05": {"02": ["img001.jpg"]}
                    }
                }
        """
        def check_level(path: Path, structure: dict):
            for name, value in structure.items():
                item_path = path / name
                assert item_path.exists(), f"Expected {item_path} to exist"
                assert item_path.is_dir(), f"Expected {item_path} to be a directory"

                if isinstance(value, dict):
                    check_level(item_path, value)
                else:
                    actual_files = sorted(f.name for f in item_path.iterdir() if f.is_file())
                    assert actual_files == sorted(value), \
                        f"Expected files {sorted(value)} in {item_path}, got {actual_files}"

        check_level(base_path, expected_structure)

    return check_structure
