"""
Configuration management for sortphotos.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from .constants import PROGRAM, get_logger
from .models import TransferMode


@dataclass(frozen=True)
class RunConfig:
    """Immutable settings for one run, built once by the CLI."""

    target: Path
    recursive: bool = False
    mode: TransferMode = TransferMode.COPY
    fake: bool = False
    rename_on_conflict: bool = True
    unsupported_dir: Optional[str] = None  # Sub-tree of target for dateless files


class Config:
    """Manages configuration file for storing user preferences."""

    def __init__(self, config_path: Optional[Path] = None):
        # Default config location: ~/.<PROGRAM>/config.yml
        if config_path:
            self.config_path = Path(config_path)
        else:
            self.config_path = Path.home() / f".{PROGRAM}" / "config.yml"
        self.program_root = self.config_path.parent
        self.data = self._load_config()

    def _load_config(self) -> Dict:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            return {}

        try:
            with open(self.config_path, 'r') as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            get_logger().warning(f"Could not load config: {e}")
            return {}

        if not isinstance(data, dict):
            return {}
        return data

    def save_config(self) -> None:
        """Save current configuration to file."""
        try:
            self.program_root.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, 'w') as f:
                yaml.safe_dump(self.data, f, default_flow_style=False)
        except OSError as e:
            get_logger().error(f"Could not save config: {e}")

    def get_last_sources(self) -> List[str]:
        """Get the source paths used by the previous run."""
        sources = self.data.get('last_sources') or []
        if isinstance(sources, str):
            return [sources]
        return [str(s) for s in sources]

    def get_last_target(self) -> Optional[str]:
        """Get the target path used by the previous run."""
        return self.data.get('last_target')

    def get_recursive(self) -> bool:
        return bool(self.data.get('recursive', False))

    def get_transfer_mode(self) -> TransferMode:
        """Get the saved copy/move mode (default: copy)."""
        try:
            return TransferMode(self.data.get('transfer_mode', TransferMode.COPY.value))
        except ValueError:
            return TransferMode.COPY

    def get_rename(self) -> bool:
        """Get the rename-on-conflict setting (default: True)."""
        return bool(self.data.get('rename', True))

    def update_paths(self, sources: List[str], target: str) -> None:
        """Update and save the last used paths."""
        self.data['last_sources'] = list(sources)
        self.data['last_target'] = target
        self.save_config()

    def update_recursive(self, recursive: bool) -> None:
        self.data['recursive'] = recursive
        self.save_config()

    def update_transfer_mode(self, mode: TransferMode) -> None:
        """Update and save the copy/move mode."""
        self.data['transfer_mode'] = mode.value
        self.save_config()

    def update_rename(self, rename: bool) -> None:
        self.data['rename'] = rename
        self.save_config()
