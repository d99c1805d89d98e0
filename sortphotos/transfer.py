"""
Execution of transfer plans against a backend.
"""

from pathlib import Path

from .constants import get_logger
from .file_operations import TransferBackend
from .models import TransferAction, TransferMode, TransferPlan


class TransferError(Exception):
    """A single file could not be copied, moved or removed."""

    def __init__(self, message: str, source: Path):
        super().__init__(message)
        self.source = source


class TransferExecutor:
    """Carries out copy/move plans and duplicate cleanup for one run."""

    def __init__(self, backend: TransferBackend, mode: TransferMode):
        self.backend = backend
        self.mode = mode
        self.logger = get_logger()

    @property
    def prefix(self) -> str:
        return "[FAKE] " if self.backend.dry_run else ""

    def action_for_mode(self) -> TransferAction:
        return TransferAction.MOVE if self.mode == TransferMode.MOVE else TransferAction.COPY

    def execute(self, plan: TransferPlan) -> None:
        """Copy or move plan.source to plan.destination.

        A RENAME plan already carries the suffixed destination and is
        transferred with the run's mode. Raises TransferError on failure.
        """
        if plan.action == TransferAction.RENAME:
            action = self.action_for_mode()
        elif plan.action in (TransferAction.COPY, TransferAction.MOVE):
            action = plan.action
        else:
            raise ValueError(f"Not a transfer action: {plan.action.value}")

        try:
            self.backend.ensure_directory(plan.destination.parent)
            if action == TransferAction.MOVE:
                self.backend.move_file(plan.source, plan.destination)
            else:
                self.backend.copy_file(plan.source, plan.destination)
        except OSError as e:
            self.logger.info(f"Failed to {action.value} {plan.source} -> {plan.destination}: {e}")
            raise TransferError(f"{action.value} failed: {e}", plan.source) from e

        self.logger.info(f"{self.prefix}{action.value.upper()}: {plan.source} -> {plan.destination}")

    def remove_duplicate(self, source: Path) -> None:
        """Delete a source whose content already exists at its destination."""
        try:
            self.backend.delete_file(source)
        except OSError as e:
            self.logger.info(f"Failed to remove duplicate {source}: {e}")
            raise TransferError(f"duplicate removal failed: {e}", source) from e

        self.logger.info(f"{self.prefix}DELETE duplicate: {source}")
