"""Contentful CLI integration for importing generated content files.

Wraps ``contentful space import`` so a generated import document can be
pushed to a space from the same tool that produced it.

Requires the Contentful CLI to be installed and available in PATH.
Installation: npm install -g contentful-cli
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

CONTENTFUL_COMMAND = "contentful"
DEFAULT_IMPORT_TIMEOUT = 600


def is_contentful_cli_available() -> bool:
    """Check if the contentful CLI is available in PATH.

    Returns:
        True if the contentful command is available.
    """
    return shutil.which(CONTENTFUL_COMMAND) is not None


def build_import_command(
    space_id: str,
    environment_id: str,
    content_file: Path | str,
    management_token: str | None = None,
) -> list[str]:
    """Build the ``contentful space import`` command line.

    Args:
        space_id: Target space ID
        environment_id: Target environment ID
        content_file: Import document to upload
        management_token: Optional content management token

    Returns:
        Command as an argument list

    Raises:
        ValueError: If the space or environment ID is missing
    """
    if not space_id:
        raise ValueError("Contentful space ID is required")
    if not environment_id:
        raise ValueError("Contentful environment ID is required")

    cmd = [
        CONTENTFUL_COMMAND,
        "space",
        "import",
        "--space-id",
        space_id,
        "--environment-id",
        environment_id,
        "--content-file",
        str(content_file),
    ]
    if management_token:
        cmd.extend(["--management-token", management_token])
    return cmd


@dataclass
class ImportResult:
    """Result of a contentful import run.

    Attributes:
        success: Whether the command succeeded
        command: Command that was run (management token masked)
        returncode: Process exit code, if the process ran
        error: Error message if the import failed
    """

    success: bool
    command: list[str]
    returncode: int | None = None
    error: str | None = None


def _mask_command(cmd: list[str]) -> list[str]:
    masked = list(cmd)
    if "--management-token" in masked:
        index = masked.index("--management-token") + 1
        if index < len(masked):
            masked[index] = "****"
    return masked


class ContentfulImporter:
    """Runs ``contentful space import`` for generated content files.

    Example:
        >>> importer = ContentfulImporter(space_id="abc123", environment_id="master")
        >>> result = importer.run_import("outputs/import.json")
        >>> result.success
        True
    """

    def __init__(
        self,
        space_id: str,
        environment_id: str,
        management_token: str | None = None,
        timeout: int = DEFAULT_IMPORT_TIMEOUT,
    ) -> None:
        """Initialize the importer.

        Args:
            space_id: Target space ID
            environment_id: Target environment ID
            management_token: Optional content management token
            timeout: Maximum seconds to wait for the import

        Raises:
            RuntimeError: If the contentful CLI is not available
        """
        if not is_contentful_cli_available():
            raise RuntimeError(
                "contentful CLI not found in PATH. "
                "Install it with 'npm install -g contentful-cli'."
            )

        self.space_id = space_id
        self.environment_id = environment_id
        self.management_token = management_token
        self.timeout = timeout

    def run_import(self, content_file: Path | str) -> ImportResult:
        """Import a content file into the configured space.

        The CLI's own progress output is passed through to the terminal.

        Args:
            content_file: Import document to upload

        Returns:
            ImportResult describing the outcome
        """
        cmd = build_import_command(
            self.space_id,
            self.environment_id,
            content_file,
            management_token=self.management_token,
        )
        shown = _mask_command(cmd)
        logger.info("Running %s", " ".join(shown))

        try:
            completed = subprocess.run(cmd, timeout=self.timeout)
        except subprocess.TimeoutExpired:
            logger.warning("contentful import timed out after %ds", self.timeout)
            return ImportResult(
                success=False,
                command=shown,
                error=f"Import timed out after {self.timeout}s",
            )
        except OSError as e:
            logger.warning("contentful import could not be started: %s", e)
            return ImportResult(success=False, command=shown, error=str(e))

        if completed.returncode != 0:
            return ImportResult(
                success=False,
                command=shown,
                returncode=completed.returncode,
                error=f"Command failed with exit code {completed.returncode}",
            )

        return ImportResult(success=True, command=shown, returncode=0)
