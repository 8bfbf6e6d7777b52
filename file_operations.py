#!/usr/bin/env python3
"""
File Operations Module for Elenchos

Plans and executes the two bulk actions on scan results: writing placeholder
README files into empty directories and opening a file browser on the folder
of each oversized file. Operations are planned first, then executed as a
batch in which one failure does not stop the rest.
"""

import pathlib
import subprocess
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional


class OperationType(Enum):
    """Type of file operation"""

    WRITE_README = "write_readme"
    OPEN_LOCATION = "open_location"


@dataclass
class FileOperation:
    """Represents a planned file operation"""

    target_path: pathlib.Path
    operation_type: OperationType
    content: str = ""
    identifier: str = ""  # Optional identifier for tracking

    def __post_init__(self):
        if not self.identifier:
            self.identifier = str(self.target_path)


@dataclass
class OperationResult:
    """Result of a file operation"""

    operation: FileOperation
    success: bool
    error_message: Optional[str] = None


def file_browser_command(folder: pathlib.Path) -> list[str]:
    """Build the platform command that opens a file browser on a folder"""
    if sys.platform == "win32":
        return ["explorer.exe", str(folder)]
    if sys.platform == "darwin":
        return ["open", str(folder)]
    return ["xdg-open", str(folder)]


class FileOperations:
    """Bulk action handler for scan results"""

    def __init__(
        self,
        progress_callback: Optional[Callable[[str], None]] = None,
        readme_name: str = "README.md",
        readme_content: str = "",
    ):
        """Initialize with optional progress callback and placeholder document"""
        self.progress_callback = progress_callback
        self.readme_name = readme_name
        self.readme_content = readme_content

    def execute_operation(self, operation: FileOperation) -> OperationResult:
        """Execute a single file operation"""
        try:
            if operation.operation_type == OperationType.WRITE_README:
                # Overwrites an existing file of the same name
                operation.target_path.write_text(operation.content, encoding="utf-8")

            elif operation.operation_type == OperationType.OPEN_LOCATION:
                # Launch without waiting for the browser window to close
                subprocess.Popen(file_browser_command(operation.target_path))

            return OperationResult(operation=operation, success=True)

        except Exception as e:
            return OperationResult(operation=operation, success=False, error_message=str(e))

    def execute_batch_operations(
        self, operations: list[FileOperation]
    ) -> tuple[list[OperationResult], list[OperationResult]]:
        """Execute multiple file operations and return success/failure lists"""
        if not operations:
            return [], []

        successful_operations = []
        failed_operations = []

        for i, operation in enumerate(operations):
            if self.progress_callback:
                self.progress_callback(f"Processing {operation.identifier} ({i + 1}/{len(operations)})")

            result = self.execute_operation(operation)

            if result.success:
                successful_operations.append(result)
            else:
                failed_operations.append(result)

        return successful_operations, failed_operations

    def plan_operation(
        self, target_path: pathlib.Path, operation_type: OperationType, content: str = "", identifier: str = ""
    ) -> FileOperation:
        """Create a planned file operation"""
        return FileOperation(
            target_path=target_path,
            operation_type=operation_type,
            content=content,
            identifier=identifier or str(target_path),
        )

    def plan_readme_operations(self, directories: list[str]) -> list[FileOperation]:
        """Plan a placeholder README for each directory that still exists"""
        operations = []
        for directory in directories:
            directory_path = pathlib.Path(directory)
            if not directory_path.is_dir():
                continue
            operations.append(
                self.plan_operation(
                    directory_path / self.readme_name,
                    OperationType.WRITE_README,
                    content=self.readme_content,
                    identifier=directory,
                )
            )
        return operations

    def plan_open_operations(self, files: list[str]) -> list[FileOperation]:
        """Plan one file browser window per file that still exists, on its folder"""
        operations = []
        for file_path in files:
            path = pathlib.Path(file_path)
            if not path.is_file():
                continue
            operations.append(self.plan_operation(path.parent, OperationType.OPEN_LOCATION, identifier=file_path))
        return operations
