#!/usr/bin/env python3
"""
Elenchos — Ancient Greek ἔλεγχος (scrutiny, examination)

An interactive repository validator that checks a git checkout before it is
pushed: it reports directories git cannot track because they are empty and
files too large for hosting services, then optionally fills the empty
directories with placeholder READMEs or opens the folders of the large files.

Usage:
    elenchos                           # Start the interactive console
    elenchos <path>                    # Scan <path> immediately, then continue interactively
    elenchos --threshold-mb 50         # Report files of 50 MB (decimal) and above

Console commands:
    /scan <directory>                  # Scan a repository checkout
    /init                              # Write README.md into every empty directory
    /open                              # Open a file browser on each oversized file's folder
"""

import argparse
import os
import sys
from typing import Callable, Optional

try:
    import termios
    import tty

    _HAS_TERMIOS = True
except ImportError:
    _HAS_TERMIOS = False

from rich.markup import escape

from auxiliary import format_path_for_display
from command_parser import CommandType, parse_command
from console_ui import ConsoleUI
from elenchos_config import ElenchosConfig
from errors import ElenchosError, InvalidPathError, NoScanError, UnrecognizedCommandError
from file_operations import FileOperation, FileOperations
from repo_scanner import ScanSession, filter_empty_directories, filter_oversized_files, scan_repository

PREFIX = "#\t"


def _get_single_key() -> str:
    """Read a single keypress without requiring Enter.

    Falls back to input() if the terminal doesn't support raw mode.
    """
    if not _HAS_TERMIOS:
        return input("> ").strip()[:1]
    try:
        fd = sys.stdin.fileno()
        old_settings = termios.tcgetattr(fd)
        try:
            tty.setraw(fd)
            ch = sys.stdin.read(1)
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)
    except (termios.error, OSError, ValueError):
        return input("> ").strip()[:1]

    # Raw mode delivers Ctrl+C and Ctrl+D as plain characters
    if ch == "\x03":
        raise KeyboardInterrupt
    if ch in ("", "\x04"):
        raise EOFError
    return ch


class Elenchos:
    """Main application class for the Elenchos repository validator."""

    def __init__(
        self,
        args: Optional[argparse.Namespace] = None,
        ui: Optional[ConsoleUI] = None,
        config: Optional[ElenchosConfig] = None,
        read_line: Optional[Callable[[], str]] = None,
        read_key: Optional[Callable[[], str]] = None,
    ):
        self.args = args
        self.config = config or ElenchosConfig.from_args(args)
        self.ui = ui or ConsoleUI()
        self.session = ScanSession()
        self._read_line = read_line or input
        self._read_key = read_key or _get_single_key
        self.file_ops = FileOperations(
            readme_name=self.config.readme_name,
            readme_content=self.config.readme_content,
        )

    # -- output --------------------------------------------------------------

    def output_instructions(self):
        self.ui.print_separator()
        self.ui.print_plain(f"{PREFIX}Use /scan <directory> to start a scan.")
        self.ui.print_plain(
            f"{PREFIX}Use /init to initialize all empty directory with a {escape(self.config.readme_name)} file."
        )
        self.ui.print_plain(
            f"{PREFIX}Use /open to open file explorer to each file over {self.config.threshold_label}"
        )
        self.ui.print_separator()

    def _report_unreadable(self, path: str, error: BaseException):
        self.ui.print_exception(path, error)

    def report(self, session: ScanSession):
        """Print counts plus the empty directories and oversized files of a scan"""
        directories = session.directories
        files = session.files
        empty_directories = filter_empty_directories(
            session.readable_entries, error_callback=self._report_unreadable
        )
        oversized_files = filter_oversized_files(
            session.readable_entries, self.config.threshold_mb, error_callback=self._report_unreadable
        )

        self.ui.print_plain(f"Total Directories            :\t{len(directories)}")
        self.ui.print_plain(f"Total Files                  :\t{len(files)}")
        self.ui.print_plain()

        self.ui.print_plain(f"Total Empty Directories      :\t{len(empty_directories)}")
        self.ui.print_plain()
        for entry in empty_directories:
            self.ui.print_warning(f"\t{escape(entry.path)}")
        self.ui.print_plain()

        label = f"Total Files Over {self.config.threshold_label}"
        self.ui.print_plain(f"{label:<29}:\t{len(oversized_files)}")
        self.ui.print_plain()
        for entry in oversized_files:
            self.ui.print_warning(f"\t{escape(entry.path)}")
        self.ui.print_plain()

    # -- commands ------------------------------------------------------------

    def process_scan(self, session: ScanSession, path: str) -> ScanSession:
        """Scan a repository and return the new session.

        Raises before touching anything when the path is rejected, so the
        caller keeps its previous session.
        """
        if not path or not os.path.isdir(path):
            raise InvalidPathError(path)
        self.ui.clear_screen()

        progress = self.ui.create_activity_progress()
        with progress:
            task = progress.add_task(f"Scanning {escape(format_path_for_display(path))}...", total=None)

            def on_progress(directories_listed: int):
                progress.update(task, description=f"Scanning... {directories_listed} dirs")

            new_session = scan_repository(
                path,
                marker=self.config.git_marker,
                error_callback=self._report_unreadable,
                progress_callback=on_progress,
            )

        self.ui.clear_screen()
        self.output_instructions()
        self.report(new_session)
        self.ui.print_info(
            f"Scan of {escape(format_path_for_display(new_session.root_path))} "
            f"completed in {new_session.scan_duration:.1f}s"
        )
        return new_session

    def _confirm(self, question: str) -> bool:
        """Ask until the operator presses Y or N"""
        while True:
            self.ui.print_plain(question)
            key = self._read_key()
            if key in ("y", "Y"):
                return True
            if key in ("n", "N"):
                return False

    def _execute_with_progress(self, operations: list[FileOperation]):
        """Run a batch of planned operations behind an activity spinner"""
        progress = self.ui.create_activity_progress()
        with progress:
            task = progress.add_task("Processing...", total=None)

            def on_progress(message: str):
                progress.update(task, description=escape(message))

            self.file_ops.progress_callback = on_progress
            try:
                return self.file_ops.execute_batch_operations(operations)
            finally:
                self.file_ops.progress_callback = None

    def process_init(self, session: ScanSession):
        """Write the placeholder README into every currently empty directory"""
        if session.is_empty:
            raise NoScanError()

        empty_directories = filter_empty_directories(
            session.readable_entries, error_callback=self._report_unreadable
        )
        question = (
            f"{len(empty_directories)} directories will be initialized with a "
            f"{escape(self.config.readme_name)} file. Are you sure? Y/N"
        )
        if not self._confirm(question):
            return

        operations = self.file_ops.plan_readme_operations([entry.path for entry in empty_directories])
        successful, failed = self._execute_with_progress(operations)
        for result in successful:
            self.ui.print_plain(
                f"{PREFIX}Adding {escape(self.config.readme_name)} to directory: {escape(result.operation.identifier)}"
            )
        if failed:
            self.ui.show_operation_summary(
                [], [(r.operation.identifier, r.error_message) for r in failed], "initialize"
            )

    def process_open(self, session: ScanSession):
        """Open a file browser on the folder of every currently oversized file"""
        if session.is_empty:
            raise NoScanError()

        oversized_files = filter_oversized_files(
            session.readable_entries, self.config.threshold_mb, error_callback=self._report_unreadable
        )
        if not self._confirm(f"{len(oversized_files)} file locations will be opened. Are you sure? Y/N"):
            return

        operations = self.file_ops.plan_open_operations([entry.path for entry in oversized_files])
        successful, failed = self._execute_with_progress(operations)
        if failed:
            self.ui.show_operation_summary(
                [r.operation.identifier for r in successful],
                [(r.operation.identifier, r.error_message) for r in failed],
                "open",
            )

    # -- command loop --------------------------------------------------------

    def handle_line(self, line: Optional[str]):
        """Dispatch one console line"""
        try:
            command = parse_command(line)
        except UnrecognizedCommandError as e:
            self.ui.print_error(str(e))
            self.ui.print_plain()
            return

        try:
            if command.command_type is CommandType.SCAN:
                self.session = self.process_scan(self.session, command.argument)
            elif command.command_type is CommandType.INIT:
                self.process_init(self.session)
            elif command.command_type is CommandType.OPEN:
                self.process_open(self.session)
        except ElenchosError as e:
            self.ui.print_error(escape(str(e)))

        self.output_instructions()

    def run(self):
        self.ui.print_header("Elenchos", "Repository validator for empty directories and oversized files")
        self.ui.show_configuration(
            {
                "Oversized threshold": f"{self.config.threshold_mb:g} MB",
                "Repository marker": self.config.git_marker,
                "Placeholder file": self.config.readme_name,
            }
        )
        self.output_instructions()

        path = getattr(self.args, "path", None)
        if path:
            self.handle_line(f"/scan {path}")

        while True:
            try:
                line = self._read_line()
                self.handle_line(line)
            except (EOFError, KeyboardInterrupt):
                self.ui.print_plain()
                break


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="elenchos",
        description="Elenchos — repository validator for empty directories and oversized files",
    )
    parser.add_argument("path", nargs="?", help="Repository checkout to scan at startup")
    parser.add_argument(
        "--threshold-mb",
        type=float,
        default=None,
        help="Report files of this many decimal megabytes and above (default: 100)",
    )
    return parser


def main():
    parser = build_parser()
    args = parser.parse_args()
    try:
        config = ElenchosConfig.from_args(args)
    except ValueError as e:
        parser.error(str(e))
    app = Elenchos(args, config=config)
    app.run()


if __name__ == "__main__":
    main()
