#!/usr/bin/env python3
"""
Error types for Elenchos

Every error is reported to the operator as console text and none of them
ends the command loop.
"""


class ElenchosError(Exception):
    """Base exception for Elenchos errors"""


class InvalidPathError(ElenchosError):
    """Raised when a scan target is not an existing directory"""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"{path} is not a valid directory!")


class NotAGitRepositoryError(ElenchosError):
    """Raised when a scan target has no git metadata directory"""

    def __init__(self, path: str, marker: str = ".git"):
        self.path = path
        self.marker = marker
        super().__init__(f'Not a valid git repo. Please include a "{marker}" folder')


class NoScanError(ElenchosError):
    """Raised when an action runs before any successful scan"""

    def __init__(self):
        super().__init__("Scan command has not been run. Please scan a directory first")


class UnrecognizedCommandError(ElenchosError):
    """Raised when a console line matches no command"""

    def __init__(self, line: str):
        self.line = line
        super().__init__("Error")
