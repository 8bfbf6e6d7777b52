#!/usr/bin/env python3
"""
Console command parsing for Elenchos

Splits one console line into a command word and its argument and validates
it against the known command variants:

    /scan <path>    path limited to letters, digits, '-', '/', '\\', ':', '_' and whitespace
    /init           no argument
    /open           no argument

Matching is case-insensitive.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from errors import UnrecognizedCommandError

ALLOWED_PATH_PATTERN = re.compile(r"[a-z0-9\-/\\\s:_]+", re.IGNORECASE | re.ASCII)


class CommandType(Enum):
    SCAN = "/scan"
    INIT = "/init"
    OPEN = "/open"


# Whether each command takes an argument
_TAKES_ARGUMENT = {
    CommandType.SCAN: True,
    CommandType.INIT: False,
    CommandType.OPEN: False,
}


@dataclass(frozen=True)
class Command:
    command_type: CommandType
    argument: Optional[str] = None


def tokenize(line: str) -> tuple[str, str]:
    """Split a line into (command word, argument remainder)"""
    parts = line.strip().split(maxsplit=1)
    if not parts:
        return "", ""
    word = parts[0]
    argument = parts[1].strip() if len(parts) > 1 else ""
    return word, argument


def is_allowed_path(path: str) -> bool:
    """Check that a scan path uses only the permitted characters"""
    return bool(path) and ALLOWED_PATH_PATTERN.fullmatch(path) is not None


def parse_command(line: Optional[str]) -> Command:
    """Parse a console line into a command

    Raises:
        UnrecognizedCommandError: the line is blank, names no known command,
            or carries a missing or malformed argument
    """
    if line is None:
        raise UnrecognizedCommandError("")

    word, argument = tokenize(line)
    command_type = next((c for c in CommandType if c.value == word.lower()), None)
    if command_type is None:
        raise UnrecognizedCommandError(line)

    if _TAKES_ARGUMENT[command_type]:
        if not is_allowed_path(argument):
            raise UnrecognizedCommandError(line)
        return Command(command_type, argument)

    if argument:
        raise UnrecognizedCommandError(line)
    return Command(command_type)
