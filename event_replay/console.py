"""
Colored console output for operator feedback.

Every call is independent: the style picks an ANSI color and the stream decides
whether color is used at all, so there is no global logger to configure.
"""

from __future__ import annotations

import os
import sys
from enum import Enum
from typing import Optional, TextIO


class Style(Enum):
    PLAIN = ""
    INFO = "\033[94m"
    OK = "\033[92m"
    WARNING = "\033[93m"
    ERROR = "\033[91m"


RESET = "\033[0m"


def use_color(stream: TextIO) -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def log(style: Style, message: object, file: Optional[TextIO] = None) -> None:
    stream = file if file is not None else sys.stdout
    text = str(message)
    if style is not Style.PLAIN and use_color(stream):
        text = f"{style.value}{text}{RESET}"
    print(text, file=stream)
