from __future__ import annotations

from typing import Dict

from .errors import ControlFieldError


def parse_fields(text: str) -> Dict[str, str]:
    """Parse Debian control text into a field mapping.

    Each field is a ``Key: value`` line. Lines starting with a space or tab
    continue the previous field; their text (minus the first character) is
    appended after a newline. Blank lines are ignored.
    """
    fields: Dict[str, str] = {}
    prev = None
    for line_no, line in enumerate(text.split("\n"), start=1):
        stripped = line.strip()
        if not stripped:
            continue
        if line[0] in (" ", "\t"):
            if prev is None:
                raise ControlFieldError(f"continuation line without a field at line {line_no}", line_no)
            fields[prev] += "\n" + line[1:]
            continue
        key, sep, value = stripped.partition(": ")
        if not sep:
            raise ControlFieldError(f"invalid control field at line {line_no}: {stripped!r}", line_no)
        fields[key] = value
        prev = key
    return fields
