"""
SRT to plain text conversion.

Drops cue numbers, time-range lines and WEBVTT headers and keeps the
caption lines in their original order.
"""

import re
from typing import Optional

TIME_RANGE_SEPARATOR = "-->"
FORMAT_HEADER = "WEBVTT"

_SEQUENCE_RE = re.compile(r"^\d+$")


def _is_caption_line(line: str) -> bool:
    if not line:
        return False
    if _SEQUENCE_RE.match(line):
        return False
    if TIME_RANGE_SEPARATOR in line:
        return False
    if line.startswith(FORMAT_HEADER):
        return False
    return True


def parse_srt_to_text(srt_content: Optional[str]) -> str:
    """
    Convert SRT markup to plain text, one caption line per output line.

    Args:
        srt_content: SRT (or WEBVTT-like) subtitle text, may be None

    Returns:
        Caption text with trailing whitespace stripped, "" for blank input
    """
    if not srt_content or not srt_content.strip():
        return ""

    lines = []
    for raw_line in srt_content.split("\n"):
        line = raw_line.strip()
        if _is_caption_line(line):
            lines.append(line + "\n")

    return "".join(lines).rstrip()
