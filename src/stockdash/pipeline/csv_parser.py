"""
Line-oriented CSV parsing for the positional company metadata table.

A field may be wrapped in double quotes to keep commas literal, and ``""`` inside
quotes is one literal quote. Whitespace around unquoted content is trimmed while
whitespace inside quotes is kept.

An opening quote that is never closed is not an error: the remainder of the line
is read as quoted text, so later commas do not split fields.
"""

from typing import List


def _finish_field(chars: List[str], quoted: List[bool]) -> str:
    start = 0
    end = len(chars)
    while start < end and not quoted[start] and chars[start].isspace():
        start += 1
    while end > start and not quoted[end - 1] and chars[end - 1].isspace():
        end -= 1
    return "".join(chars[start:end])


def parse_csv_line(line: str) -> List[str]:
    """
    Split one CSV line into its field values.

    Args:
        line: A single line of text, without its line terminator

    Returns:
        One string per comma-separated field position, including empty fields
    """
    fields: List[str] = []
    chars: List[str] = []
    quoted: List[bool] = []
    in_quotes = False

    i = 0
    while i < len(line):
        char = line[i]
        if char == '"':
            if in_quotes and i + 1 < len(line) and line[i + 1] == '"':
                chars.append('"')
                quoted.append(True)
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append(_finish_field(chars, quoted))
            chars, quoted = [], []
        else:
            chars.append(char)
            quoted.append(in_quotes)
        i += 1

    fields.append(_finish_field(chars, quoted))
    return fields


def read_csv_lines(text: str) -> List[List[str]]:
    """
    Parse a whole CSV document line by line, dropping blank lines.

    Quoted fields cannot span lines.
    """
    return [parse_csv_line(line) for line in text.split("\n") if line.strip()]
