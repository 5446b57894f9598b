# What it does: Computes a line-level edit script between two texts and renders it for `mini-vcs diff`
# How it does: Builds a longest-common-subsequence length table, then walks it back from the bottom-right corner to the origin. When keeping an added line scores as well as dropping a removed one, the added line wins, so the output is deterministic
# What data structure it uses: 2-D dynamic programming table stored as one flat list (index i * width + j), List (of lines and of edits)

from collections import namedtuple
from enum import Enum


class LineKind(Enum):
    UNCHANGED = ' '
    ADDED = '+'
    REMOVED = '-'


DiffLine = namedtuple('DiffLine', ['kind', 'line'])


def split_lines(text):
    """
    Splits on line feeds only. A final separator leaves one empty trailing
    element, and the empty text is a single empty line.
    """
    return text.split('\n')


def _lcs_table(old_lines, new_lines):
    width = len(new_lines) + 1
    table = [0] * ((len(old_lines) + 1) * width)

    for i in range(1, len(old_lines) + 1):
        row = i * width
        prev_row = row - width
        for j in range(1, width):
            if old_lines[i - 1] == new_lines[j - 1]:
                table[row + j] = table[prev_row + j - 1] + 1
            else:
                table[row + j] = max(table[prev_row + j], table[row + j - 1])

    return table, width


def diff_lines(old_lines, new_lines):  # Edit script between two line lists, in document order
    table, width = _lcs_table(old_lines, new_lines)

    script = []
    i, j = len(old_lines), len(new_lines)
    while i > 0 or j > 0:
        if i > 0 and j > 0 and old_lines[i - 1] == new_lines[j - 1]:
            script.append(DiffLine(LineKind.UNCHANGED, old_lines[i - 1]))
            i -= 1
            j -= 1
        elif j > 0 and (i == 0 or table[i * width + j - 1] >= table[(i - 1) * width + j]):
            script.append(DiffLine(LineKind.ADDED, new_lines[j - 1]))
            j -= 1
        else:
            script.append(DiffLine(LineKind.REMOVED, old_lines[i - 1]))
            i -= 1

    script.reverse()
    return script


def diff(old_text, new_text):
    return diff_lines(split_lines(old_text), split_lines(new_text))


def has_changes(script):
    return any(entry.kind is not LineKind.UNCHANGED for entry in script)


def apply_diff(old_text, script):
    """
    Rebuilds the new text from the old one and an edit script.
    Raises ValueError if the script does not describe `old_text`.
    """
    old_lines = split_lines(old_text)
    result = []
    position = 0

    for entry in script:
        if entry.kind is LineKind.ADDED:
            result.append(entry.line)
            continue
        if position >= len(old_lines) or old_lines[position] != entry.line:
            raise ValueError(f"edit script does not match old text at line {position + 1}")
        if entry.kind is LineKind.UNCHANGED:
            result.append(entry.line)
        position += 1

    if position != len(old_lines):
        raise ValueError("edit script does not consume the whole old text")
    return '\n'.join(result)


def format_diff(path, script):  # Path header followed by one prefixed line per edit
    lines = [f"--- a/{path}", f"+++ b/{path}"]
    for entry in script:
        lines.append(f"{entry.kind.value} {entry.line}")
    return lines


def decode_text(content):  # Blob bytes as text for diffing
    return content.decode('utf-8', errors='replace')
