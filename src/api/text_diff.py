#!/usr/bin/env python3
"""
Text Diff Engine
Line-based comparison of two texts with LCS alignment, a lookahead fallback
for large inputs, statistics and unified diff rendering
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

# Combined line count at which the O(n*m) LCS table is abandoned for the
# greedy lookahead scan
LCS_LINE_THRESHOLD = 1000

# How far the greedy scan searches ahead for a resynchronising line
LOOKAHEAD_WINDOW = 5


class DiffLineType(str, Enum):
    EQUAL = 'equal'
    ADDED = 'added'
    REMOVED = 'removed'


@dataclass(frozen=True)
class DiffLine:
    """One row of an alignment result."""
    type: DiffLineType
    content: str
    line_number_1: Optional[int] = None  # original text, equal/removed only
    line_number_2: Optional[int] = None  # modified text, equal/added only

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type.value,
            'content': self.content,
            'line_num_1': self.line_number_1,
            'line_num_2': self.line_number_2
        }


@dataclass(frozen=True)
class DiffStats:
    added: int = 0
    removed: int = 0
    unchanged: int = 0
    total: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            'added': self.added,
            'removed': self.removed,
            'unchanged': self.unchanged,
            'total': self.total
        }


@dataclass(frozen=True)
class DiffResult:
    """Complete result of comparing two texts."""
    lines: Tuple[DiffLine, ...] = ()
    stats: DiffStats = field(default_factory=DiffStats)
    has_changes: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'lines': [line.to_dict() for line in self.lines],
            'stats': self.stats.to_dict(),
            'has_changes': self.has_changes
        }


@dataclass
class DiffOptions:
    """Comparison options. Only affect how lines are matched, never the output text."""
    ignore_whitespace: bool = False
    ignore_case: bool = False
    context_lines: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DiffOptions':
        """Build options from an API payload."""
        context_lines = data.get('context_lines')
        return cls(
            ignore_whitespace=bool(data.get('ignore_whitespace', False)),
            ignore_case=bool(data.get('ignore_case', False)),
            context_lines=int(context_lines) if context_lines is not None else None
        )


def process_text(text: str, options: Optional[DiffOptions] = None) -> str:
    """Normalize text into its comparison key according to the options"""
    options = options or DiffOptions()
    processed = text

    if options.ignore_case:
        processed = processed.lower()

    if options.ignore_whitespace:
        # Collapse whitespace runs to a single space
        processed = re.sub(r'\s+', ' ', processed).strip()

    return processed


def lcs(a: List[str], b: List[str]) -> List[List[int]]:
    """Build the longest common subsequence length table for two line lists"""
    m = len(a)
    n = len(b)
    dp = [[0] * (n + 1) for _ in range(m + 1)]

    for i in range(1, m + 1):
        for j in range(1, n + 1):
            if a[i - 1] == b[j - 1]:
                dp[i][j] = dp[i - 1][j - 1] + 1
            else:
                dp[i][j] = max(dp[i - 1][j], dp[i][j - 1])

    return dp


def generate_lcs_diff(lines1: List[str], lines2: List[str],
                      processed_lines1: List[str], processed_lines2: List[str]) -> List[DiffLine]:
    """Generate an exact diff by walking the LCS table back from the end.

    When an insertion and a deletion are equally good, the insertion is
    emitted first during the walk, so removed lines precede added lines in
    the final order.
    """
    dp = lcs(processed_lines1, processed_lines2)
    result = []

    i = len(lines1)
    j = len(lines2)

    while i > 0 or j > 0:
        if i > 0 and j > 0 and processed_lines1[i - 1] == processed_lines2[j - 1]:
            result.append(DiffLine(DiffLineType.EQUAL, lines1[i - 1], i, j))
            i -= 1
            j -= 1
        elif j > 0 and (i == 0 or dp[i][j - 1] >= dp[i - 1][j]):
            result.append(DiffLine(DiffLineType.ADDED, lines2[j - 1], line_number_2=j))
            j -= 1
        else:
            result.append(DiffLine(DiffLineType.REMOVED, lines1[i - 1], line_number_1=i))
            i -= 1

    result.reverse()
    return result


def generate_simple_diff(lines1: List[str], lines2: List[str],
                         processed_lines1: List[str], processed_lines2: List[str],
                         lookahead: int = LOOKAHEAD_WINDOW) -> List[DiffLine]:
    """Generate a diff with a greedy scan (faster but less accurate)"""
    result = []
    i = 0
    j = 0

    while i < len(lines1) or j < len(lines2):
        if i >= len(lines1):
            # Remaining lines in text2 are additions
            result.append(DiffLine(DiffLineType.ADDED, lines2[j], line_number_2=j + 1))
            j += 1
            continue

        if j >= len(lines2):
            # Remaining lines in text1 are deletions
            result.append(DiffLine(DiffLineType.REMOVED, lines1[i], line_number_1=i + 1))
            i += 1
            continue

        if processed_lines1[i] == processed_lines2[j]:
            result.append(DiffLine(DiffLineType.EQUAL, lines1[i], i + 1, j + 1))
            i += 1
            j += 1
            continue

        # Does the current original line show up shortly in the modified text?
        match = _find_ahead(processed_lines1[i], processed_lines2, j, lookahead)
        if match is not None:
            for k in range(j, match):
                result.append(DiffLine(DiffLineType.ADDED, lines2[k], line_number_2=k + 1))
            result.append(DiffLine(DiffLineType.EQUAL, lines1[i], i + 1, match + 1))
            i += 1
            j = match + 1
            continue

        # Does the current modified line show up shortly in the original text?
        match = _find_ahead(processed_lines2[j], processed_lines1, i, lookahead)
        if match is not None:
            for k in range(i, match):
                result.append(DiffLine(DiffLineType.REMOVED, lines1[k], line_number_1=k + 1))
            result.append(DiffLine(DiffLineType.EQUAL, lines1[match], match + 1, j + 1))
            i = match + 1
            j += 1
            continue

        # No match nearby, treat as both removal and addition
        result.append(DiffLine(DiffLineType.REMOVED, lines1[i], line_number_1=i + 1))
        result.append(DiffLine(DiffLineType.ADDED, lines2[j], line_number_2=j + 1))
        i += 1
        j += 1

    return result


def _find_ahead(key: str, candidates: List[str], anchor: int, lookahead: int) -> Optional[int]:
    for k in range(anchor + 1, min(anchor + lookahead, len(candidates))):
        if candidates[k] == key:
            return k
    return None


def calculate_diff_stats(lines: List[DiffLine]) -> DiffStats:
    """Count added, removed and unchanged lines"""
    added = sum(1 for line in lines if line.type == DiffLineType.ADDED)
    removed = sum(1 for line in lines if line.type == DiffLineType.REMOVED)
    unchanged = sum(1 for line in lines if line.type == DiffLineType.EQUAL)

    return DiffStats(added=added, removed=removed, unchanged=unchanged, total=len(lines))


def split_lines(text: Optional[str]) -> List[str]:
    """Split text on newlines; an empty text has no lines at all"""
    return text.split('\n') if text else []


def diff_texts(text1: Optional[str], text2: Optional[str],
               options: Optional[DiffOptions] = None,
               lcs_threshold: Optional[int] = None,
               lookahead: Optional[int] = None) -> DiffResult:
    """Compare two texts line by line.

    Args:
        text1: Original text (None is treated as empty)
        text2: Modified text (None is treated as empty)
        options: Matching options
        lcs_threshold: Combined line count from which the greedy scan is
            used instead of LCS. Defaults to LCS_LINE_THRESHOLD.
        lookahead: Window of the greedy scan. Defaults to LOOKAHEAD_WINDOW.

    Returns:
        DiffResult; never raises for string input
    """
    options = options or DiffOptions()
    if not text1 and not text2:
        return DiffResult()

    lines1 = split_lines(text1)
    lines2 = split_lines(text2)
    processed_lines1 = [process_text(line, options) for line in lines1]
    processed_lines2 = [process_text(line, options) for line in lines2]

    threshold = LCS_LINE_THRESHOLD if lcs_threshold is None else lcs_threshold
    if len(lines1) + len(lines2) < threshold:
        diff_lines = generate_lcs_diff(lines1, lines2, processed_lines1, processed_lines2)
    else:
        logger.debug("Using lookahead diff for %d + %d lines", len(lines1), len(lines2))
        diff_lines = generate_simple_diff(lines1, lines2, processed_lines1, processed_lines2,
                                          LOOKAHEAD_WINDOW if lookahead is None else lookahead)

    stats = calculate_diff_stats(diff_lines)
    return DiffResult(
        lines=tuple(diff_lines),
        stats=stats,
        has_changes=stats.added > 0 or stats.removed > 0
    )


def _prefix(line: DiffLine) -> str:
    if line.type == DiffLineType.ADDED:
        return '+'
    if line.type == DiffLineType.REMOVED:
        return '-'
    return ' '


def format_unified_diff(diff_result: DiffResult, filename1: str = 'text1', filename2: str = 'text2') -> str:
    """Render a diff result in unified diff format.

    Each hunk covers one contiguous run of changes plus the single equal
    line right before it. An unchanged result is rendered as one hunk of
    context lines.
    """
    lines = diff_result.lines
    result = [f"--- {filename1}", f"+++ {filename2}"]

    if not lines:
        return '\n'.join(result)

    if not diff_result.has_changes:
        first = lines[0]
        start1 = first.line_number_1 or 1
        start2 = first.line_number_2 or 1
        result.append(f"@@ -{start1},{len(lines)} +{start2},{len(lines)} @@")
        result.extend(f" {line.content}" for line in lines)
        return '\n'.join(result)

    i = 0
    while i < len(lines):
        # Skip to the start of the next change block
        while i < len(lines) and lines[i].type == DiffLineType.EQUAL:
            i += 1
        if i >= len(lines):
            break

        start = i
        while i < len(lines) and lines[i].type != DiffLineType.EQUAL:
            i += 1

        block = lines[start:i]
        removed_count = sum(1 for line in block if line.type == DiffLineType.REMOVED)
        added_count = sum(1 for line in block if line.type == DiffLineType.ADDED)

        context_before = 1 if start > 0 else 0
        anchor = lines[start - context_before]
        start1 = anchor.line_number_1 or 1
        start2 = anchor.line_number_2 or 1

        result.append(
            f"@@ -{start1},{context_before + removed_count} "
            f"+{start2},{context_before + added_count} @@"
        )
        if context_before:
            result.append(f" {lines[start - 1].content}")
        result.extend(f"{_prefix(line)}{line.content}" for line in block)

    return '\n'.join(result)


def format_diff_with_line_numbers(diff_result: DiffResult) -> str:
    """Render each diff line with both line numbers and its change marker"""
    rows = []
    for line in diff_result.lines:
        num1 = str(line.line_number_1) if line.line_number_1 else '  '
        num2 = str(line.line_number_2) if line.line_number_2 else ' '
        rows.append(f"{num1} | {num2} | {_prefix(line)} {line.content}")
    return '\n'.join(rows)


def export_as_patch(text1: Optional[str], text2: Optional[str],
                    filename1: str = 'a.txt', filename2: str = 'b.txt',
                    options: Optional[DiffOptions] = None) -> str:
    """Diff two texts and render the result as a patch"""
    return format_unified_diff(diff_texts(text1, text2, options), filename1, filename2)


def are_texts_identical(text1: Optional[str], text2: Optional[str],
                        options: Optional[DiffOptions] = None) -> bool:
    """Check whether two texts match after normalization, without diffing"""
    return process_text(text1 or '', options) == process_text(text2 or '', options)


def get_similarity_percentage(text1: Optional[str], text2: Optional[str],
                              options: Optional[DiffOptions] = None) -> float:
    """Share of unchanged lines relative to the longer text, 0-100"""
    if not text1 and not text2:
        return 100
    if not text1 or not text2:
        return 0

    total_lines = max(len(split_lines(text1)), len(split_lines(text2)))
    stats = diff_texts(text1, text2, options).stats
    return round(stats.unchanged / total_lines * 100, 2)
