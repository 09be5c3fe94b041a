"""
Properties/Methods table reconstruction.

Class reference pages summarize members in grid tables that pandoc does not
always manage to convert. When that happens the cleaned document has an
empty "Properties" or "Methods" section, while the same members are still
declared one per line in the "Property Descriptions" / "Method Descriptions"
sections further down:

    Vector2 **global_position** = `Vector2(0, 0)`
    `void (No return value.)` **apply_scale**(ratio: Vector2)

This module re-parses those declarations and inserts a Markdown table under
the empty heading. The Descriptions sections themselves are left in place.
Extraction is heuristic; lines that do not look like a declaration are
treated as prose and ignored.
"""

import re
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple, Union

from godot_llms.schemas import MethodRecord, PropertyRecord

logger = logging.getLogger(__name__)

HEADING = re.compile(r'^(#{1,6})[ \t]+(.+?)[ \t]*$')

IDENTIFIER = r'[A-Za-z_][A-Za-z0-9_]*'
# Bare type word, optionally Array[Inner] (pandoc may escape the brackets)
TYPE_WORD = r'[A-Za-z_][A-Za-z0-9_]*(?:\\?\[[A-Za-z_][A-Za-z0-9_.]*\\?\])?'

PROPERTY_DECLARATION = re.compile(
    rf'^({TYPE_WORD})\s+\*\*({IDENTIFIER})\*\*(?:\s*=\s*`([^`]+)`)?'
)
METHOD_DECLARATION = re.compile(
    rf'^(?:`([^`]+)`|({TYPE_WORD}))\s+\*\*({IDENTIFIER})\*\*\s*(?=\()'
)

Record = Union[PropertyRecord, MethodRecord]


# ============================================================================
# LINE PARSERS
# ============================================================================

def _unescape_type(type_text: str) -> str:
    return type_text.replace('\\[', '[').replace('\\]', ']')


def _escape_cell(text: str) -> str:
    return text.replace('|', '\\|')


def _balanced_parameters(line: str, open_index: int) -> Optional[str]:
    """Return the text between ``line[open_index]`` == '(' and its matching ')'."""
    depth = 0
    for index in range(open_index, len(line)):
        char = line[index]
        if char == '(':
            depth += 1
        elif char == ')':
            depth -= 1
            if depth == 0:
                return line[open_index + 1:index]
    return None


def parse_property_line(line: str) -> Optional[PropertyRecord]:
    """Parse ``Type **name** = `default``` (default optional)."""
    match = PROPERTY_DECLARATION.match(line.strip())
    if not match:
        return None

    type_text, name, default_value = match.groups()
    return PropertyRecord(type=_unescape_type(type_text), name=name, default_value=default_value)


def parse_method_line(line: str) -> Optional[MethodRecord]:
    """Parse ```return type (note)` **name**(params)`` or ``Type **name**(params)``."""
    stripped = line.strip()
    match = METHOD_DECLARATION.match(stripped)
    if not match:
        return None

    params = _balanced_parameters(stripped, match.end())
    if params is None:
        return None

    quoted_type, bare_type, name = match.groups()
    return_type = quoted_type if quoted_type is not None else _unescape_type(bare_type)
    # Drop trailing annotations such as "(No return value.)"
    return_type = re.sub(r'\s*\(.*\)\s*$', '', return_type).strip() or 'void'

    return MethodRecord(return_type=return_type, signature=f"**{name}**({params})")


# ============================================================================
# TABLE RENDERING
# ============================================================================

def render_properties_table(records: Sequence[PropertyRecord]) -> List[str]:
    lines = ['| Type | Property | Default |', '|------|----------|---------|']
    for record in records:
        default_value = _escape_cell(record.default_value or '')
        lines.append(f"| {record.type} | **{record.name}** | {default_value} |")
    return lines


def render_methods_table(records: Sequence[MethodRecord]) -> List[str]:
    lines = ['| Return Type | Method |', '|-------------|--------|']
    for record in records:
        lines.append(f"| {_escape_cell(record.return_type)} | {_escape_cell(record.signature)} |")
    return lines


# ============================================================================
# SECTION RULES
# ============================================================================

@dataclass(frozen=True)
class SectionRule:
    """
    How to fill one kind of empty summary section.

    Attributes:
        heading: Title of the summary section ("Properties")
        followers: Titles whose heading, directly after ``heading``, marks it empty
        source: Title of the Descriptions section holding the declarations
        parse: Line parser producing a record or None
        render: Table renderer for the parsed records
    """
    heading: str
    followers: Tuple[str, ...]
    source: str
    parse: Callable[[str], Optional[Record]]
    render: Callable[[Sequence], List[str]]


SECTION_RULES: Tuple[SectionRule, ...] = (
    SectionRule(
        heading="Properties",
        followers=("Methods",),
        source="Property Descriptions",
        parse=parse_property_line,
        render=render_properties_table,
    ),
    SectionRule(
        heading="Methods",
        followers=("Property Descriptions",),
        source="Method Descriptions",
        parse=parse_method_line,
        render=render_methods_table,
    ),
)


# ============================================================================
# SCANNER
# ============================================================================

FENCE_DELIMITER = re.compile(r'^[ \t]*(`{3,}|~{3,})')

Heading = Optional[Tuple[int, str]]


def index_headings(lines: Sequence[str]) -> List[Heading]:
    """(level, title) for every ATX heading line, None elsewhere.

    Lines inside fenced code are never headings (``# comment`` in GDScript).
    """
    headings: List[Heading] = []
    fence: Optional[str] = None

    for line in lines:
        delimiter = FENCE_DELIMITER.match(line)
        if fence is not None:
            if delimiter and delimiter.group(1)[0] == fence[0] and len(delimiter.group(1)) >= len(fence):
                fence = None
            headings.append(None)
            continue
        if delimiter:
            fence = delimiter.group(1)
            headings.append(None)
            continue

        match = HEADING.match(line.strip())
        headings.append((len(match.group(1)), match.group(2)) if match else None)

    return headings


def _next_content_index(lines: Sequence[str], start: int) -> Optional[int]:
    for index in range(start, len(lines)):
        if lines[index].strip():
            return index
    return None


def _is_empty_section(lines: Sequence[str], headings: Sequence[Heading], index: int, rule: SectionRule) -> bool:
    """True when the heading at ``index`` is directly followed by a follower heading."""
    heading = headings[index]
    if heading is None or heading[1] != rule.heading:
        return False

    next_index = _next_content_index(lines, index + 1)
    if next_index is None:
        return False

    following = headings[next_index]
    return following is not None and following[0] <= heading[0] and following[1] in rule.followers


def find_section(headings: Sequence[Heading], title: str, start: int = 0) -> Optional[Tuple[int, int]]:
    """
    Locate a section by title.

    Args:
        headings: Output of index_headings() for the document
        title: Heading title to look for
        start: Index to start searching from

    Returns:
        (heading_index, section_boundary_index) where the boundary is the next
        heading of the same or higher level (or the line count); None if absent
    """
    for heading_index in range(start, len(headings)):
        heading = headings[heading_index]
        if heading is None or heading[1] != title:
            continue

        level = heading[0]
        for boundary_index in range(heading_index + 1, len(headings)):
            following = headings[boundary_index]
            if following is not None and following[0] <= level:
                return heading_index, boundary_index
        return heading_index, len(headings)

    return None


def extract_records(
    lines: Sequence[str],
    rule: SectionRule,
    start: int = 0,
    headings: Optional[Sequence[Heading]] = None,
) -> List[Record]:
    """Parse every declaration line of ``rule.source`` found after ``start``."""
    if headings is None:
        headings = index_headings(lines)
    span = find_section(headings, rule.source, start)
    if span is None:
        return []

    heading_index, boundary_index = span
    records = []
    for line in lines[heading_index + 1:boundary_index]:
        record = rule.parse(line)
        if record is not None:
            records.append(record)
    return records


def reconstruct_tables(content: str, rules: Sequence[SectionRule] = SECTION_RULES) -> str:
    """
    Insert Properties/Methods tables under empty summary headings.

    Args:
        content: Cleaned Markdown document
        rules: Section rules to apply (default: SECTION_RULES)

    Returns:
        Document with synthesized tables; unchanged when nothing was extracted
    """
    lines = content.split('\n')
    headings = index_headings(lines)
    result: List[str] = []
    index = 0

    while index < len(lines):
        line = lines[index]
        rule = next((r for r in rules if _is_empty_section(lines, headings, index, r)), None)

        if rule is None:
            result.append(line)
            index += 1
            continue

        records = extract_records(lines, rule, start=index + 1, headings=headings)
        if not records:
            logger.debug(f"No declarations found under '{rule.source}'; leaving '{rule.heading}' empty")
            result.append(line)
            index += 1
            continue

        logger.debug(f"Rebuilt '{rule.heading}' table with {len(records)} rows")
        result.append(line)
        result.append('')
        result.extend(rule.render(records))
        result.append('')
        # Resume at the following heading, dropping the blank lines we replaced
        index = _next_content_index(lines, index + 1)

    return '\n'.join(result)
