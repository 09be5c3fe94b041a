"""
Markup cleanup for pandoc output.

pandoc turns Sphinx/RST class reference pages into GitHub-flavoured Markdown
that still carries a lot of residue: interpreted-text role annotations,
reference targets, fenced divs, broken table fragments, ``classref-*``
classes and so on. This module removes that residue with an ordered cascade
of small, independent rewrite rules.

Ordering matters: later rules assume the output of earlier ones (references
are unwrapped before words mashed together by the unwrapping are repaired;
artifact lines are dropped after whitespace has been normalized).

Fenced code blocks are masked before the cascade runs and restored
byte-for-byte afterwards, so no rule ever touches code. The cascade is
applied until the text stops changing, which makes ``clean_markup``
idempotent.
"""

import re
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Sequence, Tuple

logger = logging.getLogger(__name__)

# Bound on cascade passes; real documents settle in two
MAX_PASSES = 5

FENCED_CODE = re.compile(
    r'^[ \t]*(`{3,}|~{3,})[^\n]*\n.*?^[ \t]*\1[ \t]*$',
    re.MULTILINE | re.DOTALL
)
INLINE_CODE = re.compile(r'`[^`\n]+`')
# Text the junction repair must not touch
VERBATIM_SPAN = re.compile(r'`[^`\n]+`|\]\([^)\n]*\)|https?://[^\s<>()\]]+')

# Private-use code points cannot occur in converter output
_BLOCK_MARK = ('\ue000', '\ue001')
_INLINE_MARK = ('\ue002', '\ue003')


@dataclass(frozen=True)
class CleanupRule:
    """A named text -> text rewrite."""
    name: str
    apply: Callable[[str], str]


# ============================================================================
# MASKING
# ============================================================================

def _mask(text: str, pattern: re.Pattern, marks: Tuple[str, str]) -> Tuple[str, Dict[str, str]]:
    """Replace every match of ``pattern`` with an opaque placeholder."""
    saved: Dict[str, str] = {}

    def _store(match: re.Match) -> str:
        key = f"{marks[0]}{len(saved)}{marks[1]}"
        saved[key] = match.group(0)
        return key

    return pattern.sub(_store, text), saved


def _unmask(text: str, saved: Dict[str, str]) -> str:
    for key, original in saved.items():
        text = text.replace(key, original)
    return text


# ============================================================================
# 1. MEDIA
# ============================================================================

def strip_media(text: str) -> str:
    """Remove images and figures in both Markdown and RST forms."""
    text = re.sub(r'!\[[^\]\n]*\]\([^)\n]*\)', '', text)
    text = text.replace('[image]', '')
    text = re.sub(r'<figure\b[^>]*>.*?</figure>', '', text, flags=re.DOTALL)
    text = re.sub(r'<img\b[^>]*>', '', text)
    # Directive plus its indented option lines
    text = re.sub(
        r'^[ \t]*\.\.[ \t]+(?:figure|image)::.*(?:\n[ \t]+:[\w-]+:.*)*$',
        '', text, flags=re.MULTILINE
    )
    return text


# ============================================================================
# 2. CONTAINERS
# ============================================================================

def strip_containers(text: str) -> str:
    """Remove HTML div blocks, pandoc fenced-div markers and empty table rows."""
    text = re.sub(r'<div\b[^>]*>.*?</div>', '', text, flags=re.DOTALL)
    text = re.sub(r'^[ \t]*:{3,}.*$', '', text, flags=re.MULTILINE)
    # Rows pandoc leaves behind when a grid table fails to convert
    text = re.sub(r'^\|\|.*$', '', text, flags=re.MULTILINE)
    text = re.sub(r'^[ \t]*\|[ \t]*\|[ \t]*$', '', text, flags=re.MULTILINE)
    return text


# ============================================================================
# 3. ANNOTATIONS AND REFERENCES
# ============================================================================

INTERPRETED_ROLE = re.compile(r'\{\.interpreted-text role="[^"]*"\}')
ANCHOR_ATTRIBUTE = re.compile(r'\{#[^}\n]*\}')
CLASSREF_ATTRIBUTE = re.compile(r'\{\.classref[^}\n]*\}')
SIGNATURE_ATTRIBUTE = re.compile(r'(\*\*[A-Za-z_]\w*\*\*\([^)\n]*\))[ \t]*\{[^}\n]*\}')

GLYPH_REFERENCE = re.compile(r'[ \t]*`[^\w\s`<>]+<[^>\n]*>`')
CLASS_REFERENCE = re.compile(r'`([A-Z][A-Za-z0-9_]*)<class_[^>\n]*>`')
METHOD_REFERENCE = re.compile(r'`([a-z_][A-Za-z0-9_]*)(?:\(\))?<class_[^>\n]*_method_[^>\n]*>`')
LABELLED_REFERENCE = re.compile(r'`([^`<>\n]+?)[ \t]*<[a-z][a-z0-9]*_[^>`\n]*>`')
BARE_METHOD_CODE = re.compile(r'`([a-z_][A-Za-z0-9_]*\(\))`(?=[ \t])')

CLASS_HEADING = re.compile(r'^(#{1,6})[ \t]*class_(\w+)[ \t]*$', re.MULTILINE)
CLASSREF_TOKEN = re.compile(r'classref-[\w-]+')


def strip_annotations(text: str) -> str:
    """Remove attribute/role annotations and unwrap reference links.

    Glyph-only references (the ``🔗`` permalinks) are dropped entirely;
    class, method and other labelled references keep their visible text.
    """
    text = INTERPRETED_ROLE.sub('', text)
    text = ANCHOR_ATTRIBUTE.sub('', text)
    text = CLASSREF_ATTRIBUTE.sub('', text)
    text = SIGNATURE_ATTRIBUTE.sub(r'\1', text)

    text = GLYPH_REFERENCE.sub('', text)
    text = CLASS_REFERENCE.sub(r'\1', text)
    text = METHOD_REFERENCE.sub(r'\1()', text)
    text = LABELLED_REFERENCE.sub(r'\1', text)
    text = BARE_METHOD_CODE.sub(r'\1', text)

    text = CLASS_HEADING.sub(r'\1 \2', text)
    text = CLASSREF_TOKEN.sub('', text)
    return text


# ============================================================================
# 4. METHOD QUALIFIERS
# ============================================================================

QUALIFIER = re.compile(r'[ \t]*`[a-z]+ \(This method[^`]*\)`')


def strip_qualifiers(text: str) -> str:
    """Remove ``const``/``static``/``virtual``/``vararg``... qualifier spans."""
    return QUALIFIER.sub('', text)


# ============================================================================
# 5. DIRECTIVES AND METADATA
# ============================================================================

DIRECTIVE_LINE = re.compile(r'^[ \t]*\.\.[ \t]+[\w-]+::.*$')
FIELD_ONLY_LINE = re.compile(r'^[ \t]*:[\w-]+:[ \t]*$')
GROUP_LINE = re.compile(r'^[ \t]*-group[ \t]*$')
METADATA_LINE = re.compile(r'^:?[a-z][a-z0-9_]*:?[ \t]*:(?!//)[ \t]*[^*`|\[<\n]*$')


def strip_directives(text: str) -> str:
    """Drop bare directive lines and ``key: value`` metadata at block starts."""
    kept: List[str] = []
    at_block_start = True

    for line in text.split('\n'):
        if DIRECTIVE_LINE.match(line) or FIELD_ONLY_LINE.match(line) or GROUP_LINE.match(line):
            continue
        if at_block_start and METADATA_LINE.match(line):
            continue
        kept.append(line)
        at_block_start = not line.strip()

    return '\n'.join(kept)


# ============================================================================
# 6. RULES AND EMPTY HEADINGS
# ============================================================================

def strip_rules_and_empty_headings(text: str) -> str:
    """Remove horizontal rules and headings without a title."""
    text = re.sub(r'^[ \t]*(?:-{4,}|\*{3,}|_{3,})[ \t]*$', '', text, flags=re.MULTILINE)
    text = re.sub(r'^#{1,6}[ \t]*$', '', text, flags=re.MULTILINE)
    return text


# ============================================================================
# 7. WHITESPACE
# ============================================================================

HEADING_LINE = re.compile(r'^#{1,6}[ \t]+\S')


def _normalize_line(line: str) -> str:
    if not line.strip():
        return ''
    body = line.lstrip(' \t')
    indent = line[:len(line) - len(body)]
    return indent + re.sub(r'[ \t]+', ' ', body).rstrip()


def normalize_whitespace(text: str) -> str:
    """Collapse spacing inside lines and blank-line runs; space out headings.

    Spacing inside inline code spans is kept as-is.
    """
    masked, saved = _mask(text, INLINE_CODE, _INLINE_MARK)
    lines = [_normalize_line(line) for line in masked.split('\n')]

    spaced: List[str] = []
    for index, line in enumerate(lines):
        spaced.append(line)
        if HEADING_LINE.match(line) and index + 1 < len(lines) and lines[index + 1]:
            spaced.append('')

    return _unmask(_collapse_blank_lines('\n'.join(spaced)), saved)


def _collapse_blank_lines(text: str) -> str:
    return re.sub(r'\n{3,}', '\n\n', text)


# ============================================================================
# 8. WORD JUNCTIONS
# ============================================================================

BOLD_MARKER = re.compile(r'\*\*')
SENTENCE_JUNCTION = re.compile(r'(?<=[a-z])([.!?])(?=[A-Z][a-z])')


def _is_word_char(char: str) -> bool:
    return char.isalnum() or char == '_'


def _space_before_opening_bold(line: str) -> str:
    """Insert a space between a word and an *opening* ``**`` glued to it."""
    pieces: List[str] = []
    last = 0
    for count, match in enumerate(BOLD_MARKER.finditer(line)):
        start, end = match.span()
        is_opening = count % 2 == 0
        glued = 0 < start and end < len(line) and _is_word_char(line[start - 1]) and _is_word_char(line[end])
        if is_opening and glued:
            pieces.append(line[last:start])
            pieces.append(' ')
            last = start
    pieces.append(line[last:])
    return ''.join(pieces)


def repair_word_junctions(text: str) -> str:
    """Re-space words mashed together by earlier stripping.

    Only two junctions are touched: word + opening bold marker, and sentence
    punctuation + capitalised word. Anything matching VERBATIM_SPAN is
    left alone.
    """
    masked, saved = _mask(text, VERBATIM_SPAN, _INLINE_MARK)
    masked = '\n'.join(_space_before_opening_bold(line) for line in masked.split('\n'))
    masked = SENTENCE_JUNCTION.sub(r'\1 ', masked)
    return _unmask(masked, saved)


# ============================================================================
# 9. ARTIFACT LINES
# ============================================================================

ARTIFACT_PATTERNS = [
    re.compile(r'^[-:]+$'),                 # separator punctuation
    re.compile(r'^[{}]+$'),                 # isolated braces
    re.compile(r'^-?group$'),
    re.compile(r'^separator$'),
    re.compile(r'^classref-.*$'),
    re.compile(r'^</?[A-Za-z][^>]*>$'),     # isolated HTML tag
    re.compile(r'^<!--.*-->$'),
]


def drop_artifact_lines(text: str) -> str:
    """Drop lines that are nothing but markup leftovers, then tidy up."""
    kept = [
        line for line in text.split('\n')
        if not any(pattern.match(line.strip()) for pattern in ARTIFACT_PATTERNS)
    ]
    return _collapse_blank_lines('\n'.join(kept)).strip()


# ============================================================================
# CASCADE
# ============================================================================

RULES: Tuple[CleanupRule, ...] = (
    CleanupRule("media", strip_media),
    CleanupRule("containers", strip_containers),
    CleanupRule("annotations", strip_annotations),
    CleanupRule("qualifiers", strip_qualifiers),
    CleanupRule("directives", strip_directives),
    CleanupRule("rules_and_empty_headings", strip_rules_and_empty_headings),
    CleanupRule("whitespace", normalize_whitespace),
    CleanupRule("word_junctions", repair_word_junctions),
    CleanupRule("artifact_lines", drop_artifact_lines),
)


def apply_rules(text: str, rules: Sequence[CleanupRule] = RULES) -> str:
    """Apply ``rules`` once, in order, to already-masked text."""
    for rule in rules:
        text = rule.apply(text)
    return text


def clean_markup(content: str, rules: Sequence[CleanupRule] = RULES) -> str:
    """
    Clean converter output for LLM consumption.

    Args:
        content: GitHub-flavoured Markdown produced by pandoc
        rules: Cascade to apply (default: RULES)

    Returns:
        Cleaned Markdown; fenced code blocks are unchanged
    """
    masked, code_blocks = _mask(content, FENCED_CODE, _BLOCK_MARK)

    for _ in range(MAX_PASSES):
        cleaned = apply_rules(masked, rules)
        if cleaned == masked:
            break
        masked = cleaned
    else:
        logger.debug(f"Cleanup did not settle after {MAX_PASSES} passes")

    return _unmask(masked, code_blocks)
