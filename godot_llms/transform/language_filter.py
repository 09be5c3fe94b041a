"""
Language filtering for multi-language code tabs.

Godot pages show most examples twice, once per scripting language:

    .. tabs::
     .. code-tab:: gdscript

        func _ready():
            pass

     .. code-tab:: csharp

        public override void _Ready()
        {
        }

Before conversion we keep only the code of the selected language and drop the
``tabs``/``code-tab`` directive lines themselves. Blank lines are always
kept so that block boundaries survive. The scan is a single pass
over the lines with explicit state; malformed nesting degrades to keeping
lines rather than raising.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Union

from godot_llms.schemas import LanguageFilter

# code-tab language token variations -> canonical selector value
LANGUAGE_ALIASES: Dict[str, str] = {
    # GDScript
    'gdscript': 'gdscript',
    'gd': 'gdscript',

    # C#
    'csharp': 'csharp',
    'cs': 'csharp',
    'c#': 'csharp',
}

TABS_DIRECTIVE = re.compile(r'^\.\.\s+tabs::\s*$')
CODE_TAB_DIRECTIVE = re.compile(r'^\.\.\s+code-tab::\s*(\S*)')


class ActiveTab(Enum):
    """Which kind of code tab the scanner is currently inside."""
    NONE = "none"
    TARGET = "target"
    OTHER = "other"


def _indent(line: str) -> int:
    return len(line) - len(line.lstrip())


def normalize_language(token: str) -> Optional[str]:
    """Map a code-tab language token to its canonical name (None if unknown)."""
    return LANGUAGE_ALIASES.get(token.strip().lower())


@dataclass
class TabScanner:
    """
    Line-by-line state machine over raw RST.

    State:
        inside_block: currently within a ``.. tabs::`` block
        block_indent: indentation of the ``.. tabs::`` directive
        active_tab: kind of the code tab being read
        tab_indent: indentation of the active ``.. code-tab::`` directive
    """
    target: str
    inside_block: bool = False
    block_indent: int = 0
    active_tab: ActiveTab = ActiveTab.NONE
    tab_indent: int = 0

    def feed(self, line: str) -> bool:
        """Advance the scanner by one line; return True if the line is kept."""
        stripped = line.strip()
        indent = _indent(line)

        if TABS_DIRECTIVE.match(stripped):
            self.inside_block = True
            self.block_indent = indent
            self.active_tab = ActiveTab.NONE
            return False

        if not self.inside_block:
            return True

        # Blank lines separate RST blocks and never carry code; always kept
        if not stripped:
            return True

        if indent <= self.block_indent and not stripped.startswith('..'):
            self._close_block()
            return True

        code_tab = CODE_TAB_DIRECTIVE.match(stripped)
        if code_tab:
            language = normalize_language(code_tab.group(1))
            self.active_tab = ActiveTab.TARGET if language == self.target else ActiveTab.OTHER
            self.tab_indent = indent
            return False

        # Dedent back to (or past) the code-tab directive ends the tab
        if self.active_tab is not ActiveTab.NONE and indent <= self.tab_indent:
            self.active_tab = ActiveTab.NONE

        return self.active_tab is not ActiveTab.OTHER

    def _close_block(self) -> None:
        self.inside_block = False
        self.block_indent = 0
        self.active_tab = ActiveTab.NONE
        self.tab_indent = 0


def filter_by_language(content: str, language: Union[LanguageFilter, str]) -> str:
    """
    Drop code-tab variants that do not match ``language``.

    Args:
        content: Raw RST text
        language: Target language selector; ``both`` returns the input unchanged

    Returns:
        Filtered RST text
    """
    language = LanguageFilter(language)
    if language is LanguageFilter.BOTH:
        return content

    scanner = TabScanner(target=language.value)
    kept: List[str] = [line for line in content.split('\n') if scanner.feed(line)]

    return '\n'.join(kept)
