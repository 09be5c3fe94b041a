"""Shared test configuration and fixtures."""

import stat
import sys
from pathlib import Path
from textwrap import dedent

import pytest


# ---------------------------------------------------------------------------
# Sample content
# ---------------------------------------------------------------------------

CLASS_REFERENCE_PAGE = dedent("""\
    # Node2D

    ## Description

    A 2D game object, inherited by all 2D-related nodes.

    ## Properties

    ## Methods

    ## Property Descriptions

    Vector2 **global_position** = `Vector2(0, 0)`

    Global position.

    float **rotation** = `0.0`

    Rotation in radians, relative to the node's parent.

    ## Method Descriptions

    `void (No return value.)` **apply_scale**(ratio: Vector2)

    Multiplies the current scale by the `ratio` vector.

    float **get_angle_to**(point: Vector2)

    Returns the angle between the node and the `point` in radians.
    """)

TABBED_EXAMPLE = dedent("""\
    Connect the signal in code:

    .. tabs::
     .. code-tab:: gdscript

        func _ready():
            button.pressed.connect(_on_pressed)

     .. code-tab:: csharp

        public override void _Ready()
        {
            Button.Pressed += OnPressed;
        }

    The handler runs every time the button is pressed.
    """)


@pytest.fixture
def class_reference_page() -> str:
    """Cleaned class reference page whose summary tables failed to convert."""
    return CLASS_REFERENCE_PAGE


@pytest.fixture
def tabbed_example() -> str:
    """Raw RST with a GDScript/C# code-tab block."""
    return TABBED_EXAMPLE


# ---------------------------------------------------------------------------
# Filesystem helpers
# ---------------------------------------------------------------------------


def write_file(path: Path, content: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def docs_tree(tmp_path: Path) -> Path:
    """A small godot-docs-like checkout."""
    root = tmp_path / "godot-docs"
    write_file(root / "index.rst", "Root page")
    write_file(root / "classes" / "class_node2d.rst", "Node2D")
    write_file(root / "classes" / "class_sprite2d.rst", "Sprite2D")
    write_file(root / "classes" / "notes.txt", "not a page")
    write_file(root / "classes" / "_private.rst", "hidden")
    write_file(root / "classes" / "about" / "nested.rst", "nested about")
    write_file(root / "getting_started" / "step_by_step" / "nodes.rst", "Nodes")
    write_file(root / "about" / "introduction.rst", "excluded")
    write_file(root / "tutorials" / "2d" / "movement.rst", "excluded")
    write_file(root / "_static" / "theme.rst", "static")
    write_file(root / ".github" / "template.rst", "hidden")
    return root


@pytest.fixture
def make_stub_pandoc(tmp_path: Path):
    """Factory writing an executable shell script that stands in for pandoc.

    The script receives the same arguments pandoc would (scratch file first).
    """
    if sys.platform == "win32":
        pytest.skip("stub executables are shell scripts")

    def _make(body: str, name: str = "pandoc-stub") -> Path:
        script = tmp_path / "bin" / name
        write_file(script, "#!/bin/sh\n" + dedent(body))
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    return _make
