"""
smartrefs.commands.completion - Shell tab-completion setup.

Installs or prints the argcomplete activation line for the user's shell.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

_COMPLETION_MARKER = "# smartrefs shell completion"

_SNIPPETS = {
    "bash": 'eval "$(register-python-argcomplete smartrefs)"',
    "zsh": 'eval "$(register-python-argcomplete smartrefs)"',
    "fish": "register-python-argcomplete --shell fish smartrefs | source",
    "tcsh": "eval `register-python-argcomplete --shell tcsh smartrefs`",
}


def _detect_shell() -> str:
    """Detect the current shell from environment."""
    shell = os.environ.get("SHELL", "")
    basename = Path(shell).name if shell else ""
    if basename in _SNIPPETS:
        return basename
    return "bash"


def _get_rc_file(shell: str) -> Path:
    home = Path.home()
    rc_files = {
        "bash": home / ".bashrc",
        "zsh": home / ".zshrc",
        "fish": home / ".config" / "fish" / "config.fish",
        "tcsh": home / ".tcshrc",
    }
    return rc_files.get(shell, home / ".bashrc")


def _snippet_for(shell: str) -> str:
    return f"{_COMPLETION_MARKER}\n{_SNIPPETS.get(shell, _SNIPPETS['bash'])}\n"


def _check_argcomplete() -> bool:
    try:
        import argcomplete  # noqa: F401

        return True
    except ImportError:
        return False


def run(args) -> int:
    """Handle ``smartrefs completion``."""
    if not _check_argcomplete():
        print("Error: argcomplete is not installed.", file=sys.stderr)
        print("Install with: pip install smartrefs[completion]", file=sys.stderr)
        return 1

    shell = getattr(args, "shell", None) or _detect_shell()

    if getattr(args, "install", False):
        return _install(shell)

    rc_file = _get_rc_file(shell)
    print(f"Shell completion for {shell}:")
    print()
    print(f"Add the following to {rc_file}:")
    print()
    print(f"  {_SNIPPETS.get(shell, _SNIPPETS['bash'])}")
    print()
    print("Or auto-install with:")
    print()
    print(f"  smartrefs completion --install --shell {shell}")
    return 0


def _install(shell: str) -> int:
    """Append the completion snippet to the shell rc file."""
    rc_file = _get_rc_file(shell)

    if rc_file.exists() and _COMPLETION_MARKER in rc_file.read_text():
        print(f"Completion already installed in {rc_file}")
        return 0

    try:
        rc_file.parent.mkdir(parents=True, exist_ok=True)
        with open(rc_file, "a") as f:
            f.write("\n" + _snippet_for(shell))
    except OSError as e:
        print(f"Error writing to {rc_file}: {e}", file=sys.stderr)
        return 1

    print(f"Installed completion in {rc_file}")
    print(f"Restart your shell or run: source {rc_file}")
    return 0
