"""Indentation-aware line accumulator shared by every emitter."""

import re
from collections.abc import Callable
from contextlib import contextmanager
from typing import Iterator

from .errors import MisuseError

LINE_BREAK = re.compile(r"\r\n|\r|\n")


class LineWriter:
    """
    Append-only text accumulator.

    Indentation is a stack of prefixes: ``write_block`` pushes the indent unit
    and ``write_comment`` pushes the comment continuation prefix, so nested
    comments inside nested blocks line up without manual bookkeeping.
    """

    def __init__(
        self,
        indent_unit: str = "  ",
        comment_delimiters: tuple[str, str, str] = ("/**", " * ", " */"),
    ) -> None:
        self._lines: list[str] = []
        self._prefixes: list[str] = []
        self.indent_unit = indent_unit
        self.comment_open, self.comment_prefix, self.comment_close = comment_delimiters

    @property
    def indentation(self) -> int:
        """Current nesting depth."""
        return len(self._prefixes)

    @property
    def lines(self) -> list[str]:
        return list(self._lines)

    def write(self, *texts: str | None) -> None:
        """Append each text at the current indentation, one line per line break.

        ``None`` is skipped without producing a blank line; an empty string
        produces one.
        """
        for text in texts:
            if text is None:
                continue
            if not isinstance(text, str):
                raise MisuseError(f"write() expects str or None, got {type(text).__name__}")
            prefix = "".join(self._prefixes)
            for line in LINE_BREAK.split(text):
                # Blank lines take no indentation; other lines are kept as written
                self._lines.append(f"{prefix}{line}" if line.strip() else prefix.rstrip())

    @contextmanager
    def block(self) -> Iterator[None]:
        """Indent everything written inside the ``with`` body one level deeper."""
        with self._pushed(self.indent_unit):
            yield

    @contextmanager
    def comment(self) -> Iterator[None]:
        """Wrap everything written inside the ``with`` body in comment delimiters."""
        self.write(self.comment_open)
        with self._pushed(self.comment_prefix):
            yield
        self.write(self.comment_close)

    def write_block(self, body: Callable[[], None]) -> None:
        """Run ``body`` one indentation level deeper."""
        with self.block():
            body()

    def write_comment(self, body: Callable[[], None]) -> None:
        """Run ``body`` and wrap the lines it writes in documentation-comment delimiters."""
        if not callable(body):
            raise MisuseError(f"write_comment() expects a callable, got {type(body).__name__}")
        with self.comment():
            body()

    def amend(self, transform: Callable[[str], str]) -> None:
        """Replace the most recently written line with ``transform(line)``."""
        if not self._lines:
            raise MisuseError("amend() called before anything was written")
        self._lines[-1] = transform(self._lines[-1])

    def render(self) -> str:
        return "\n".join(self._lines)

    def __str__(self) -> str:
        return self.render()

    @contextmanager
    def _pushed(self, prefix: str) -> Iterator[None]:
        self._prefixes.append(prefix)
        try:
            yield
        finally:
            self._prefixes.pop()
