# -*- coding: utf-8 -*-
"""
Prism: Dense matrices and color transforms
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Module: prism_script.py — Stack-based (Forth-like) matrix scripts.

A script is a whitespace separated list of tokens. Numbers are pushed on the
stack; every other token is a command operating on the stack. A token is a
number when C ``strtod`` would read all of it: ``1e3``, ``-0.5``, ``inf`` and
hexadecimal ``0x10`` are numbers, ``1_000`` is not.

Commands:

    .s          print the whole stack
    .           pop and print the top item
    dup swap drop
    matrix      pop rows, pop columns, pop rows×columns numbers → matrix
    identity    pop n → n×n identity
    + - * /     numbers, matrix ⊕ number (either order), matrix ⊕ matrix
    negate inverse transpose determinant adjugate
    deg2rad rotatex rotatey rotatez
    brightness saturation hue

Comments: ``\\`` up to the end of the line, ``(`` up to the next ``)``.

Example (rotate the point (-1, -1) by 180° around Z):

    180 deg2rad rotatez
    -1 -1 0 1 4 1 matrix swap * .
"""

from __future__ import annotations

import argparse
import logging
import math
import sys
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional, Sequence, TextIO, Tuple, Union

import numpy as np

from __about__ import __version__
from prism_matrix import DEFAULT_LUMA_PRESET, LUMA_PRESETS, Matrix, MatrixError

__all__ = ["ScriptStackError", "MatrixScript", "main"]

logger = logging.getLogger(__name__)

StackItem = Union[float, Matrix]


class ScriptStackError(RuntimeError):
    """A command needs more items than the stack holds."""


def _parse_number(word: str) -> Optional[float]:
    """
    C ``strtod`` reading of a whole token, or None when it is a command.

    Decimal, exponent, ``inf``/``nan`` and hexadecimal (``0x10``,
    ``0x1.8p1``) forms are numbers. Digit separators (``1_000``) are not.
    """
    if "_" in word:
        return None
    try:
        return float(word)
    except ValueError:
        pass
    if "0x" not in word.lower():
        return None
    try:
        return float.fromhex(word)
    except ValueError:
        return None


class MatrixScript:
    """
    Interpreter for one matrix script.

    Parameters:
        source: Script text, or a text stream to read it from.
        output: Stream receiving ``.`` and ``.s`` output (default stdout).
        luma_preset: Luma preset used by ``saturation`` and ``hue``.
        name: Label used in log messages (usually the file name).
    """

    def __init__(
        self,
        source: Union[str, TextIO],
        output: Optional[TextIO] = None,
        luma_preset: str = DEFAULT_LUMA_PRESET,
        name: str = "<script>",
    ) -> None:
        self._text = source if isinstance(source, str) else source.read()
        self._output = output
        self._name = name
        self._stack: List[StackItem] = []
        self._command = ""
        self._line = 0
        self._errors = 0

        self._color = Matrix(4, 4)
        self._color.set_luma_preset(luma_preset)

        self._commands: Dict[str, Callable[[], None]] = {
            ".s": self._show_stack,
            ".": self._print_top,
            "dup": self._dup,
            "swap": self._swap,
            "drop": self._drop,
            "matrix": self._matrix,
            "identity": self._identity,
            "+": self._add,
            "-": self._subtract,
            "*": self._multiply,
            "/": self._divide,
            "negate": self._negate,
            "inverse": self._inverse,
            "transpose": self._transpose,
            "determinant": self._determinant,
            "adjugate": self._adjugate,
            "deg2rad": self._deg2rad,
            "rotatex": lambda: self._from_number(Matrix.rotation_x),
            "rotatey": lambda: self._from_number(Matrix.rotation_y),
            "rotatez": lambda: self._from_number(Matrix.rotation_z),
            "brightness": lambda: self._from_number(self._color.brightness),
            "saturation": lambda: self._from_number(self._color.saturation),
            "hue": lambda: self._from_number(self._color.hue),
        }

    @property
    def stack(self) -> List[StackItem]:
        """Snapshot of the stack, bottom first."""
        return list(self._stack)

    @property
    def errors(self) -> int:
        return self._errors

    def run(self) -> bool:
        """
        Execute the whole script.

        Returns:
            True if no error was reported. Unknown commands and type errors
            are reported and skipped; stack underflow and matrix errors
            (shape mismatch, singular divisor) stop the script.
        """
        try:
            self._interpret()
        except (ScriptStackError, MatrixError) as e:
            self._error(str(e))
        return self._errors == 0

    # ──────────────────────────────────────────────────────────────────────
    # Tokenizer & dispatch
    # ──────────────────────────────────────────────────────────────────────

    def _tokens(self) -> Iterator[Tuple[str, int]]:
        text = self._text
        size = len(text)
        pos = 0
        line = 1
        while pos < size:
            ch = text[pos]
            if ch.isspace():
                if ch == "\n":
                    line += 1
                pos += 1
                continue

            start = pos
            while pos < size and not text[pos].isspace():
                pos += 1
            word = text[start:pos]

            if word == "\\":
                end = text.find("\n", pos)
                pos = size if end < 0 else end
            elif word == "(":
                end = text.find(")", pos)
                if end < 0:
                    end = size
                line += text.count("\n", pos, end)
                pos = end + 1
            else:
                yield word, line

    def _interpret(self) -> None:
        for word, line in self._tokens():
            self._line = line
            self._command = word
            number = _parse_number(word)
            if number is None:
                handler = self._commands.get(word)
                if handler is None:
                    self._error(f'unknown command "{word}"')
                    continue
                handler()
            else:
                self._stack.append(number)

    def _error(self, message: str) -> None:
        self._errors += 1
        logger.error("%s:%d: %s", self._name, self._line, message)

    def _write(self, text: str) -> None:
        print(text, file=self._output if self._output is not None else sys.stdout)

    def _require(self, count: int) -> None:
        if len(self._stack) < count:
            raise ScriptStackError(
                f'your stack has {len(self._stack)} items, but "{self._command}" '
                f"requires {count} items on the stack"
            )

    def _top_number(self) -> Optional[float]:
        """Pop the top item if it is a number; report and keep it otherwise."""
        self._require(1)
        if isinstance(self._stack[-1], Matrix):
            self._error(f'"{self._command}" expects a number on the top of the stack')
            return None
        return float(self._stack.pop())

    def _top_matrix(self) -> Optional[Matrix]:
        self._require(1)
        top = self._stack[-1]
        if not isinstance(top, Matrix):
            self._error(f'"{self._command}" expects a matrix on the top of the stack')
            return None
        self._stack.pop()
        return top

    @staticmethod
    def _format(item: StackItem) -> str:
        if isinstance(item, Matrix):
            return str(item)
        return format(item, "g")

    # ──────────────────────────────────────────────────────────────────────
    # Stack commands
    # ──────────────────────────────────────────────────────────────────────

    def _show_stack(self) -> None:
        if not self._stack:
            self._write("*empty*")
            return
        numbers: List[str] = []
        for item in self._stack:
            if isinstance(item, Matrix):
                if numbers:
                    self._write(" ".join(numbers))
                    numbers = []
                self._write(str(item))
            else:
                numbers.append(self._format(item))
        if numbers:
            self._write(" ".join(numbers))

    def _print_top(self) -> None:
        if not self._stack:
            self._write("*empty*")
            return
        self._write(self._format(self._stack.pop()))

    def _dup(self) -> None:
        self._require(1)
        top = self._stack[-1]
        self._stack.append(top.copy() if isinstance(top, Matrix) else top)

    def _swap(self) -> None:
        self._require(2)
        self._stack[-1], self._stack[-2] = self._stack[-2], self._stack[-1]

    def _drop(self) -> None:
        self._require(1)
        self._stack.pop()

    def _dimension(self, value: StackItem, what: str) -> Optional[int]:
        if isinstance(value, Matrix):
            self._error(f"{what} must be a number")
            return None
        if not value.is_integer() or value < 0:
            self._error(f"{what} must be an exact non-negative integer, got {value:g}")
            return None
        return int(value)

    def _matrix(self) -> None:
        # rows on top, then columns, then the elements, last element on top
        self._require(2)
        rows = self._dimension(self._stack.pop(), "rows of a matrix")
        columns = self._dimension(self._stack.pop(), "columns of a matrix")
        if rows is None or columns is None:
            return
        size = rows * columns
        self._require(size)
        values: List[float] = []
        for _ in range(size):
            if isinstance(self._stack[-1], Matrix):
                # elements popped so far are consumed, the matrix stays
                self._error("all matrix elements must be numbers")
                return
            values.append(float(self._stack.pop()))
        values.reverse()
        self._stack.append(Matrix.from_rows(np.array(values, dtype=np.float64).reshape(rows, columns)))

    def _identity(self) -> None:
        self._require(1)
        size = self._dimension(self._stack[-1], "size of an identity matrix")
        if size is None:
            return
        self._stack.pop()
        self._stack.append(Matrix(size, size))

    # ──────────────────────────────────────────────────────────────────────
    # Arithmetic
    # ──────────────────────────────────────────────────────────────────────

    def _binary(self, operation: Callable[[StackItem, StackItem], StackItem]) -> None:
        self._require(2)
        right = self._stack.pop()
        left = self._stack.pop()
        # a number combined with a matrix is applied to the matrix
        if not isinstance(left, Matrix) and isinstance(right, Matrix):
            left, right = right, left
        self._stack.append(operation(left, right))

    def _add(self) -> None:
        self._binary(lambda a, b: a + b)

    def _subtract(self) -> None:
        self._negate()
        self._add()

    def _multiply(self) -> None:
        self._binary(lambda a, b: a * b)

    def _divide(self) -> None:
        def divide(left: StackItem, right: StackItem) -> StackItem:
            if isinstance(left, Matrix):
                return left / right
            with np.errstate(divide="ignore", invalid="ignore"):
                return float(np.divide(left, right))
        self._binary(divide)

    def _negate(self) -> None:
        self._require(1)
        self._stack[-1] = -self._stack[-1]

    def _inverse(self) -> None:
        self._require(1)
        top = self._stack[-1]
        if isinstance(top, Matrix):
            if not top.inverse():
                self._error("matrix is singular and cannot be inverted")
            return
        with np.errstate(divide="ignore"):
            self._stack[-1] = float(np.divide(1.0, top))

    def _transpose(self) -> None:
        m = self._top_matrix()
        if m is not None:
            self._stack.append(m.transpose())

    def _determinant(self) -> None:
        m = self._top_matrix()
        if m is not None:
            self._stack.append(m.determinant())

    def _adjugate(self) -> None:
        m = self._top_matrix()
        if m is not None:
            self._stack.append(m.adjugate())

    # ──────────────────────────────────────────────────────────────────────
    # Angles & generated matrices
    # ──────────────────────────────────────────────────────────────────────

    def _deg2rad(self) -> None:
        angle = self._top_number()
        if angle is not None:
            self._stack.append(math.radians(angle))

    def _from_number(self, factory: Callable[[float], Matrix]) -> None:
        value = self._top_number()
        if value is not None:
            self._stack.append(factory(value))


# ═══════════════════════════════════════════════════════════════════════════════
# Command line
# ═══════════════════════════════════════════════════════════════════════════════

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="prism-matrix",
        description="Run Forth-like matrix scripts.",
    )
    parser.add_argument(
        "files", nargs="*", metavar="FILE",
        help="script files to run in order; '-' (or no file) reads standard input",
    )
    parser.add_argument(
        "--luma", choices=sorted(LUMA_PRESETS), default=DEFAULT_LUMA_PRESET,
        help="luma preset used by the saturation and hue commands (default: %(default)s)",
    )
    parser.add_argument(
        "--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], default="WARNING",
        help="logging verbosity (default: %(default)s)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Entry point of ``prism-matrix``.

    Returns:
        0 when every script ran without error, 1 otherwise.
    """
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s: %(message)s")

    ok = True
    for filename in args.files or ["-"]:
        if filename == "-":
            script = MatrixScript(sys.stdin, luma_preset=args.luma, name="<stdin>")
        else:
            try:
                text = Path(filename).read_text(encoding="utf-8")
            except OSError as e:
                logger.error('could not open input file "%s": %s', filename, e)
                ok = False
                continue
            script = MatrixScript(text, luma_preset=args.luma, name=filename)
        ok = script.run() and ok
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
