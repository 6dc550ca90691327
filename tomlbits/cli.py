"""Shared driver for command-line converters that read one document and write another."""

from __future__ import annotations

import io
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import IO, NoReturn

from tomlbits.errors import DecodeError

ConvertFn = Callable[[IO[bytes], IO[bytes]], None]


@dataclass
class Program:
    """A converter command: reads from stdin or files and writes the result.

    With ``inplace`` set, every file named on the command line is converted
    and overwritten with its result.
    """

    fn: ConvertFn
    usage: str = ""
    inplace: bool = False

    def execute(self, argv: Sequence[str] | None = None) -> NoReturn:
        """Parse ``argv``, run the conversion and exit with its status."""
        args = sys.argv[1:] if argv is None else list(argv)
        files = self._parse_arguments(args)
        stdin = getattr(sys.stdin, "buffer", sys.stdin)
        stdout = getattr(sys.stdout, "buffer", sys.stdout)
        sys.exit(self.main(files, stdin, stdout, sys.stderr))

    def _parse_arguments(self, args: list[str]) -> list[str]:
        for index, arg in enumerate(args):
            if arg == "--":
                return args[index + 1 :]
            if not arg.startswith("-") or arg == "-":
                return args[index:]
            if arg.lstrip("-") in ("h", "help"):
                sys.stderr.write(self.usage)
                sys.exit(0)
            sys.stderr.write(f"flag provided but not defined: {arg}\n")
            sys.stderr.write(self.usage)
            sys.exit(2)
        return []

    def main(
        self,
        files: Sequence[str],
        stdin: IO[bytes] | None,
        stdout: IO[bytes],
        stderr: IO[str],
    ) -> int:
        """Run the conversion and report any failure; return the exit status."""
        try:
            self._run(list(files), stdin, stdout)
        except DecodeError as err:
            print(err.human, file=stderr)
            row, column = err.position()
            print("error occurred at row", row, "column", column, file=stderr)
            return -1
        except Exception as err:  # every failure is reported to the user
            print(err, file=stderr)
            return -1
        return 0

    def _run(self, files: list[str], stdin: IO[bytes] | None, stdout: IO[bytes]) -> None:
        if files:
            if self.inplace:
                for path in files:
                    self._run_file_in_place(Path(path))
                return
            with open(files[0], "rb") as source:
                self.fn(source, stdout)
            return
        if stdin is None:
            raise ValueError("no input to read from")
        self.fn(stdin, stdout)

    def _run_file_in_place(self, path: Path) -> None:
        data = path.read_bytes()
        out = io.BytesIO()
        self.fn(io.BytesIO(data), out)
        path.write_bytes(out.getvalue())