"""Output of the CLI, either for humans or as JSON lines for other programs.
"""

from .lang import get_raw as _raw

import json

from typing import Sequence, Optional, Any


class Output:
    """This class is used to abstract the output of the CLI. This particular class is
    abstract and the implementation differs depending on the desired output format.
    """

    def task(self, state: Optional[str], key: Optional[str], **kwargs) -> None:
        """Print a line for a task, with an optional state and a translated message.
        """
        raise NotImplementedError

    def value(self, key: str, value: str) -> None:
        """Print a raw value associated to a key, like a resolved argument line.
        """
        raise NotImplementedError

    def table(self, header: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
        raise NotImplementedError


class HumanOutput(Output):

    state_colors = {
        "OK": "\033[92m",
        "FAILED": "\033[31m",
        "WARN": "\033[33m",
        "INFO": "\033[34m",
    }

    def __init__(self, color: bool) -> None:
        super().__init__()
        self.color = color

    def task(self, state: Optional[str], key: Optional[str], **kwargs) -> None:

        if state is None:
            state_msg = "         "
        else:
            color = self.state_colors.get(state) if self.color else None
            if color is not None:
                state_msg = f"[{color}{state:^6s}\033[0m] "
            else:
                state_msg = f"[{state:^6s}] "

        msg = "" if key is None else _raw(key, kwargs)
        print(f"{state_msg}{msg}".rstrip())

    def value(self, key: str, value: str) -> None:
        print(value)

    def table(self, header: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
        """Print the rows as left-aligned columns under the header. Cells are never
        truncated, long lines are left to the terminal.
        """

        widths = [len(cell) for cell in header]
        for row in rows:
            for i, cell in enumerate(row):
                widths[i] = max(widths[i], len(cell))

        def print_row(row: Sequence[str]) -> None:
            print("  ".join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip())

        print_row(header)
        print_row(["-" * width for width in widths])
        for row in rows:
            print_row(row)


class MachineOutput(Output):
    """Each call prints a single JSON object on its own line.
    """

    def print_json(self, obj: Any) -> None:
        # Values that are not JSON types, like paths, are printed as strings.
        print(json.dumps(obj, default=str), flush=True)

    def task(self, state: Optional[str], key: Optional[str], **kwargs) -> None:
        self.print_json({"task": state, "key": key, "args": kwargs})

    def value(self, key: str, value: str) -> None:
        self.print_json({"value": key, "data": value})

    def table(self, header: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
        self.print_json({"table": list(header), "rows": [list(row) for row in rows]})
