"""Answer rendering for stdout and verbose parameter dumps."""

import json
from typing import TextIO

YELLOW = "\033[33m"
CYAN = "\033[36m"
RESET = "\033[0m"


def clean_answer(text: str) -> str:
    """Strip surrounding quotes and interpret escape sequences.

    Models (and Gemini's JSON-encoded parts) often hand back text that is
    still a quoted literal, e.g. '"line one\\nline two"'. Text that isn't a
    valid literal body is returned with only the quotes stripped.
    """
    stripped = text.strip('"')
    try:
        return json.loads(f'"{stripped}"', strict=False)
    except json.JSONDecodeError:
        return stripped


def write_answer(text: str, stream: TextIO) -> None:
    """Write the cleaned answer followed by a newline."""
    stream.write(clean_answer(text) + "\n")
    stream.flush()


def print_model_params(params: dict[str, str], stream: TextIO) -> None:
    """Print model parameters in color (verbose mode)."""
    stream.write(f"{YELLOW}Model Params:{RESET}\n")
    stream.write(CYAN)
    for name, value in params.items():
        stream.write(f"{name}: {value}\n")
    stream.write(f"{RESET}\n")
    stream.flush()
