"""
CLI entry point.

Usage:
    gq -q "question" [-p provider] [-v] [text ...]
    cat data.txt | gq -q "question"

Flags:
- -q/--question: Question about the data
- -p/--provider: gemini, openai, azure_openai, bedrock (default from config)
- -v/--verbose: Print model parameters
- -x/--debug: Enable debug logging
- -c/--config: Config file (default $HOME/.config/gq/.gq.yaml)
"""

import argparse
import asyncio
import logging
import os
import stat
import sys
from typing import TextIO

from gq import __version__
from gq.core.config import GQError, Settings, load_settings
from gq.core.logging import get_logger, setup_logging
from gq.core.output import print_model_params, write_answer
from gq.llm.registry import available_providers, create_provider


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gq",
        description=(
            "Ask questions about the data you send. Data is read from stdin "
            "when piped, otherwise from the remaining arguments. The answer is "
            "written to stdout."
        ),
    )
    parser.add_argument("-q", "--question", default="", help="Question about the data sent")
    parser.add_argument(
        "-p",
        "--provider",
        default=None,
        help=f"LLM provider ({', '.join(available_providers())}); defaults to the configured one",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="verbose output")
    parser.add_argument("-x", "--debug", action="store_true", help="debug mode")
    parser.add_argument("-c", "--config", default=None, help="config file (default is $HOME/.config/gq/.gq.yaml)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("text", nargs="*", help="Data to ask about (ignored when stdin is piped)")
    return parser


def is_piped(stream: TextIO) -> bool:
    """True when input comes from a pipe or file rather than a character device.

    /dev/null (cron, ssh host cmd, CI) is a character device, so it counts
    as "nothing piped" just like a terminal.
    """
    try:
        mode = os.fstat(stream.fileno()).st_mode
    except (AttributeError, OSError, ValueError):
        # In-memory streams have no file descriptor
        try:
            return not stream.isatty()
        except (AttributeError, ValueError):
            return False
    return not stat.S_ISCHR(mode)


def read_data(args: argparse.Namespace, stdin: TextIO) -> str:
    """Collect the data: all of stdin when piped, else positional text."""
    if is_piped(stdin):
        return stdin.read()
    if not args.text:
        raise GQError("no data provided")
    return " ".join(args.text)


def main(
    argv: list[str] | None = None,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    """Main entry point."""
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr

    args = build_parser().parse_args(argv)

    log_level = logging.DEBUG if args.debug else logging.WARNING
    setup_logging(level=log_level)
    logger = get_logger("cli")

    try:
        if not args.question:
            raise GQError("no question provided")
        data = read_data(args, stdin)

        settings = load_settings(args.config)
        if settings.log_file:
            setup_logging(level=log_level, log_file=settings.log_file.expanduser())

        prompt = f"{args.question} {data}"
        answer = asyncio.run(_ask(settings, args.provider, prompt, args.verbose, stderr))
    except GQError as e:
        logger.debug(f"Failed: {e}", exc_info=True)
        stderr.write(f"Error: {e}\n")
        return 1

    write_answer(answer, stdout)
    return 0


async def _ask(
    settings: Settings,
    provider_name: str | None,
    prompt: str,
    verbose: bool,
    stderr: TextIO,
) -> str:
    """Send the prompt to the selected provider and return its text."""
    logger = get_logger("cli.ask")
    name = provider_name or settings.default_provider
    provider = create_provider(name, settings)
    logger.info(f"Asking {provider.provider_type.value} ({len(prompt)} chars)")

    if verbose:
        print_model_params(provider.describe(), stderr)

    try:
        response = await provider.complete(prompt)
    finally:
        await provider.close()

    logger.debug(
        f"{response.provider.value}/{response.model}: "
        f"{response.input_tokens} in, {response.output_tokens} out"
    )
    return response.content


if __name__ == "__main__":
    sys.exit(main())
