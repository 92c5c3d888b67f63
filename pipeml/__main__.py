from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Mapping, NoReturn, Optional

from .errors import ArgumentError, PipemlError
from .operations import OPERATIONS, OperationSpec, ParamSpec, request_from_namespace
from .router import OperationRouter
from .settings import get_log_level, read_config

logger = logging.getLogger("pipeml")

PROG = "pipeml"


class UsageArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 and names the valid operations."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        print(f"{self.prog}: error: {message}", file=sys.stderr)
        print(
            f"Run {PROG} ({'|'.join(OPERATIONS)}) -h for details",
            file=sys.stderr,
        )
        self.exit(1)


def _argument_type(param: ParamSpec):
    def convert(value: str) -> str:
        try:
            return param.convert(value)
        except ValueError as exc:
            raise argparse.ArgumentTypeError(str(exc)) from exc

    convert.__name__ = param.dest
    return convert


def _add_operation_parser(
    subparsers: argparse._SubParsersAction,
    spec: OperationSpec,
    parents: List[argparse.ArgumentParser],
) -> None:
    sub = subparsers.add_parser(
        spec.name,
        help=spec.help,
        description=spec.help,
        parents=parents,
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    for param in spec.params:
        kwargs = {
            "dest": param.dest,
            "required": param.required,
            "type": _argument_type(param),
            "help": param.help,
        }
        if param.choices is not None:
            kwargs["choices"] = param.choices
        if not param.required:
            kwargs["default"] = param.default
        sub.add_argument(*param.flags, **kwargs)


def build_parser(operations: Mapping[str, OperationSpec] = OPERATIONS) -> argparse.ArgumentParser:
    try:
        from . import __version__
        version = __version__
    except ImportError:
        version = "0.0.0"

    parser = UsageArgumentParser(
        prog=PROG,
        description=f"{PROG} {version} trains and evaluates sequence labelers, constituent parsers and document classifiers.",
    )
    parser.add_argument("--version", "-V", action="version", version=f"%(prog)s {version}")

    # --debug and --verbose are accepted after the operation name
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--debug", action="store_true", help="Enable verbose debug logging and show tracebacks")
    common.add_argument("--verbose", action="store_true", help="Print high-level progress messages")

    subparsers = parser.add_subparsers(
        dest="operation",
        metavar="{" + ",".join(operations) + "}",
        help="sub-command help",
    )
    subparsers.required = True
    for spec in operations.values():
        _add_operation_parser(subparsers, spec, [common])
    return parser


def _configure_logging(args: argparse.Namespace) -> None:
    if getattr(args, "debug", False):
        level = logging.DEBUG
    elif getattr(args, "verbose", False):
        level = logging.INFO
    else:
        level = get_log_level(read_config())
    logging.basicConfig(format="[%(name)s] %(levelname)s: %(message)s", stream=sys.stderr)
    logger.setLevel(level)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        _configure_logging(args)
        request = request_from_namespace(args)
        logger.info("CLI options: %s", dict(request.params))
        OperationRouter().dispatch(request)
    except ArgumentError as exc:
        parser.error(str(exc))
    except Exception as exc:
        if getattr(args, "debug", False):
            logger.exception("%s failed", args.operation)
        label = "Error" if isinstance(exc, PipemlError) else type(exc).__name__
        print(f"[pipeml] {label}: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
