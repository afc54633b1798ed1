"""Command line argument parser."""

import argparse
import logging
import os
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import final

from deja.application.services.session_service import Subcommand
from deja.config.config import Config
from deja.config.paths import (
    ENV_CACHE_DIR,
    default_cache_dir,
    default_config_path,
    default_log_file,
    resolve_overridable_path,
)
from deja.config.settings import (
    DEFAULT_CACHE_MISS_EXIT_CODE,
    DEFAULT_RECORD_EXIT_CODES,
    ENV_CACHE_FOR,
    ENV_IGNORE_PWD,
    ENV_IGNORE_USER,
    ENV_LOOK_BACK,
    ENV_RECORD_EXIT_CODES,
    ENV_WATCH_SCOPE,
    TRUTHY_VALUES,
)
from deja.features.execution import ExitPolicy
from deja.platform.filesystem import ensure_directory
from deja.platform.logging import setup_logger
from deja.shared.durations import parse_duration
from deja.shared.errors import Unwritable
from deja.ui.cli.args.options import CacheArgs

_SUBCOMMAND_HELP: dict[Subcommand, str] = {
    Subcommand.RUN: "Return cached result or run and cache command",
    Subcommand.READ: "Return cached result or exit",
    Subcommand.FORCE: "Run and cache command",
    Subcommand.REMOVE: "Remove command from cache",
    Subcommand.TEST: "Test if command is cached",
    Subcommand.EXPLAIN: "Explain cache key for command",
    Subcommand.HASH: "Print hash generated for command and options",
}


def _exit_code(value: str) -> int:
    """argparse type for ``--cache-miss-exit-code`` (1..255)."""

    try:
        code = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid exit code '{value}'") from exc
    if not 1 <= code <= 255:
        raise argparse.ArgumentTypeError(f"exit code must be between 1 and 255, got {code}")
    return code


def _env_flag(env: Mapping[str, str], name: str) -> bool:
    return (env.get(name) or "").strip().lower() in TRUTHY_VALUES


def _env_value(env: Mapping[str, str], name: str) -> str | None:
    value = (env.get(name) or "").strip()
    return value or None


@final
class ArgumentParser:
    """Command line argument parser."""

    @staticmethod
    def create_parser() -> argparse.ArgumentParser:
        """Create argument parser.

        Returns:
            argparse.ArgumentParser: Configured argument parser.
        """
        parser = argparse.ArgumentParser(
            prog="deja",
            description="deja - cache the output and exit status of commands.",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        subparsers = parser.add_subparsers(dest="command", required=True)

        for subcommand, help_text in _SUBCOMMAND_HELP.items():
            subparser = subparsers.add_parser(subcommand.value, help=help_text)
            ArgumentParser._configure_cache_parser(subparser)
            if subcommand is Subcommand.READ:
                _ = subparser.add_argument(
                    "--cache-miss-exit-code",
                    type=_exit_code,
                    default=DEFAULT_CACHE_MISS_EXIT_CODE,
                    metavar="CODE",
                    help="Exit code when a cache miss occurs (default: 1)",
                )
            _ = subparser.add_argument(
                "command_line",
                nargs=argparse.REMAINDER,
                metavar="COMMAND [ARGUMENTS ...]",
                help="Command to run and the arguments to pass to it",
            )

        return parser

    @staticmethod
    def _configure_cache_parser(parser: argparse.ArgumentParser) -> None:
        """Apply the flags shared by every cache subcommand."""

        _ = parser.add_argument(
            "--watch-path",
            action="append",
            default=[],
            metavar="PATH",
            help="Include path contents in cache key (repeatable)",
        )
        _ = parser.add_argument(
            "--watch-scope",
            action="append",
            default=[],
            metavar="SCOPE",
            help=f"Include given scope in cache key (repeatable, also ${ENV_WATCH_SCOPE})",
        )
        _ = parser.add_argument(
            "--watch-env",
            action="append",
            default=[],
            metavar="NAME",
            help="Include variable value in cache key (repeatable)",
        )
        _ = parser.add_argument(
            "--exclude-pwd",
            action="store_true",
            help="Remove current directory from cache key",
        )
        _ = parser.add_argument(
            "--exclude-user",
            action="store_true",
            help="Remove current user from cache key",
        )
        _ = parser.add_argument(
            "--cache-for",
            metavar="DURATION",
            help="How long a recorded result stays valid (e.g. 30s, 15m, 1h, 5d)",
        )
        _ = parser.add_argument(
            "--look-back",
            metavar="DURATION",
            help="Only consider results created within this period (e.g. 30s, 15m, 1h, 5d)",
        )
        _ = parser.add_argument(
            "--record-exit-codes",
            metavar="CODES",
            help="Exit codes to record, e.g. 0,10-12,100+ (default: 0)",
        )
        _ = parser.add_argument(
            "--cache",
            metavar="PATH",
            help=f"Directory to store cache files (also ${ENV_CACHE_DIR})",
        )
        _ = parser.add_argument(
            "--share-cache",
            action="store_true",
            help="Make cache files readable and writable by the group",
        )
        _ = parser.add_argument(
            "--debug",
            action="store_true",
            help="Show diagnostic output on stderr",
        )

    @staticmethod
    def process_args(
        args_list: Sequence[str] | None = None,
        env: Mapping[str, str] | None = None,
    ) -> CacheArgs:
        """Process command line arguments.

        Flags take precedence over environment variables, which take
        precedence over the config file.

        Args:
            args_list: List of command line arguments (for testing).
            env: Environment to consult (defaults to ``os.environ``).

        Returns:
            CacheArgs: Processed command line arguments.

        Raises:
            SystemExit: On usage errors (argparse exit status 2).
            ParseError: On malformed durations, exit code specs or config.
            Unwritable: If the default cache location cannot be prepared.
        """
        environment = env if env is not None else os.environ
        parser = ArgumentParser.create_parser()
        parsed_args = parser.parse_args(args_list)

        command_line: list[str] = list(parsed_args.command_line)
        if command_line and command_line[0] == "--":
            command_line = command_line[1:]
        if not command_line:
            parser.error(f"{parsed_args.command}: the following arguments are required: COMMAND")

        configuration = Config.load(default_config_path(environment))
        log_file = configuration.log_file or default_log_file(environment)
        _ = setup_logger(
            log_file=log_file,
            console_level=logging.DEBUG if parsed_args.debug else logging.WARNING,
        )

        cache_root = ArgumentParser._resolve_cache_root(parsed_args.cache, configuration, environment)

        scopes: list[str] = list(parsed_args.watch_scope)
        default_scope = _env_value(environment, ENV_WATCH_SCOPE)
        if default_scope is not None:
            scopes.insert(0, default_scope)

        cache_for = parsed_args.cache_for or _env_value(environment, ENV_CACHE_FOR)
        look_back = parsed_args.look_back or _env_value(environment, ENV_LOOK_BACK)
        exit_codes = (
            parsed_args.record_exit_codes
            or _env_value(environment, ENV_RECORD_EXIT_CODES)
            or configuration.record_exit_codes
            or DEFAULT_RECORD_EXIT_CODES
        )

        return CacheArgs(
            command=Subcommand(parsed_args.command),
            program=command_line[0],
            arguments=command_line[1:],
            watch_paths=[Path(path) for path in parsed_args.watch_path],
            watch_scopes=scopes,
            watch_env=list(parsed_args.watch_env),
            exclude_pwd=parsed_args.exclude_pwd or _env_flag(environment, ENV_IGNORE_PWD),
            exclude_user=parsed_args.exclude_user or _env_flag(environment, ENV_IGNORE_USER),
            cache_for=parse_duration(cache_for) if cache_for else None,
            look_back=parse_duration(look_back) if look_back else None,
            exit_policy=ExitPolicy.parse(exit_codes),
            cache_root=cache_root,
            share_cache=parsed_args.share_cache or configuration.share_cache,
            cache_miss_exit_code=getattr(
                parsed_args, "cache_miss_exit_code", DEFAULT_CACHE_MISS_EXIT_CODE
            ),
            debug=parsed_args.debug,
        )

    @staticmethod
    def _resolve_cache_root(
        explicit: str | None,
        configuration: Config,
        env: Mapping[str, str],
    ) -> Path:
        """Pick the cache root; only the built-in default gets its parent created."""

        uses_default = (
            explicit is None
            and _env_value(env, ENV_CACHE_DIR) is None
            and configuration.cache_dir is None
        )
        cache_root = resolve_overridable_path(
            explicit_path=explicit,
            env=env,
            env_var=ENV_CACHE_DIR,
            default_factory=lambda: configuration.cache_dir or default_cache_dir(env),
        )

        if uses_default:
            try:
                _ = ensure_directory(cache_root.parent, parents=True)
            except OSError as exc:
                raise Unwritable(cache_root) from exc

        return cache_root
