"""Command line interface for deja."""

import os
import sys
from typing import Final, final

from deja.platform.logging import logger
from deja.shared.errors import DejaError
from deja.ui.cli.args import ArgumentParser, CacheArgs
from deja.ui.cli.commands import CacheCommand

# 128 + SIGPIPE, as a shell reports a writer whose reader went away
SIGPIPE_EXIT_CODE: Final[int] = 141


def _discard_stdout() -> None:
    """Point stdout at the null device so the final flush at exit cannot fail again."""

    try:
        fileno = sys.stdout.fileno()
    except (AttributeError, OSError, ValueError):
        return
    devnull = os.open(os.devnull, os.O_WRONLY)
    os.dup2(devnull, fileno)
    os.close(devnull)


@final
class CommandProcessor:
    """Command line interface processor."""

    @staticmethod
    def process_command(args_list: list[str] | None = None) -> int:
        """Process command line arguments.

        Every anticipated error is reported as a single ``deja: ...`` line on
        stderr and mapped to its exit code; no traceback reaches the user
        unless ``--debug`` is active.

        Args:
            args_list: List of command line arguments (for testing).

        Returns:
            int: Exit code the process should terminate with.
        """
        try:
            args: CacheArgs = ArgumentParser.process_args(args_list)
            return CacheCommand(args).execute()

        except DejaError as e:
            logger.error("deja: %s", e)
            return e.exit_code
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130
        except BrokenPipeError:
            logger.debug("Output stream closed by reader")
            _discard_stdout()
            return SIGPIPE_EXIT_CODE
        except Exception as e:
            logger.error("deja: unexpected error: %s", e)
            logger.debug("Unexpected error details", exc_info=True)
            return 1


def main() -> int:
    """Main entry point.

    Returns:
        int: Process exit code: the wrapped command's status, the cache-miss
        code for ``read``/``test``, or 1 on errors.
    """
    return CommandProcessor.process_command()
