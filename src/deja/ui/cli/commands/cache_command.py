"""src/deja/ui/cli/commands/cache_command.py
What: Wire parsed CLI arguments into the session controller.
Why: Keep CLI glue in one place and leave the decision logic to the application layer.
"""

from __future__ import annotations

from typing import final

from deja.application.services.session_service import (
    SessionContext,
    SessionController,
    SessionOutcome,
    SessionRequest,
    Subcommand,
)
from deja.features.scope import Invocation, WatchSpec
from deja.features.store import CacheStoreConfig, DiskCacheStore
from deja.ui.cli.args.options import CacheArgs
from deja.ui.cli.display.explain import ExplainDisplay


@final
class CacheCommand:
    """Execute one cache subcommand and render its output."""

    args: CacheArgs
    controller: SessionController
    explain_display: ExplainDisplay

    def __init__(self, args: CacheArgs, *, context: SessionContext | None = None) -> None:
        """Initialize the command.

        Args:
            args: Processed command line arguments.
            context: Collaborators to use instead of the disk-backed defaults.
        """
        self.args = args
        store = DiskCacheStore(CacheStoreConfig(root=args.cache_root, shared=args.share_cache))
        self.controller = SessionController(context or SessionContext(store=store))
        self.explain_display = ExplainDisplay()

    def build_request(self) -> SessionRequest:
        """Translate arguments into a session request for the current process."""

        args = self.args
        return SessionRequest(
            subcommand=args.command,
            invocation=Invocation.capture(args.program, args.arguments),
            watch=WatchSpec(
                exclude_pwd=args.exclude_pwd,
                exclude_user=args.exclude_user,
                watch_paths=tuple(args.watch_paths),
                watch_scopes=tuple(args.watch_scopes),
                watch_env=tuple(args.watch_env),
            ),
            cache_for=args.cache_for,
            look_back=args.look_back,
            exit_policy=args.exit_policy,
            cache_miss_exit_code=args.cache_miss_exit_code,
        )

    def execute(self) -> int:
        """Run the subcommand and return the process exit code."""

        outcome: SessionOutcome = self.controller.execute(self.build_request())

        if self.args.command is Subcommand.HASH:
            self.explain_display.show_key(outcome.key)
        elif outcome.explanation is not None:
            self.explain_display.show_explanation(outcome.explanation)

        return outcome.exit_code
