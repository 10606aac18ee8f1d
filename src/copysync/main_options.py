"""Click option helpers for mutually exclusive modes."""
import click


def _check_conflicts(name: str, conflicts_with: list[str], opts: dict) -> None:
    """Raise UsageError if a conflicting option was also given.

    Args:
        name: Name of the current option.
        conflicts_with: Names of options that cannot be combined with it.
        opts: Dictionary of parsed options.

    Raises:
        click.UsageError: If a conflicting option is present.
    """
    for other in conflicts_with:
        if other in opts:
            msg = f"Options --{name} and --{other} are mutually exclusive"
            raise click.UsageError(msg)


class MutuallyExclusiveOption(click.Option):
    """Click option that cannot be combined with the listed options."""

    def __init__(self, *args, **kwargs):
        """Initialize with conflicts_with naming the excluded options."""
        self.conflicts_with = kwargs.pop("conflicts_with", [])
        super().__init__(*args, **kwargs)

    def handle_parse_result(self, ctx, opts, args):
        """Reject the option when a conflicting one was also given."""
        if self.name in opts:
            _check_conflicts(self.name, self.conflicts_with, opts)
        return super().handle_parse_result(ctx, opts, args)
