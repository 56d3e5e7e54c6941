"""
Use command implementation.

Switches the toolchain linked into the bin directory.
"""

import logging

from swiftkit.cli.utils import (
    CommandContext,
    build_context,
    current_toolchain,
    installed_version,
)
from swiftkit.toolchain.activation import ToolchainActivator

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the use command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 if the switch did not happen)
    """
    ctx = build_context(args)
    return use(ctx, args)


def use(ctx: CommandContext, args) -> int:
    target = installed_version(ctx, args.version)
    current = current_toolchain(ctx)

    if current is not None and current.name == target.name:
        print(f"Swift {target.name} is already in use")
        return 0

    activator = ToolchainActivator(
        ctx.paths.toolchains_dir, ctx.paths.bin_dir, prompt=ctx.prompt
    )

    if not activator.use(target, current):
        if current is not None:
            # The previous toolchain was unlinked before the user declined
            ctx.state.set_in_use(None)
        return 1

    ctx.state.set_in_use(target.name)

    if current is not None:
        print(f"The current toolchain is now Swift {target.name} (was {current.name})")
    else:
        print(f"The current toolchain is now Swift {target.name}")
    return 0
