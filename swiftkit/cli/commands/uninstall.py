"""
Uninstall command implementation.

Removes an installed toolchain, unlinking it first when it is in use.
"""

import logging

from swiftkit.cli.utils import (
    build_context,
    current_toolchain,
    installed_version,
    print_warning,
)
from swiftkit.core.exceptions import ToolchainNotInstalledError
from swiftkit.toolchain.activation import ToolchainActivator
from swiftkit.toolchain.installer import ToolchainInstaller

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the uninstall command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    ctx = build_context(args)
    current = current_toolchain(ctx)

    try:
        version = installed_version(ctx, args.version)
    except ToolchainNotInstalledError as e:
        if e.toolchain_name not in ctx.state.load().installed_toolchains:
            raise
        # Deleted outside swiftkit, only the record is left
        ctx.state.remove_installed(e.toolchain_name)
        print_warning(
            f"Swift {e.toolchain_name} was already removed from "
            f"{ctx.paths.toolchains_dir}, forgetting it"
        )
        return 0

    if current is not None and current.name == version.name:
        activator = ToolchainActivator(
            ctx.paths.toolchains_dir, ctx.paths.bin_dir, prompt=ctx.prompt
        )
        activator.unuse(version)
        logger.info(f"Unlinked Swift {version.name} from {ctx.paths.bin_dir}")

    installer = ToolchainInstaller(ctx.paths.toolchains_dir, ctx.http_client)
    installer.uninstall(version)
    ctx.state.remove_installed(version.name)

    print(f"Swift {version.name} uninstalled successfully")
    if current is not None and current.name == version.name:
        print("No toolchain is in use now. Run 'swiftkit use VERSION' to pick one.")
    return 0
