"""
List command implementation.

Shows the installed toolchains and marks the one in use.
"""

import logging

from swiftkit.cli.utils import build_context, current_toolchain, print_warning
from swiftkit.toolchain.installer import ToolchainInstaller

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the list command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    ctx = build_context(args)
    installer = ToolchainInstaller(ctx.paths.toolchains_dir, ctx.http_client)
    current = current_toolchain(ctx)
    in_use = current.name if current is not None else None

    installed = installer.list_installed()
    missing = [
        name
        for name in ctx.state.load().installed_toolchains
        if name not in installed
    ]
    for name in missing:
        print_warning(
            f"Swift {name} is recorded as installed but missing from "
            f"{ctx.paths.toolchains_dir}. Run 'swiftkit uninstall {name}' "
            "to forget it."
        )

    if not installed:
        print("No toolchains installed")
        return 0

    print("Installed toolchains:")
    for name in installed:
        marker = " (in use)" if name == in_use else ""
        print(f"  {name}{marker}")

    return 0
