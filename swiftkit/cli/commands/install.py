"""
Install command implementation.

Downloads, verifies and extracts a toolchain, then makes it the in-use
toolchain when requested or when nothing is in use yet.
"""

import logging

from swiftkit.cli.utils import (
    CommandContext,
    build_context,
    current_toolchain,
    parse_version,
    print_warning,
    resolve_platform,
)
from swiftkit.toolchain.activation import ToolchainActivator
from swiftkit.toolchain.installer import ToolchainInstaller
from swiftkit.toolchain.prerequisites import PrerequisiteChecker
from swiftkit.toolchain.signature import SignatureVerifier

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the install command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    ctx = build_context(args)
    return install(ctx, args)


def install(ctx: CommandContext, args) -> int:
    version = parse_version(args.version)
    verify = ctx.settings.verify_signatures and not args.no_verify

    checker = PrerequisiteChecker(
        ctx.http_client, key_state=ctx.key_state, keys_url=ctx.settings.keys_url
    )
    checker.check_system_prerequisites()

    platform = resolve_platform(ctx, args)
    logger.info(f"Installing Swift {version.name} for {platform.name_pretty}")

    remediation = checker.check_install_prerequisites(platform, version, verify)
    if remediation:
        print_warning(
            "There are some system dependencies that should be installed before "
            f"using this toolchain. You can run the following command as root:\n"
            f"    {remediation}"
        )

    installer = ToolchainInstaller(
        ctx.paths.toolchains_dir,
        ctx.http_client,
        verifier=SignatureVerifier(ctx.http_client),
        download_base_url=ctx.settings.download_base_url,
    )
    installer.download_and_install(version, platform, verify=verify)
    ctx.state.add_installed(version.name)

    logger.info(f"Swift {version.name} installed successfully")

    current = current_toolchain(ctx)
    if args.use or current is None:
        activator = ToolchainActivator(
            ctx.paths.toolchains_dir, ctx.paths.bin_dir, prompt=ctx.prompt
        )
        if current is not None and current.name == version.name:
            # Reinstalled the in-use toolchain; its links still resolve
            return 0
        if activator.use(version, current):
            ctx.state.set_in_use(version.name)
            print(f"The current toolchain is now Swift {version.name}")
        elif current is not None:
            ctx.state.set_in_use(None)

    return 0
