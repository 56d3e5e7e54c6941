"""
Platform command implementation.

Detects (or selects) the platform toolchains are downloaded for and saves it.
"""

import logging

from swiftkit.cli.utils import build_context
from swiftkit.platform.detector import PlatformDetector

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the platform command.

    Always re-detects, ignoring any saved platform.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    ctx = build_context(args)
    hint = args.platform or ctx.settings.platform

    detector = PlatformDetector(prompt=ctx.prompt)
    platform = detector.detect(hint=hint, interactive=not args.assume_yes)
    ctx.state.set_platform(platform)

    print(f"Platform: {platform.name_pretty} ({platform.name})")
    return 0
