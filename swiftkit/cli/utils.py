"""
Shared utilities for CLI commands.

Provides the objects every command needs (paths, settings, state, HTTP
client) and consistent output helpers.
"""

import logging
import sys
from dataclasses import dataclass, field
from typing import Optional

from swiftkit.core.directory import SwiftkitPaths
from swiftkit.core.download import DownloadProgress, HTTPClient
from swiftkit.core.exceptions import InvalidVersionError, ToolchainNotInstalledError
from swiftkit.core.prompt import PromptFn, always_yes, read_line
from swiftkit.core.settings import Settings, load_settings
from swiftkit.core.state import StateManager
from swiftkit.platform.definitions import PlatformDefinition
from swiftkit.platform.detector import PlatformDetector
from swiftkit.toolchain.activation import ToolchainActivator
from swiftkit.toolchain.prerequisites import KeyRefreshState
from swiftkit.toolchain.version import ToolchainVersion

logger = logging.getLogger(__name__)

# Shared by every prerequisite check in this process
KEY_REFRESH_STATE = KeyRefreshState()


@dataclass
class CommandContext:
    """Everything a command needs, resolved once per invocation."""

    paths: SwiftkitPaths
    settings: Settings
    state: StateManager
    http_client: HTTPClient
    prompt: PromptFn = read_line
    key_state: KeyRefreshState = field(default_factory=lambda: KEY_REFRESH_STATE)


def build_context(args) -> CommandContext:
    """
    Resolve paths, settings and state for a parsed command line.

    Args:
        args: Parsed arguments; `assume_yes` selects the non-interactive prompt

    Raises:
        ConfigurationError: If the settings file is invalid
    """
    paths = SwiftkitPaths.from_environment()
    settings = load_settings(paths.settings_file)
    assume_yes = getattr(args, "assume_yes", False)

    return CommandContext(
        paths=paths,
        settings=settings,
        state=StateManager(paths.state_file),
        http_client=HTTPClient(progress_callback=_report_progress),
        prompt=always_yes if assume_yes else read_line,
    )


def resolve_platform(ctx: CommandContext, args) -> PlatformDefinition:
    """
    Platform to install for: --platform, then settings, then the saved
    platform, then detection. Detected platforms are saved.

    Raises:
        DetectionError: If detection fails non-interactively
        PlatformSelectionCancelled: If the user cancels the menu
    """
    hint = getattr(args, "platform", None) or ctx.settings.platform
    state = ctx.state.load()

    if hint is None and state.platform is not None:
        logger.debug(f"Using saved platform {state.platform.name}")
        return state.platform

    detector = PlatformDetector(prompt=ctx.prompt)
    platform = detector.detect(
        hint=hint, interactive=not getattr(args, "assume_yes", False)
    )

    if state.platform != platform:
        ctx.state.set_platform(platform)
    return platform


def parse_version(text: str) -> ToolchainVersion:
    """Parse a version argument, raising InvalidVersionError on bad input."""
    return ToolchainVersion.parse(text)


def installed_version(ctx: CommandContext, text: str) -> ToolchainVersion:
    """
    Parse a version argument that must name an installed toolchain.

    Raises:
        InvalidVersionError: If text is not a version
        ToolchainNotInstalledError: If it is not installed
    """
    version = parse_version(text)
    if not ctx.paths.toolchain_dir(version.name).is_dir():
        raise ToolchainNotInstalledError(version.name)
    return version


def current_toolchain(ctx: CommandContext) -> Optional[ToolchainVersion]:
    """
    The in-use toolchain recorded in state.

    A recorded toolchain whose executables directory has gone missing is
    forgotten, so commands can link another one without unlinking it first.
    """
    in_use = ctx.state.load().in_use
    if in_use is None:
        return None
    try:
        current = parse_version(in_use)
    except InvalidVersionError:
        logger.warning(f"Ignoring invalid in-use toolchain in state: {in_use}")
        return None

    bin_dir = ctx.paths.toolchain_bin_dir(current.name)
    if not bin_dir.is_dir():
        logger.warning(
            f"In-use toolchain {current.name} is missing ({bin_dir} not found), "
            "forgetting it"
        )
        ToolchainActivator(ctx.paths.toolchains_dir, ctx.paths.bin_dir).prune(current)
        ctx.state.set_in_use(None)
        return None
    return current


def _report_progress(progress: DownloadProgress):
    logger.debug(str(progress))


# ============================================================================
# User Interface / Output Formatting
# ============================================================================


def print_warning(message: str):
    """Print warning message to stderr."""
    print(f"WARNING: {message}", file=sys.stderr)
