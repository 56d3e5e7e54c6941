"""
Persistent state for swiftkit.

This module tracks the detected platform, the toolchain currently in use and
the installed toolchains. State is persisted to `<data_dir>/state.json` with
atomic writes so an interrupted command never leaves a half-written file.

Example:
    >>> from swiftkit.core.state import StateManager
    >>>
    >>> manager = StateManager(paths.state_file)
    >>> state = manager.load()
    >>> manager.add_installed("5.10.1")
    >>> manager.set_in_use("5.10.1")
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from swiftkit.core.filesystem import atomic_write
from swiftkit.platform.definitions import PlatformDefinition

logger = logging.getLogger(__name__)

STATE_VERSION = 1


@dataclass
class SwiftkitState:
    """
    swiftkit state.

    Attributes:
        version: State file format version
        platform: Platform toolchains are downloaded for, once known
        in_use: Name of the toolchain whose executables are linked
        installed_toolchains: Names of installed toolchains
    """

    version: int = STATE_VERSION
    platform: Optional[PlatformDefinition] = None
    in_use: Optional[str] = None
    installed_toolchains: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "version": self.version,
            "platform": self.platform.to_dict() if self.platform else None,
            "in_use": self.in_use,
            "installed_toolchains": list(self.installed_toolchains),
        }


class StateManager:
    """
    Loads and saves SwiftkitState.

    Attributes:
        state_file: Path to state.json
    """

    def __init__(self, state_file: Path):
        self.state_file = Path(state_file)
        self._state: Optional[SwiftkitState] = None

    def load(self) -> SwiftkitState:
        """
        Load state from disk.

        If the state file doesn't exist, returns a new default state.
        If it is corrupted, logs a warning and returns the default state.
        """
        if self._state is not None:
            return self._state

        if not self.state_file.exists():
            logger.debug(f"State file not found, creating new state: {self.state_file}")
            self._state = SwiftkitState()
            return self._state

        try:
            with open(self.state_file, "r", encoding="utf-8") as f:
                data = json.load(f)

            if data.get("version", STATE_VERSION) != STATE_VERSION:
                logger.warning(
                    f"State version {data.get('version')} not supported, "
                    f"using v{STATE_VERSION}"
                )

            platform_data = data.get("platform")
            self._state = SwiftkitState(
                platform=PlatformDefinition.from_dict(platform_data)
                if platform_data
                else None,
                in_use=data.get("in_use"),
                installed_toolchains=list(data.get("installed_toolchains", [])),
            )
            logger.debug(f"Loaded state from {self.state_file}")

        except (json.JSONDecodeError, TypeError, KeyError, AttributeError) as e:
            logger.warning(
                f"Invalid state file {self.state_file}, resetting to default: {e}"
            )
            self._state = SwiftkitState()

        return self._state

    def save(self, state: Optional[SwiftkitState] = None):
        """Save state to disk atomically."""
        if state is None:
            state = self._state

        if state is None:
            logger.warning("No state to save")
            return

        self._state = state
        atomic_write(self.state_file, json.dumps(state.to_dict(), indent=2))
        logger.debug(f"Saved state to {self.state_file}")

    def set_platform(self, platform: PlatformDefinition):
        state = self.load()
        state.platform = platform
        self.save(state)

    def set_in_use(self, name: Optional[str]):
        """Record the in-use toolchain (None when nothing is linked)."""
        state = self.load()
        state.in_use = name
        self.save(state)

    def add_installed(self, name: str):
        state = self.load()
        if name not in state.installed_toolchains:
            state.installed_toolchains.append(name)
            state.installed_toolchains.sort()
        self.save(state)

    def remove_installed(self, name: str):
        """Forget an installed toolchain, clearing in_use if it was that one."""
        state = self.load()
        if name in state.installed_toolchains:
            state.installed_toolchains.remove(name)
        if state.in_use == name:
            state.in_use = None
        self.save(state)


__all__ = ["STATE_VERSION", "SwiftkitState", "StateManager"]
