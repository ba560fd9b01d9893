"""
DbSetup and DbSetupTracker - launching setup sequences and replay tracking.

DbSetup is a value object (destination + operation + binder configuration).
DbSetupTracker remembers the last setup it actually launched and only
launches again when the next setup differs, unless skip_next_launch() armed
an unconditional launch.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from dbseed.errors import LaunchError

from .binder import BinderConfiguration, DefaultBinderConfiguration
from .destination import Destination
from .operations import Operation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DbSetup:
    """
    A setup sequence bound to a destination.

    Attributes:
        destination: Where the operation is applied
        operation: The (usually composed) operation to apply
        binder_configuration: How values are bound for this destination
    """
    destination: Destination
    operation: Operation
    binder_configuration: BinderConfiguration = DefaultBinderConfiguration.INSTANCE

    def launch(self) -> None:
        """
        Apply the operation on one connection and commit.

        Raises:
            LaunchError: If the operation fails; the transaction is rolled back
        """
        with self.destination.connect() as connection:
            try:
                self.operation.execute(connection, self.binder_configuration)
                connection.commit()
            except Exception as e:
                connection.rollback()
                raise LaunchError(f"Setup launch failed: {e}") from e


class DbSetupTracker:
    """
    Replay token for one resource binding.

    Usage:
        tracker = DbSetupTracker()
        tracker.launch_if_necessary(setup)   # launches
        tracker.launch_if_necessary(setup)   # equal setup: no-op
        tracker.skip_next_launch()
        tracker.launch_if_necessary(setup)   # launches unconditionally
    """

    def __init__(self) -> None:
        self._last_launched: Optional[DbSetup] = None
        self._force_next = False

    def launch_if_necessary(self, setup: DbSetup) -> bool:
        """
        Launch setup unless it equals the last launched one.

        A pending skip_next_launch() is consumed here. The setup is only
        remembered once its launch succeeded.

        Returns:
            True if the setup was launched
        """
        force = self._force_next
        self._force_next = False

        if not force and setup == self._last_launched:
            logger.debug("Setup unchanged since last launch, not replaying")
            return False

        self._last_launched = None
        setup.launch()
        self._last_launched = setup
        return True

    def skip_next_launch(self) -> None:
        """Bypass the comparison for the next launch_if_necessary() call only."""
        self._force_next = True
