"""Global application state management."""

import queue
from dataclasses import dataclass, field
from typing import List, Optional

from agentforge.gateway import ProviderGateway


# Constants
MAX_LOGS = 1000


@dataclass
class AppState:
    """
    Global application state container.

    Holds the shared gateway and the recent JSON log lines pushed by
    agentforge loggers. Only one instance should exist.
    """
    gateway: Optional[ProviderGateway] = None
    log_queue: queue.Queue = field(default_factory=queue.Queue)
    logs: List[str] = field(default_factory=list)
    removed_log_count: int = 0  # logs dropped from the front

    def get_gateway(self) -> ProviderGateway:
        """Return the shared gateway, creating one over global settings if needed."""
        if self.gateway is None:
            self.gateway = ProviderGateway()
        return self.gateway

    def drain_logs(self) -> None:
        """Move queued log lines into the bounded ``logs`` buffer."""
        while True:
            try:
                line = self.log_queue.get_nowait()
            except queue.Empty:
                break
            self.logs.append(line)
            if len(self.logs) > MAX_LOGS:
                self.logs.pop(0)
                self.removed_log_count += 1


# Global singleton instance
app_state = AppState()
