"""HTTP replay client.

Reads a recorded event log and submits every decodable event to a running
aggregator's live endpoint, one request per event, in file order.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import requests

from infrastructure.client import Client
from infrastructure.logging.logger import get_logger
from system.revenue_aggregator.adapters.file.event_source import FileEventSource
from system.revenue_aggregator.decoder import EventDecoder
from system.revenue_aggregator.domain.errors import DecodeError
from system.revenue_aggregator.domain.models import Event

LIVE_EVENT_PATH = "/liveEvent"


@dataclass(slots=True)
class ReplayReport:
    """Counts from one replay run."""

    sent: int = 0
    failed: int = 0
    skipped: int = 0


class ReplayClient(Client):
    """Post events to ``/liveEvent`` with the shared-secret header.

    Args:
        base_url: Server root, e.g. ``http://localhost:8000``.
        auth_secret: Value sent in the Authorization header.
        timeout: Per-request timeout in seconds.
        session: Optional preconfigured ``requests.Session``.
    """

    def __init__(
        self,
        base_url: str,
        auth_secret: str,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__()
        self.logger = get_logger(self.__class__.__name__)
        if not base_url.startswith(("http://", "https://")):
            base_url = f"http://{base_url}"
        self.url = base_url.rstrip("/") + LIVE_EVENT_PATH
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {"Authorization": f"Bearer {auth_secret}", "Content-Type": "application/json"}
        )
        self.decoder = EventDecoder()

    def send_event(self, event: Event) -> bool:
        """Submit one event; return True when the server accepted it."""
        try:
            response = self.session.post(self.url, json=event.to_payload(), timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            self.logger.error(f"Error sending event {event.to_payload()}: {e}")
            return False
        self.logger.info(f"Event sent successfully: {event.to_payload()}")
        return True

    def replay(self, path: str | Path) -> ReplayReport:
        """Send every event in the log at ``path``.

        Raises:
            SourceError: If the log cannot be opened or read.
        """
        report = ReplayReport()
        for record in FileEventSource(path).records():
            event = self.decoder.decode(record)
            if isinstance(event, DecodeError):
                self.logger.error(f"Error parsing line ({event.reason}): {event.preview}")
                report.skipped += 1
                continue
            if self.send_event(event):
                report.sent += 1
            else:
                report.failed += 1

        self.logger.info(
            f"Replay finished: sent={report.sent} failed={report.failed} skipped={report.skipped}"
        )
        return report

    def close(self) -> None:
        self.session.close()
