"""Unit tests for Client - marker base class for infrastructure clients."""

from abc import ABC, ABCMeta

from infrastructure.client import Client
from infrastructure.postgres.postgres import BasePostgresClient
from system.revenue_aggregator.client.replay_client import ReplayClient


class ClosableClient(Client):
    """Minimal concrete client used to exercise the marker."""

    def __init__(self):
        self.closed = False

    def close(self):
        self.closed = True


class TestClientMarker:
    """Test the Client marker ABC."""

    def test_client_is_abstract_base(self):
        """Client is built on ABCMeta."""
        assert isinstance(Client, ABCMeta)

    def test_subclass_instantiates_without_abstract_methods(self):
        """A subclass needs no overrides to be instantiated."""
        client = ClosableClient()

        assert isinstance(client, Client)
        assert isinstance(client, ABC)

    def test_subclass_owns_its_close(self):
        """Subclasses release their own resources."""
        client = ClosableClient()
        client.close()

        assert client.closed is True

    def test_project_clients_share_the_marker(self):
        """Postgres and HTTP replay clients are both Clients."""
        assert issubclass(BasePostgresClient, Client)
        assert issubclass(ReplayClient, Client)
