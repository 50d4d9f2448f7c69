"""Abstract base class for backing-service clients.

Every adapter that talks to an external service (Postgres, HTTP) derives
from ``Client`` so that application code can accept "some client" through
its constructor without caring which concrete implementation it receives.
"""

from abc import ABC


class Client(ABC):  # noqa: B024
    """Marker base class for infrastructure clients.

    Carries no abstract methods. Subclasses own their connection resources
    and expose a ``close()`` to release them.
    """

    ...
