"""DevSpace task-board client: session lifecycle and task sync over the DevSpace HTTP API."""

__version__ = "0.1.0"
