from __future__ import annotations

from typing import Any

from ..command import Command
from ..driver import unwrap_value
from ..session import WebDriverSession


class ExtensionCatalog:
    """Base for vendor command catalogs.

    Holds a non-owning reference to a session; the driver that owns the
    session must outlive the catalog. Every operation builds a Command and
    goes through `session.execute`.
    """

    def __init__(self, session: WebDriverSession):
        self.session = session

    def __repr__(self) -> str:
        return f"{type(self).__name__}(session_id={self.session.session_id!r})"

    def cmd(self, command: Command) -> Any:
        return self.session.execute(command)

    def cmd_value(self, command: Command) -> Any:
        """Execute and return the response's "value" member undecoded."""
        return unwrap_value(self.cmd(command))
