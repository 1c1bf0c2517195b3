"""
Session descriptor returned by a successful link.
"""

from pydantic import BaseModel, ConfigDict


class LinkedSession(BaseModel):
    """Result of a successful handshake, always ordered (client_uuid, server_addr)."""

    model_config = ConfigDict(frozen=True)

    client_uuid: str
    server_addr: str

    def as_tuple(self) -> tuple[str, str]:
        return (self.client_uuid, self.server_addr)
