"""
Protocol messages.

Every frame is ``{"type": <TAG>, "payload": {...}}``. The tag selects exactly
one payload shape; the union below is closed over the five kinds.
"""

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

STATUS_SUCCESS = "success"
STATUS_FAILURE = "failure"


class _Payload(BaseModel):
    model_config = ConfigDict(frozen=True)


class AuthPayload(_Payload):
    client_uuid: str
    link_code: str


class AuthAckPayload(_Payload):
    status: str  # "success" | "failure"
    message: str
    minecraft_uuid: Optional[str] = None  # only set on success
    username: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == STATUS_SUCCESS


class ChatPayload(_Payload):
    message: str


class BroadcastPayload(_Payload):
    from_: str = Field(alias="from")
    message: str


class DisconnectPayload(_Payload):
    reason: str


class _Message(BaseModel):
    model_config = ConfigDict(frozen=True)

    @classmethod
    def create(cls, **fields: Any) -> Any:
        """Build the message from its payload fields, e.g. ``Chat.create(message="hi")``."""
        payload_cls = cls.model_fields["payload"].annotation
        # Payloads only accept wire keys; map attribute names like from_ onto them
        wire = {
            (payload_cls.model_fields[name].alias or name) if name in payload_cls.model_fields else name: value
            for name, value in fields.items()
        }
        return cls(payload=payload_cls(**wire))

    def to_json(self) -> str:
        """Canonical compact JSON, without the line terminator."""
        return self.model_dump_json(by_alias=True)


class Auth(_Message):
    type: Literal["AUTH"] = "AUTH"
    payload: AuthPayload


class AuthAck(_Message):
    type: Literal["AUTH_ACK"] = "AUTH_ACK"
    payload: AuthAckPayload


class Chat(_Message):
    type: Literal["CHAT"] = "CHAT"
    payload: ChatPayload


class Broadcast(_Message):
    type: Literal["BROADCAST"] = "BROADCAST"
    payload: BroadcastPayload


class Disconnect(_Message):
    type: Literal["DISCONNECT"] = "DISCONNECT"
    payload: DisconnectPayload


MineChatMessage = Annotated[
    Union[Auth, AuthAck, Chat, Broadcast, Disconnect],
    Field(discriminator="type"),
]

MESSAGE_TYPES = (Auth, AuthAck, Chat, Broadcast, Disconnect)

message_adapter: TypeAdapter[Any] = TypeAdapter(MineChatMessage)
