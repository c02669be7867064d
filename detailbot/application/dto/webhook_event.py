from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from detailbot.domain.entities.directive import EventKind, InboundDirective, Location


class WebhookEventDTO(BaseModel):
    destination: str | None = None
    events: list[dict[str, Any]] = Field(default_factory=list)

    def extract_directives(self) -> list[InboundDirective]:
        directives: list[InboundDirective] = []
        for event in self.events or []:
            identity = (event.get("source") or {}).get("userId")
            if not identity:
                continue

            event_type = event.get("type")
            reply_token = event.get("replyToken")
            event_id = event.get("webhookEventId")

            if event_type == "follow":
                directives.append(
                    InboundDirective(
                        identity=str(identity),
                        kind=EventKind.FOLLOW,
                        reply_token=reply_token,
                        event_id=event_id,
                    )
                )
                continue

            if event_type == "postback":
                data = (event.get("postback") or {}).get("data")
                if data is None:
                    continue
                directives.append(
                    InboundDirective(
                        identity=str(identity),
                        kind=EventKind.POSTBACK,
                        reply_token=reply_token,
                        postback_data=str(data),
                        event_id=event_id,
                    )
                )
                continue

            if event_type != "message":
                continue

            message = event.get("message") or {}
            message_type = message.get("type")
            if message_type == "text" and message.get("text") is not None:
                directives.append(
                    InboundDirective(
                        identity=str(identity),
                        kind=EventKind.TEXT,
                        reply_token=reply_token,
                        text=str(message["text"]),
                        event_id=event_id,
                    )
                )
            elif message_type == "location":
                try:
                    location = Location(
                        latitude=float(message["latitude"]),
                        longitude=float(message["longitude"]),
                        address=message.get("address"),
                    )
                except (KeyError, TypeError, ValueError):
                    continue
                directives.append(
                    InboundDirective(
                        identity=str(identity),
                        kind=EventKind.LOCATION,
                        reply_token=reply_token,
                        location=location,
                        event_id=event_id,
                    )
                )

        return directives
