"""Live token stream over WebSocket."""

from __future__ import annotations

import json
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from loguru import logger
from starlette.websockets import WebSocketState

from src.scanner.exceptions import DeliveryError

router = APIRouter(tags=["stream"])


class WebSocketSubscriber:
    """Notification hub handle for one WebSocket client."""

    def __init__(self, websocket: WebSocket) -> None:
        self._ws = websocket

    @property
    def is_open(self) -> bool:
        return (
            self._ws.client_state == WebSocketState.CONNECTED
            and self._ws.application_state == WebSocketState.CONNECTED
        )

    async def send(self, event: dict[str, Any]) -> None:
        try:
            await self._ws.send_json(event)
        except (WebSocketDisconnect, RuntimeError) as e:
            raise DeliveryError(f"WebSocket send failed: {e}") from e


@router.websocket("/ws")
async def token_stream(websocket: WebSocket) -> None:
    """Push ``new_token`` events; client messages are only logged."""
    context = websocket.app.state.scanner
    await websocket.accept()
    subscriber = WebSocketSubscriber(websocket)
    context.hub.add(subscriber)
    try:
        await websocket.send_json({
            "type": "connected",
            "data": {"scanning": context.scan_loop.is_running},
        })
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            # Text and binary frames are both accepted
            raw = message.get("text") or message.get("bytes")
            if not raw:
                continue
            try:
                logger.debug(f"[WS] Received: {json.loads(raw)}")
            except ValueError as e:
                logger.warning(f"[WS] Invalid message: {e}")
    except WebSocketDisconnect:
        pass
    finally:
        context.hub.remove(subscriber)
