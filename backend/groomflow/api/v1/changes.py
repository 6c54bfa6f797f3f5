"""Realtime change feed over WebSocket."""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status

from groomflow.api import deps
from groomflow.db.session import get_sessionmaker
from groomflow.services import change_feed

router = APIRouter()
logger = logging.getLogger(__name__)


async def _forward_events(
    websocket: WebSocket, subscription: change_feed.Subscription
) -> None:
    while True:
        event = await subscription.get()
        await websocket.send_json(event.as_payload())


@router.websocket("/ws")
async def changes_ws(websocket: WebSocket) -> None:
    """Stream the salon's committed changes to a staff client.

    Authenticate with ``?token=<access token>``; ``?tables=appointments,kennels``
    limits the stream to those tables.
    """
    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        user = await deps.resolve_user_from_token(session, token)
    if user is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    raw_tables = websocket.query_params.get("tables")
    tables = [name.strip() for name in raw_tables.split(",")] if raw_tables else None

    await websocket.accept()
    subscription = change_feed.subscribe(user.salon_id, tables=tables)
    forwarder = asyncio.create_task(_forward_events(websocket, subscription))
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.debug("Change feed client for salon %s disconnected", user.salon_id)
    finally:
        forwarder.cancel()
        change_feed.unsubscribe(subscription)
