"""WebSocket endpoint with token-based session auth."""

import logging
import traceback

from fastapi import HTTPException
from starlette.websockets import WebSocket, WebSocketDisconnect

from tec_lms.handlers import (
    handle_dictionary,
    handle_format,
    handle_get_language,
    handle_languages,
    handle_localize,
    handle_merge,
    handle_translate,
    handle_validate,
    require_language,
)
from tec_lms.language import Language
from tec_lms.session import Session, registry

logger = logging.getLogger("tec_lms.ws")


async def ws_endpoint(websocket: WebSocket) -> None:
    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=4001, reason="Token required")
        return

    session = await registry.get_session(token)
    if not session:
        await websocket.close(code=4001, reason="Invalid token")
        return

    await websocket.accept()

    # Language changes are queued and pushed after the response frame
    outbox: list[dict] = []

    def on_language_change(language: Language) -> None:
        outbox.append({"type": "languageChange", "language": language.value})

    unsubscribe = session.preferences.subscribe(on_language_change)

    # Send auth message with the session token
    await websocket.send_json({
        "type": "auth",
        "token": session.token,
        "language": session.language.value,
    })

    try:
        while True:
            msg = await websocket.receive_json()
            req_id = msg.get("id")
            action = msg.get("action")
            payload = msg.get("payload") or {}

            try:
                result = await _dispatch(session, action, payload)
                await websocket.send_json({"id": req_id, "ok": True, "result": result})
            except HTTPException as exc:
                await websocket.send_json({
                    "id": req_id, "ok": False,
                    "error": exc.detail, "code": exc.status_code,
                })
            except Exception as exc:
                logger.error("WS dispatch error: %s\n%s", exc, traceback.format_exc())
                await websocket.send_json({
                    "id": req_id, "ok": False,
                    "error": str(exc) or "Internal error", "code": 500,
                })

            while outbox:
                await websocket.send_json(outbox.pop(0))
    except WebSocketDisconnect:
        pass
    finally:
        unsubscribe()


async def _dispatch(session: Session, action: str, payload: dict) -> dict:
    prefs = session.preferences

    if action == "languages":
        return await handle_languages()

    elif action == "get-language":
        return await handle_get_language(prefs)

    elif action == "set-language":
        language = require_language(payload.get("language"))
        await registry.set_language(session.token, language)
        return await handle_get_language(prefs)

    elif action == "dictionary":
        language = payload.get("language") or prefs.resolve_active_language().value
        return await handle_dictionary(language)

    elif action == "translate":
        return await handle_translate(
            key=payload.get("key", ""),
            language=payload.get("language") or prefs.resolve_active_language(),
        )

    elif action == "localize":
        return await handle_localize(
            records=payload.get("records", []),
            language=payload.get("language") or prefs.resolve_active_language(),
        )

    elif action == "merge":
        return await handle_merge(payload.get("existing"), payload.get("updates"))

    elif action == "validate":
        return await handle_validate(payload.get("record"))

    elif action == "format":
        return await handle_format(
            kind=payload.get("kind", ""),
            value=payload.get("value"),
            language=payload.get("language") or prefs.resolve_active_language(),
            format=payload.get("format", "long"),
        )

    else:
        raise HTTPException(status_code=400, detail=f"Unknown action: {action}")
