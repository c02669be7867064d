from __future__ import annotations

import json
import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Request, Response

from detailbot.application.dto.webhook_event import WebhookEventDTO
from detailbot.application.use_cases.handle_incoming_event import HandleIncomingEventUseCase
from detailbot.infrastructure.line.webhook_verify import verify_signature
from detailbot.wiring.dependencies import get_handle_incoming_event_use_case
from detailbot.core.config import settings


router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/webhooks/line")
async def line_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    use_case: HandleIncomingEventUseCase = Depends(get_handle_incoming_event_use_case),
) -> Response:
    try:
        body = await request.body()
        signature = request.headers.get("X-Line-Signature")
        if not verify_signature(body, signature, settings.LINE_CHANNEL_SECRET, settings.ENV):
            logger.warning("Webhook signature rejected", extra={"reason": "bad_signature"})
            return Response(status_code=403)

        try:
            payload = json.loads(body.decode("utf-8")) if body else {}
        except Exception:
            logger.exception("Failed to parse webhook body")
            return Response(status_code=400)

        try:
            event = WebhookEventDTO.model_validate(payload)
            directives = event.extract_directives()

            logger.info("Webhook received", extra={"event_count": len(directives)})

            for directive in directives:
                background_tasks.add_task(use_case.handle, directive)

            return Response(status_code=200)
        except Exception as e:
            logger.exception("Error processing webhook event", extra={"error": str(e)})
            return Response(status_code=500)
    except Exception as e:
        logger.exception("Fatal error in webhook handler", extra={"error": str(e)})
        return Response(status_code=500)
