"""Decoding of converse and message payloads into typed responses."""

import json
from typing import Any

from loguru import logger

from witdialog.agents.types import ConverseResponse, MessageResponse, ResponseType


def _load(payload: Any) -> dict[str, Any]:
    """
    Normalize a raw payload into a dictionary.

    Args:
        payload (Any): A dict, a JSON string or bytes, or None.

    Returns:
        dict[str, Any]: The parsed mapping, empty when the payload is absent or malformed.
    """
    if payload is None:
        return {}
    if isinstance(payload, (bytes, bytearray)):
        payload = payload.decode("utf-8", errors="replace")
    if isinstance(payload, str):
        if not payload.strip():
            return {}
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError:
            logger.warning("Discarding malformed payload: {!r}", payload[:200])
            return {}
    if not isinstance(payload, dict):
        logger.warning("Discarding non-object payload of type {}", type(payload).__name__)
        return {}
    return payload


def _as_float(value: Any) -> float | None:
    try:
        return float(value) if value is not None else None
    except (TypeError, ValueError):
        return None


class WitResponseDecoder:
    """
    Total decoder for converse and message API payloads.
    """

    def decode(self, payload: Any) -> ConverseResponse:
        """
        Decode a converse payload.

        Args:
            payload (Any): The raw payload.

        Returns:
            ConverseResponse: The typed response, or the empty response when nothing is decodable.
        """
        data = _load(payload)
        raw_type = data.get("type")
        try:
            rtype = ResponseType(raw_type) if raw_type is not None else None
        except ValueError:
            logger.warning("Unknown converse type {!r}", raw_type)
            rtype = None

        if rtype is ResponseType.ACTION and not data.get("action"):
            logger.warning("Converse action response without an action name")
            rtype = None

        if rtype is None:
            return ConverseResponse()

        entities = data.get("entities")
        quickreplies = data.get("quickreplies")
        return ConverseResponse(
            type=rtype,
            msg=data.get("msg"),
            action=data.get("action") if rtype is ResponseType.ACTION else None,
            entities=entities if isinstance(entities, dict) else {},
            confidence=_as_float(data.get("confidence")),
            quickreplies=list(quickreplies) if isinstance(quickreplies, list) else None,
        )

    def decode_message(self, payload: Any) -> MessageResponse:
        """
        Decode a message API payload.

        Args:
            payload (Any): The raw payload.

        Returns:
            MessageResponse: The typed message result.
        """
        data = _load(payload)
        entities = data.get("entities")
        return MessageResponse(
            msg_id=data.get("msg_id"),
            text=data.get("_text", data.get("text")),
            entities=entities if isinstance(entities, dict) else {},
        )
