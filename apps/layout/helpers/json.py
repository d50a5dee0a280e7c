import json
import logging
from typing import Any, Dict, Optional

from django.http import HttpRequest

logger = logging.getLogger(__name__)


def parse_json_body(request: HttpRequest) -> Optional[Dict[str, Any]]:
    """Decode a JSON object body; ``None`` when it is missing or malformed."""

    if not request.body:
        return {}
    ctype = request.content_type or ""
    if ctype and "application/json" not in ctype:
        logger.warning("Unexpected content type for JSON body: %s", ctype)
        return None
    try:
        payload = json.loads(request.body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.warning("JSON parse failed: %s (len=%s, ctype=%s)", exc, len(request.body), ctype)
        return None
    if not isinstance(payload, dict):
        logger.warning("JSON body is not an object (got %s)", type(payload).__name__)
        return None
    return payload
