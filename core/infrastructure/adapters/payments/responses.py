"""Provider response decoding shared by the payment gateways."""
import json
from typing import Any, Dict


def decode_body(text: str) -> Dict[str, Any]:
    """
    Decode a provider reply into a dict.

    Proxies and CDNs answer outages with HTML; such bodies come back as
    ``{"raw": text}`` so callers still see a status and something to log.
    """
    if not text:
        return {}
    try:
        body = json.loads(text)
    except ValueError:
        return {"raw": text[:2000]}
    return body if isinstance(body, dict) else {"raw": body}
