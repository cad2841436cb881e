"""
Build request URLs for the EVE XML API.

Only parameters with a non-empty value are sent; everything else is left out
of the query string rather than sent blank.
"""

from typing import Any, Dict, Mapping, Optional

from requests.models import PreparedRequest

from .config import Credentials

# Logical parameter name -> query string name
PARAM_NAMES = {
    "character_id": "characterID",
    "row_count": "rowCount",
    "account_key": "accountKey",
    "from_id": "fromID",
    "ids": "ids",
    "names": "names",
    "corporation_id": "corporationID",
    "contract_id": "contractID",
    "item_id": "itemID",
    "job_id": "jobID",
}


def _param_value(value: Any) -> Optional[str]:
    """Render a parameter value, or None if it should be omitted."""
    if isinstance(value, (list, tuple, set, frozenset)):
        value = ",".join(str(v) for v in value if v not in (None, ""))
    if not value:
        return None
    return str(value)


def build_query(
    auth: Optional[Credentials] = None,
    extra_params: Optional[Mapping[str, Any]] = None,
) -> Dict[str, str]:
    """Return the wire query parameters, credentials first."""
    params: Dict[str, str] = {}
    if auth is not None:
        params["keyID"] = str(auth.key_id)
        params["vCode"] = auth.verification_code

    for name, value in (extra_params or {}).items():
        if name not in PARAM_NAMES:
            raise ValueError(f"Unknown query parameter: {name}")
        rendered = _param_value(value)
        if rendered is not None:
            params[PARAM_NAMES[name]] = rendered
    return params


def build_request(
    base_url: str,
    path: str,
    auth: Optional[Credentials] = None,
    extra_params: Optional[Mapping[str, Any]] = None,
) -> str:
    """
    Build the absolute URL for one feed request.

    Args:
        base_url: API host, e.g. https://api.eveonline.com
        path: Feed path, e.g. eve/RefTypes.xml.aspx
        auth: Key ID / vCode pair for restricted feeds, None for anonymous ones
        extra_params: Logical parameters (see PARAM_NAMES)

    Returns:
        URL with the encoded query string.
    """
    url = f"{base_url.rstrip('/')}/{path.lstrip('/')}"
    request = PreparedRequest()
    request.prepare_url(url, build_query(auth, extra_params))
    return request.url


def redact(url: str) -> str:
    """Strip the verification code from a URL before logging it."""
    head, sep, query = url.partition("?")
    if not sep:
        return url
    parts = [
        "vCode=***" if part.startswith("vCode=") else part
        for part in query.split("&")
    ]
    return f"{head}?{'&'.join(parts)}"
