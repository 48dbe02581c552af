"""Signed URL parsing.

A signed upload URL carries the target object id and a short-lived access
token as query parameters. Both are pulled out here: the token is only used
for the follow-up metadata commit and must never reach the storage endpoint.
"""

from __future__ import annotations

from collections.abc import Sequence
from urllib.parse import unquote_plus, urlsplit, urlunsplit

from zapdos.core.exceptions import MalformedSignedUrlError
from zapdos.models.upload import ParsedSignedTarget
from zapdos.uploads.constants import OBJECT_ID_PARAM, TOKEN_PARAM


def extract_custom_params(
    url: str,
    names: Sequence[str],
) -> tuple[dict[str, str | None], str]:
    """Extract query parameters from a URL and strip them from it.

    Other query parameters are kept exactly as written; storage providers
    sign the raw query string, so nothing is re-encoded. The first
    occurrence of a parameter wins and an empty value counts as absent.

    Args:
        url: URL to inspect.
        names: Parameter names to extract.

    Returns:
        Tuple of (values by name, URL without those parameters). If the URL
        cannot be parsed, every value is None and the URL is returned as is.
    """
    values: dict[str, str | None] = {name: None for name in names}

    try:
        parts = urlsplit(url)
    except ValueError:
        return values, url
    if not parts.scheme or not parts.netloc:
        return values, url

    kept: list[str] = []
    for pair in parts.query.split("&") if parts.query else []:
        if not pair:
            continue
        raw_key, _, raw_value = pair.partition("=")
        key = unquote_plus(raw_key)
        if key in values:
            if values[key] is None:
                values[key] = unquote_plus(raw_value) or None
            continue
        kept.append(pair)

    cleaned_url = urlunsplit(parts._replace(query="&".join(kept)))
    return values, cleaned_url


def resolve_signed_target(url: str) -> ParsedSignedTarget:
    """Resolve a signed URL into its token, object id and clean URL.

    Never raises. If either reserved parameter is missing, both are reported
    as None so callers can decide whether to fail one file or the batch.
    """
    params, cleaned_url = extract_custom_params(url, [OBJECT_ID_PARAM, TOKEN_PARAM])
    token = params[TOKEN_PARAM]
    object_id = params[OBJECT_ID_PARAM]

    if not token or not object_id:
        return ParsedSignedTarget(token=None, object_id=None, cleaned_url=cleaned_url)
    return ParsedSignedTarget(token=token, object_id=object_id, cleaned_url=cleaned_url)


def parse_signed_url(url: str) -> ParsedSignedTarget:
    """Resolve a signed URL, failing if it is not usable.

    Raises:
        MalformedSignedUrlError: If the object id or token is missing, or the
            URL cannot be parsed.
    """
    target = resolve_signed_target(url)
    if not target.is_valid:
        raise MalformedSignedUrlError(target.cleaned_url)
    return target
