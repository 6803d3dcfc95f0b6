"""Signed URL generation for the Weverse web API.

The API rejects any request whose ``wmd`` parameter does not match its own
HMAC of the request path, so every detail below (key ordering, form encoding,
the 255 character cut and the pad appended before hashing) has to line up
with the official web client.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import time
from dataclasses import dataclass, field
from typing import Callable, Mapping, Optional, Union
from urllib.parse import quote, urlencode

WEVERSE_BASE_URL = "https://global.apis.naver.com/weverse/wevweb"
MAX_SIGNED_LENGTH = 255


def current_millis() -> int:
    """Current Unix time in milliseconds."""
    return int(time.time() * 1000)


def encode_params(params: Mapping[str, str]) -> str:
    """Form-encode ``params`` with keys in sorted order (like Go's ``url.Values.Encode``)."""
    return urlencode(sorted(params.items(), key=lambda item: item[0]))


def compute_wmd(message: str, secret: Union[str, bytes]) -> str:
    """Base64 HMAC-SHA1 of ``message``."""
    key = secret.encode("utf-8") if isinstance(secret, str) else secret
    digest = hmac.new(key, message.encode("utf-8"), hashlib.sha1).digest()
    return base64.b64encode(digest).decode("ascii")


def sign_url(
    target_path: str,
    params: Mapping[str, str],
    secret: Union[str, bytes],
    *,
    now_ms: Optional[int] = None,
    base_url: str = WEVERSE_BASE_URL,
) -> str:
    """Return the absolute, signed URL for ``target_path`` with ``params``.

    Args:
        target_path: API path relative to ``base_url``; a trailing ``?`` is
            added when missing.
        params: query parameters. Insertion order does not matter.
        secret: shared HMAC key.
        now_ms: pad timestamp in Unix milliseconds. Defaults to now.
        base_url: API host prefix, not part of the signed message.

    Returns:
        ``base_url + path + query + "&wmsgpad=..." + "&wmd=..."``
    """
    if not target_path.endswith("?"):
        target_path += "?"

    encoded = encode_params(params)
    # 잘린 위치가 %XX 중간이어도 서버와 똑같이 자름
    message = (target_path + encoded)[:MAX_SIGNED_LENGTH]

    wmsgpad = str(current_millis() if now_ms is None else now_ms)
    wmd = compute_wmd(message + wmsgpad, secret)

    return (
        f"{base_url}{target_path}{encoded}"
        f"&wmsgpad={wmsgpad}&wmd={quote(wmd, safe='')}"
    )


@dataclass(frozen=True)
class RequestSigner:
    """Signs API paths with a fixed secret and base URL."""

    secret: Union[str, bytes] = field(repr=False)
    base_url: str = WEVERSE_BASE_URL
    clock: Callable[[], int] = field(default=current_millis, repr=False)

    def sign(self, target_path: str, params: Mapping[str, str]) -> str:
        return sign_url(
            target_path,
            params,
            self.secret,
            now_ms=self.clock(),
            base_url=self.base_url,
        )
