"""Bearer-token principal resolution for the HTTP adapter.

Tokens are mapped to uids from `Settings.api_tokens`. Resolution never raises:
a missing, malformed or unknown token yields `None`, and the request gate reports
`UNAUTHENTICATED`.
"""

import hmac

BEARER_PREFIX = "bearer "


class Authenticator:
    def __init__(self, tokens: dict[str, str]):
        self.tokens = dict(tokens)

    def resolve(self, authorization: str | None) -> str | None:
        """Return the uid for an `Authorization` header value, or `None`."""
        if not authorization or not authorization.lower().startswith(BEARER_PREFIX):
            return None
        presented = authorization[len(BEARER_PREFIX):].strip()
        if not presented:
            return None
        for token, uid in self.tokens.items():
            if hmac.compare_digest(token.encode("utf-8"), presented.encode("utf-8")):
                return uid
        return None
