"""
Credential Exchanger

Turns a Google service-account key into a short-lived OAuth2 access token
for the FCM HTTP v1 API. google-auth signs the JWT assertion with the
service account's private key and exchanges it at the token endpoint
using the jwt-bearer grant.

Tokens are valid for at most an hour and are scoped to a single run.
"""

from typing import Callable, Optional
from functools import partial
from google.oauth2 import service_account
from google.auth.transport.requests import Request
from google.auth.exceptions import GoogleAuthError, TransportError
from errors import CredentialError
import logging

logger = logging.getLogger(__name__)

FCM_SCOPE = "https://www.googleapis.com/auth/firebase.messaging"
DEFAULT_TOKEN_URI = "https://oauth2.googleapis.com/token"


def normalize_private_key(signing_key: str) -> str:
    """Restore real newlines in a PEM key that was stored with escaped `\\n`"""
    return signing_key.replace("\\n", "\n").strip() + "\n"


def build_credentials(
    service_identity: str,
    signing_key: str,
    token_uri: str = DEFAULT_TOKEN_URI,
    scope: str = FCM_SCOPE,
) -> service_account.Credentials:
    """Build service-account credentials without touching the network

    Args:
        service_identity: Service account email (assertion issuer)
        signing_key: PEM-encoded RSA private key
        token_uri: Token endpoint the assertion is exchanged at
        scope: OAuth2 scope requested

    Raises:
        CredentialError: identity or key is empty, or the key is malformed
    """
    if not service_identity:
        raise CredentialError("Service identity is empty")
    if not signing_key or not signing_key.strip():
        raise CredentialError("Signing key is empty")

    info = {
        "type": "service_account",
        "client_email": service_identity,
        "private_key": normalize_private_key(signing_key),
        "token_uri": token_uri,
    }

    try:
        return service_account.Credentials.from_service_account_info(info, scopes=[scope])
    except (GoogleAuthError, ValueError, TypeError) as e:
        raise CredentialError(f"Invalid service account key: {e}") from e


def obtain_access_token(
    service_identity: str,
    signing_key: str,
    token_uri: str = DEFAULT_TOKEN_URI,
    timeout: float = 10.0,
    request: Optional[Callable] = None,
) -> str:
    """Exchange service-account credentials for an access token

    Args:
        request: google-auth transport; defaults to a requests-backed one
            honouring `timeout`

    Raises:
        CredentialError: key is malformed, endpoint unreachable, non-2xx
            status, or the response carries no access token
    """
    credentials = build_credentials(service_identity, signing_key, token_uri=token_uri)

    if request is None:
        request = partial(Request(), timeout=timeout)

    try:
        credentials.refresh(request)
    except TransportError as e:
        raise CredentialError(f"Token endpoint unreachable: {e}") from e
    except (GoogleAuthError, ValueError, TypeError) as e:
        raise CredentialError(f"Token exchange failed: {e}") from e

    if not credentials.token:
        raise CredentialError("Token endpoint response has no access_token")

    logger.info(f"Obtained access token for {service_identity} (expires {credentials.expiry})")
    return credentials.token


class AccessTokenProvider:
    """Run-scoped access token, exchanged lazily and at most once

    Create one per run and discard it afterwards. The token is never
    written anywhere.
    """

    def __init__(
        self,
        service_identity: str,
        signing_key: str,
        token_uri: str = DEFAULT_TOKEN_URI,
        timeout: float = 10.0,
        exchange: Callable[..., str] = obtain_access_token,
    ):
        self.service_identity = service_identity
        self._signing_key = signing_key
        self.token_uri = token_uri
        self.timeout = timeout
        self._exchange = exchange
        self._token: Optional[str] = None
        self.exchange_count = 0

    def get_token(self) -> str:
        if self._token is None:
            self.exchange_count += 1
            self._token = self._exchange(
                self.service_identity,
                self._signing_key,
                token_uri=self.token_uri,
                timeout=self.timeout,
            )
        return self._token
