"""OAuth1 Token-Based Authentication (TBA) signing for NetSuite.

NetSuite only accepts HMAC-SHA256 signatures and an account realm written
with underscores (``1234567_SB1``). The realm is not part of the signature
base string, but the value placed in the ``Authorization`` header must be the
same normalized realm the credential was issued for, so it is normalized once
and carried inside :class:`SignedParameters`.

Steps for signing a request (RFC 5849, section 3.4):

1. Collect the ``oauth_*`` protocol parameters, any form body parameters and
   the query parameters of the URL.
2. Normalize those parameters (encode, sort, join).
3. Normalize the URL (drop query and fragment).
4. Build the base string ``METHOD&enc(url)&enc(params)``.
5. HMAC-SHA256 it with ``enc(consumer_secret)&enc(token_secret)``.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple
from urllib.parse import parse_qsl, urlsplit

import requests
from oauthlib import oauth1
from oauthlib.common import generate_timestamp, generate_token
from oauthlib.oauth1.rfc5849 import signature, utils

logger = logging.getLogger(__name__)

SIGNATURE_METHOD = oauth1.SIGNATURE_HMAC_SHA256
OAUTH_VERSION = "1.0"
NONCE_LENGTH = 32

# Order of the oauth_* attributes in the Authorization header, after realm.
HEADER_PARAMETERS = (
    "oauth_consumer_key",
    "oauth_token",
    "oauth_signature_method",
    "oauth_timestamp",
    "oauth_nonce",
    "oauth_version",
    "oauth_signature",
)


def normalize_realm(realm: Optional[str]) -> str:
    """Return the realm with every hyphen replaced by an underscore."""
    return (realm or "").replace("-", "_")


@dataclass
class RequestDescriptor:
    """A routed request, ready to be signed and sent.

    ``body_parameters`` holds form parameters that take part in the
    signature. JSON bodies live in ``body`` and are never signed.
    """

    method: str
    url: str
    body: Any = None
    body_parameters: Optional[Mapping[str, Any]] = None
    headers: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class SignedParameters:
    oauth_consumer_key: str
    oauth_token: str
    oauth_timestamp: str
    oauth_nonce: str
    oauth_signature: str
    realm: str
    oauth_signature_method: str = SIGNATURE_METHOD
    oauth_version: str = OAUTH_VERSION

    def items(self) -> List[Tuple[str, str]]:
        return [(name, getattr(self, name)) for name in HEADER_PARAMETERS]


def _parameter_pairs(parameters) -> List[Tuple[str, str]]:
    if not parameters:
        return []
    if isinstance(parameters, Mapping):
        parameters = parameters.items()
    pairs = []
    for name, value in parameters:
        if isinstance(value, (list, tuple)):
            pairs.extend((str(name), str(v)) for v in value)
        else:
            pairs.append((str(name), "" if value is None else str(value)))
    return pairs


def signature_base_string(http_method: str, url: str, parameters) -> str:
    """Build the RFC 5849 signature base string.

    ``parameters`` are the protocol and body parameters; the query string of
    ``url`` is folded into them and stripped from the base URL.
    """
    query = urlsplit(url).query
    collected = _parameter_pairs(parameters) + parse_qsl(query, keep_blank_values=True)
    normalized_parameters = signature.normalize_parameters(collected)
    base_url = signature.base_string_uri(url)
    return signature.signature_base_string(http_method.upper(), base_url, normalized_parameters)


def sign_request(request, credential, nonce: Optional[str] = None, timestamp: Optional[str] = None) -> SignedParameters:
    """Sign ``request`` with the consumer and token of ``credential``.

    A fresh nonce and timestamp are drawn unless given explicitly, so two
    calls for the same request normally produce different signatures.
    ``credential.realm`` is used as is; pass a normalized credential.
    """
    timestamp = timestamp or generate_timestamp()
    nonce = nonce or generate_token(NONCE_LENGTH)

    oauth_params = [
        ("oauth_consumer_key", credential.consumer_key),
        ("oauth_token", credential.token_id),
        ("oauth_signature_method", SIGNATURE_METHOD),
        ("oauth_timestamp", timestamp),
        ("oauth_nonce", nonce),
        ("oauth_version", OAUTH_VERSION),
    ]
    parameters = oauth_params + _parameter_pairs(request.body_parameters)
    base_string = signature_base_string(request.method, request.url, parameters)
    oauth_signature = signature.sign_hmac_sha256(
        base_string, credential.consumer_secret, credential.token_secret
    )

    return SignedParameters(
        oauth_consumer_key=credential.consumer_key,
        oauth_token=credential.token_id,
        oauth_timestamp=timestamp,
        oauth_nonce=nonce,
        oauth_signature=oauth_signature,
        realm=credential.realm,
    )


def format_authorization_header(signed: SignedParameters, realm: Optional[str] = None) -> str:
    """Render ``signed`` as an ``OAuth ...`` Authorization header value.

    The realm goes first and is written literally; every other value is
    percent-encoded and quoted.
    """
    if realm is None:
        realm = signed.realm
    attributes = [f'realm="{realm}"']
    attributes.extend(f'{name}="{utils.escape(value)}"' for name, value in signed.items())
    return "OAuth " + ", ".join(attributes)


class NetSuiteTBAAuth(requests.auth.AuthBase):
    """Requests auth hook signing every outgoing call with TBA."""

    def __init__(self, credential):
        self.credential = credential.normalized()

    def __call__(self, r: requests.PreparedRequest) -> requests.PreparedRequest:
        body_parameters = None
        content_type = r.headers.get("Content-Type", "")
        if r.body and content_type.startswith("application/x-www-form-urlencoded"):
            body = r.body.decode("utf-8") if isinstance(r.body, bytes) else r.body
            body_parameters = parse_qsl(body, keep_blank_values=True)

        signed = sign_request(
            RequestDescriptor(method=r.method, url=r.url, body_parameters=body_parameters),
            self.credential,
        )
        r.headers["Authorization"] = format_authorization_header(signed)
        logger.debug("Signed %s %s for realm %s", r.method, r.url, signed.realm)
        return r
