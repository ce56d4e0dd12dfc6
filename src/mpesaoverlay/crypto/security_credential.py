"""Security credential generation.

Sensitive operations require the initiator password encrypted with the
gateway's published X.509 certificate (RSA, PKCS#1 v1.5) and base64 encoded.
"""

from __future__ import annotations

import base64

import httpx
from cryptography import x509
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from ..domain.errors import CryptoError
from ..infrastructure.http.http_client import AsyncHttpClient

PEM_MARKER = b"-----BEGIN"


def load_certificate(data: bytes) -> x509.Certificate:
    """Load a certificate from PEM, falling back to raw DER bytes."""
    try:
        if PEM_MARKER in data:
            return x509.load_pem_x509_certificate(data)
        return x509.load_der_x509_certificate(data)
    except ValueError as e:
        raise CryptoError(f"failed to parse certificate: {e}") from e


def encrypt_with_certificate(certificate: x509.Certificate, plaintext: str) -> str:
    """Encrypt ``plaintext`` with the certificate's RSA key and base64 encode it."""
    public_key = certificate.public_key()
    if not isinstance(public_key, rsa.RSAPublicKey):
        raise CryptoError("certificate public key is not an RSA key")
    try:
        cipher = public_key.encrypt(plaintext.encode("utf-8"), padding.PKCS1v15())
    except ValueError as e:
        raise CryptoError(f"failed to encrypt password: {e}") from e
    return base64.b64encode(cipher).decode("utf-8")


class CredentialEncryptor:
    """Turn an initiator password into a gateway security credential.

    The certificate is downloaded on every call; nothing is cached.
    """

    def __init__(self, http: AsyncHttpClient, certificate_url: str) -> None:
        self._http = http
        self._certificate_url = certificate_url

    @property
    def certificate_url(self) -> str:
        return self._certificate_url

    async def fetch_certificate(self) -> x509.Certificate:
        try:
            resp = await self._http.get(self._certificate_url)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise CryptoError(f"failed to get certificate: {e}") from e
        return load_certificate(resp.content)

    async def encrypt(self, password: str) -> str:
        certificate = await self.fetch_certificate()
        return encrypt_with_certificate(certificate, password)
