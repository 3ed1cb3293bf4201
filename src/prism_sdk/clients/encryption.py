# -*- coding: utf-8 -*-
"""Wallet address encryption for anonymous auctions (RSA-OAEP / SHA-256)."""

from __future__ import annotations

import base64
import structlog
from typing import Any, Callable, Optional, Protocol

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from prism_sdk.exceptions import EncryptionError

# Enclave key; only the enclave can decrypt the user's address.
SDK_KMS_PUBLIC_KEY_PEM = """-----BEGIN PUBLIC KEY-----
MIIBIjANBgkqhkiG9w0BAQEFAAOCAQ8AMIIBCgKCAQEAuJxeNGaN0dT35BkiRTEp
Gc01x12qPKW0h5f5EZs5UuW0d46GJe3Qusve34RaPbY2ZGBQ0ds0nghnZZwy5IBx
LQxAx5Pr6QP8NQvm9so69OfW0nAK4f5oN7tvQwS8y0RcBEKf3zP3Zt1MS4mJrTRX
h/OpchAPCTDD0faKuhUjjJQ+i399onzmdICmmaYAP6ltw050VGgOR5pjnHSgJk5K
q0iF2HJv5U2Zgxn7d1pGzM/VNpGY8rjZSXsCwx8GCp4OZOI381k7eyzDr2nEYm7n
/qH3r+m+2PD6jbJJp0XQGz13fwUyGY2QyFBsLvPWQ8Qr/SSAjS65f3UcPdTtOy0C
rwIDAQAB
-----END PUBLIC KEY-----"""


class AddressEncryptor(Protocol):
    """Capability used by the auction coordinator: plaintext -> base64 ciphertext."""

    def encrypt(self, plaintext: str) -> str: ...


class RsaOaepAddressEncryptor:
    """Encrypts wallet addresses with the enclave's RSA public key.

    OAEP padding with SHA-256 for both the digest and MGF1, no label. The key
    is parsed on first use and cached.
    """

    def __init__(
        self,
        public_key_pem: Optional[str] = None,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the encryptor.

        Args:
            public_key_pem: SPKI PEM public key (defaults to the embedded enclave key).
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._public_key_pem = public_key_pem or SDK_KMS_PUBLIC_KEY_PEM
        self._public_key: Optional[rsa.RSAPublicKey] = None
        self._logger = get_logger(logger_name or self.__class__.__name__)

    def _load_public_key(self) -> rsa.RSAPublicKey:
        if self._public_key is not None:
            return self._public_key
        try:
            key = serialization.load_pem_public_key(self._public_key_pem.encode("ascii"))
        except (ValueError, UnsupportedAlgorithm) as e:
            raise EncryptionError(f"Encryption failed: cannot load public key: {e}") from e
        if not isinstance(key, rsa.RSAPublicKey):
            raise EncryptionError("Encryption failed: public key is not an RSA key")
        self._public_key = key
        return key

    def encrypt(self, plaintext: str) -> str:
        """Encrypt plaintext and return the base64-encoded ciphertext.

        Raises:
            EncryptionError: If the key cannot be loaded or the plaintext is
                rejected (e.g. too long for the key size).
        """
        key = self._load_public_key()
        try:
            ciphertext = key.encrypt(
                plaintext.encode("utf-8"),
                padding.OAEP(
                    mgf=padding.MGF1(algorithm=hashes.SHA256()),
                    algorithm=hashes.SHA256(),
                    label=None,
                ),
            )
        except ValueError as e:
            self._logger.warning(
                "address_encryption_failed",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            raise EncryptionError(f"Encryption failed: {e}") from e
        return base64.b64encode(ciphertext).decode("ascii")
