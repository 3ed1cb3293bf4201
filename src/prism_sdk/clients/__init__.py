"""HTTP and encryption clients."""

from prism_sdk.clients.encryption import (
    SDK_KMS_PUBLIC_KEY_PEM,
    AddressEncryptor,
    RsaOaepAddressEncryptor,
)
from prism_sdk.clients.http import AsyncHttpClient, HttpResponse

__all__ = [
    "SDK_KMS_PUBLIC_KEY_PEM",
    "AddressEncryptor",
    "AsyncHttpClient",
    "HttpResponse",
    "RsaOaepAddressEncryptor",
]
