"""Manage authentication scrambles.

(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.
"""

# This module provides the password scrambles used by the two standard MySQL
# authentication plugins.  No protocol is implemented here, only the ability
# to compute the authentication responses.  For a client the typical pattern
# is:
#
#   [ read the server greeting and get 'salt' and the plugin name ]
#
#   response = scramble(plugin, password, salt)
#
#   [ send 'response'; caching_sha2_password may then ask for full auth ]
#
#   encrypted = sha2_rsa_encrypt(password, salt, serverPublicKey)

import hashlib

try:
    from typing import Optional  # pylint: disable=unused-import
except ImportError:
    pass

try:
    from cryptography.hazmat.backends import default_backend
    from cryptography.hazmat.primitives import hashes, serialization
    from cryptography.hazmat.primitives.asymmetric import padding
    RSAImported = True
except ImportError:
    RSAImported = False

from . import protocol
from .exception import NotSupportedError

SCRAMBLE_LENGTH = 20


def _xor(data, key):
    # type: (bytes, bytes) -> bytes
    """XOR DATA with KEY, repeating KEY as needed."""
    klen = len(key)
    return bytes(b ^ key[i % klen] for i, b in enumerate(data))


def scramble_native_password(password, salt):
    # type: (bytes, bytes) -> bytes
    """Compute the mysql_native_password response.

    SHA1(password) XOR SHA1(salt + SHA1(SHA1(password)))
    """
    if not password:
        return b''
    stage1 = hashlib.sha1(password).digest()
    stage2 = hashlib.sha1(stage1).digest()
    digest = hashlib.sha1(salt[:SCRAMBLE_LENGTH] + stage2).digest()
    return _xor(stage1, digest)


def scramble_caching_sha2(password, salt):
    # type: (bytes, bytes) -> bytes
    """Compute the caching_sha2_password fast-auth response.

    SHA256(password) XOR SHA256(SHA256(SHA256(password)) + salt)
    """
    if not password:
        return b''
    p1 = hashlib.sha256(password).digest()
    p2 = hashlib.sha256(p1).digest()
    p3 = hashlib.sha256(p2 + salt[:SCRAMBLE_LENGTH]).digest()
    return _xor(p1, p3)


def scramble(plugin, password, salt):
    # type: (str, bytes, bytes) -> bytes
    """Return the authentication response for the named plugin."""
    if plugin == protocol.NATIVE_PASSWORD:
        return scramble_native_password(password, salt)
    if plugin == protocol.CACHING_SHA2_PASSWORD:
        return scramble_caching_sha2(password, salt)
    raise NotSupportedError("Authentication plugin '%s' is not supported" % (plugin))


def sha2_rsa_encrypt(password, salt, public_key):
    # type: (bytes, bytes, bytes) -> bytes
    """Encrypt the password with the server's RSA public key.

    This is the full-authentication step of caching_sha2_password when the
    connection isn't encrypted.  It needs the cryptography package.
    """
    if not RSAImported:
        raise NotSupportedError("caching_sha2_password full authentication"
                                " requires the 'cryptography' package")
    message = _xor(password + b'\0', salt[:SCRAMBLE_LENGTH])
    key = serialization.load_pem_public_key(public_key, default_backend())
    return key.encrypt(message,  # type: ignore[union-attr]
                       padding.OAEP(mgf=padding.MGF1(algorithm=hashes.SHA1()),
                                    algorithm=hashes.SHA1(),
                                    label=None))
