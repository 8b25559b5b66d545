"""
Exceptions for SealBox
Everything raised by the library derives from SealBoxError so callers have a single catch-all
"""


class SealBoxError(Exception):
    # general container for errors
    pass


class StorageError(SealBoxError):
    # raised if the secret storage fails in some way (filesystem, home dir, ...)
    pass


class SerializationError(StorageError):
    # raised when a stored record is malformed and cannot be parsed
    pass


class KeyNotFoundError(StorageError):
    # raised when no record exists under a name

    def __init__(self, name: str):
        super().__init__(f"Key '{name}' not found")
        self.name = name


class KeyAlreadyExistsError(StorageError):
    # raised when storing under a name that is already taken (records are create-once)

    def __init__(self, name: str):
        super().__init__(f"Key '{name}' already exists")
        self.name = name


class InvalidKeyNameError(SealBoxError):
    # raised before any storage access when a name could escape the keys directory

    def __init__(self, name: str, reason: str):
        super().__init__(f"Invalid key name {name!r}: {reason}")
        self.name = name
        self.reason = reason


class CryptoError(SealBoxError):
    # base for key derivation / AEAD failures
    pass


class KeyDerivationError(CryptoError):
    # raised when Argon2 refuses the inputs or parameters
    pass


class EncryptionError(CryptoError):
    # raised when a payload could not be encrypted
    pass


class AuthenticationError(CryptoError):
    # wrong password, tampered or undecodable record; never returns plaintext
    pass


class UnsupportedCipherError(CryptoError):
    # raised when a record names a cipher this build does not implement

    def __init__(self, cipher_id: str):
        super().__init__(f"Unsupported cipher: {cipher_id!r}")
        self.cipher_id = cipher_id
