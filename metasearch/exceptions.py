"""Custom exception classes for the metadata query service."""


class MetadataServiceError(Exception):
    """
    Base exception class for all request-aborting service errors.
    """
    pass


class StoreConnectionBroken(MetadataServiceError):
    """
    Raised when the search index cannot be reached or returns an unusable response.
    """
    pass


class ChainTransportError(MetadataServiceError):
    """
    Raised when a chain session cannot be established or an RPC call fails.
    """
    pass


class MissingOnchainRecord(MetadataServiceError):
    """
    Raised when a search hit has no corresponding record on chain.
    """

    def __init__(self, key):
        self.key = key
        super().__init__(f"Bad metadata processing: no on-chain record for {key}")


class MetadataDecodeError(MetadataServiceError):
    """
    Raised when a stored field cannot be decoded into its normalized form.
    """
    pass


class PublicKeyDecodeError(MetadataDecodeError):
    """
    Raised when on-chain or off-chain key bytes do not form a valid public key.
    """
    pass


class ConfigurationError(Exception):
    """
    Raised when the process environment is missing or has invalid settings.
    """
    pass
