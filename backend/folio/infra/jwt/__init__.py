from .credential_codec import JWTCredentialCodec

__all__ = ["JWTCredentialCodec"]
