from .google import GoogleAuthService, GoogleIdentity

__all__ = ["GoogleAuthService", "GoogleIdentity"]
