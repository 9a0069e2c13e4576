"""did:web DID method resolver."""

__version__ = "0.1.0"

USER_AGENT = f"did-web/{__version__}"
