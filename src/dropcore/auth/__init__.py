"""OAuth 1.0a signing and token acquisition."""
