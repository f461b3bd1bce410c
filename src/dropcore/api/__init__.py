"""Dropbox v1 API client, transport and response decoding."""
