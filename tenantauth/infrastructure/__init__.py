"""Infrastructure layer: cache backends, store, token codec, identity providers."""
