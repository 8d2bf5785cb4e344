"""Core transfer engine: transport, crypto, manifest, upload and download."""
