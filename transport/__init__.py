"""Provider-facing transports."""
