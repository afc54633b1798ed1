"""Platform adapters: logging and filesystem primitives."""
