"""Service layer: credential store, sessions, verification, contacts."""
