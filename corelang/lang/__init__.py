"""CORE sessions, errors and the interactive shell."""
