"""Utility modules for the Cozy app shell."""
