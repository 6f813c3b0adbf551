"""Adapter implementations for the core interfaces."""
