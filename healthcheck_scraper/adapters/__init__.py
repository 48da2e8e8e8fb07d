"""
Adapters module - Framework-specific implementations of the core ports.
"""
