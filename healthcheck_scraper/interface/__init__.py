"""
Interface module - Process entry point and runtime wiring.
"""
