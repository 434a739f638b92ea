"""
BaseCore - shared infrastructure for the engine bridge services.

Provides settings, logging setup and the per-request correlation context.
Has no knowledge of the engine or of the network layers.
"""
