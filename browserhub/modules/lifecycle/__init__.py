"""
Lifecycle Module - Black Box Interface

Purpose: Per-connection remote browser lifecycle (IDLE -> CREATING -> READY -> STOPPING)
Interface: attach(), start(), navigate(), stop(), release(), drain()
Hidden: Per-connection locks, provider timeouts, cleanup ordering

Guarantees at most one remote session per connection and releases it on
every exit path, including disconnects and process shutdown.
"""

from .lifecycle import NOT_CONFIGURED_MESSAGE, ConnectionState, Emitter, LifecycleManager

__all__ = ["LifecycleManager", "ConnectionState", "Emitter", "NOT_CONFIGURED_MESSAGE"]
