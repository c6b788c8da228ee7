"""
Gateway Module - Black Box Interface

Purpose: Bidirectional connection handling for browser clients
Interface: handle(websocket), close_all()
Hidden: Connection ids, frame parsing, per-connection task tracking

Disconnect handling is part of the contract: every lost connection is
handed to the lifecycle manager for forced cleanup.
"""

from .gateway import ConnectionGateway

__all__ = ["ConnectionGateway"]
