"""
browserhub - Remote Browser Session Broker

Hands out remote browsers (hosted by Browserbase) to WebSocket clients and
makes sure every session is released when its connection goes away.

Architecture:
- Each module is self-contained with clear interfaces
- Modules are completely replaceable
- No module knows the internals of another
- All communication through defined interfaces

Modules:
- provider: Remote browser provider client
- registry: Connection -> session ownership table
- lifecycle: Per-connection session state machine
- gateway: WebSocket connection handling
- api: Wire message models
- config: Process configuration
"""

__version__ = "1.0.0"
