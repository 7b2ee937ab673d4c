"""Blueprint Runner: declarative machine provisioning.

Core design goals:
- Blueprints (yaml/json/toml) describe desired state; the runner applies it
- Run order comes from the init descriptor, never from directory listing luck
- One failing package never blocks the others
- Structural problems (no source, no init file, bad blueprint) stop the run
- Centralized logging
"""

__all__ = []
