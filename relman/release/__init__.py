"""Release manifest engine.

- version: version parsing and increment severity
- manifest: manifest model and JSON persistence
- scanner: per-service update detection
- allocator: week-bucketed aggregate version numbering
- orchestrator: the load / scan / commit / tag sequence
"""

from __future__ import annotations
