"""
Fragdash - Counter-Strike Esports Dashboard Core

Normalizes match, tournament and player data from PandaScore, FACEIT and
Grid.gg into the view models the dashboard renders.

Main components:
- bracket: Double-elimination bracket reconstruction from previous-match links
- stats: Per-source match stat normalizers and cross-map aggregation
- events: Tournament annotation and series grouping
- players: Name normalization for matching teams/players across payloads
- web: FastAPI JSON endpoints over the pure core
"""

__version__ = "0.3.0"
