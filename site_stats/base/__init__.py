"""
Site statistics base package.

Provider-agnostic building blocks shared by the stats layer: the counters
snapshot DTO, the error taxonomy and structured logging helpers. Submodules
are imported directly (``site_stats.base.logging``, ``site_stats.base.errors``)
to keep this package free of import-time side effects.
"""
