"""
Orchard EMR - resource lifecycle adapter for Amazon EMR clusters.

Provisions, polls and tears down EMR clusters on behalf of a workflow
orchestrator, exchanging a small opaque instance spec between calls.
"""

__version__ = "0.1.0"
