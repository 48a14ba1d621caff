"""Configuration constants.

This module contains truly constant values that should NOT be user-configurable.

For configurable defaults, see models.py (SearchConfig, IndexConfig, etc.).
"""

# =============================================================================
# Search defaults applied to out-of-range option values
# =============================================================================

DEFAULT_MAX_RESULTS = 1000
"""Result cap used when max_results <= 0."""

DEFAULT_MAX_DEPTH = 10
"""Directory depth limit used when max_depth < 0."""

DEFAULT_WORKER_COUNT = 8
"""Search worker threads consuming the candidate queue."""

DEFAULT_QUEUE_SIZE = 256
"""Candidate queue capacity; bounds in-flight paths between walker and workers."""

# =============================================================================
# Hard maximums
# =============================================================================

CONTEXT_LINES_MAX = 100
"""Maximum context lines per hit."""

WORKER_COUNT_MAX = 64
"""Maximum search worker threads."""

# =============================================================================
# Internal Implementation Constants
# =============================================================================

QUEUE_POLL_SEC = 0.05
"""Producer put() timeout between cap checks while the queue is full."""

PROJECT_CONFIG_NAME = ".treegrep.yaml"
"""Per-project config file looked up in the search root."""
