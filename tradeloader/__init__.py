"""
tradeloader: batched trade persistence and best-trades reporting.

Application package root. This is a small modular monolith using
hexagonal architecture (ports & adapters).

Layers:
    - domain: Trade records, batching, the retrying committer, top-N
      aggregation, the transactional sink port, errors.
    - application: Use cases, DTOs, orchestration.
    - infrastructure: Adapters (SQLAlchemy, in-memory, XML files)
      implementing domain ports.
    - interfaces: Command-line entry point and composition root.
    - core / shared: Configuration and logging.
"""

__version__ = "0.1.0"
