"""
Trading bounded context — domain layer.

This module contains all domain logic for the trading context:
- Trade records and batches
- Fixed-size batching of the record stream
- Retrying, transactional batch persistence
- Best-trades (top-N) aggregation per direction
"""
