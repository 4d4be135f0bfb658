"""
Infrastructure adapters for the trading bounded context.

Each sink adapter implements the TransactionalSink port. The trade-list
reader and generator deal with the XML file format.
"""
