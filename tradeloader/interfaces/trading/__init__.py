"""Composition root for the trading bounded context."""
