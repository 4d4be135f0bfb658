"""
Interface layer package.

Contains the command-line entry point and the composition root
that wires infrastructure adapters into use cases.
"""
