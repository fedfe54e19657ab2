"""
Feature modules for the council backend.

Currently one module, debates: the panel, input guard, admission control,
opinion and vote collection, tally, storage and HTTP routes. A module
exposes Protocols in interfaces.py and is wired together through
api/dependencies.py; callers depend on the protocols.
"""
