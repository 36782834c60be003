"""
Ordered Keyed Collection (OKC) Package

An in-process container library:
    - Collection: ordered Key -> Value storage (keys are str or int)
    - functional combinators (map, filter, partition, ...)
    - key-shape classification (sequential / associative)
    - deep transform engine with export mirroring
    - JSON / YAML bridge

ARCHITECTURAL GUARANTEE:
------------------------
No operation reports "absent" through None or False.
Keyed reads return okc.model.Lookup results.

Fully synchronous. No I/O outside the serialization helpers.
"""

__version__ = "0.1.0"
