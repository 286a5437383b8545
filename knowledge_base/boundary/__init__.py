"""
Boundary layer.

Adapters for the engine's external collaborators: the document store
(SQLAlchemy) and the on-disk artifact directory.
"""
