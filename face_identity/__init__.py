"""
Face clustering and person identity resolution.

Turns detected faces carrying embeddings into stable person clusters, keeps
them current as new faces arrive and applies user merges, splits and labels.

- :mod:`face_identity.core` - settings, exceptions, logging and the service container.
- :mod:`face_identity.domain` - pydantic entities, value objects and abstract interfaces.
- :mod:`face_identity.services` - similarity, clustering, identity resolution, labels and search.
- :mod:`face_identity.infrastructure` - in-memory, JSON file and database label stores.
"""

__version__ = "0.1.0"
