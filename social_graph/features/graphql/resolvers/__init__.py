"""GraphQL resolvers for queries and mutations.

This package contains:
- queries.py: Query resolvers (loader-backed reads)
- mutations.py: Mutation resolvers (repository writes, one commit each)
"""

from __future__ import annotations

from social_graph.features.graphql.resolvers.mutations import Mutation
from social_graph.features.graphql.resolvers.queries import Query

__all__ = ["Mutation", "Query"]
