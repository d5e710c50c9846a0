"""GraphQL gateway over users, profiles, posts, member types and subscriptions."""

__version__ = "0.1.0"
