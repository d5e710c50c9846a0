"""Members feature: users, profiles, posts, member types and subscriptions."""
