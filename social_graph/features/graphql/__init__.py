"""GraphQL API over the members feature (Strawberry on FastAPI)."""
