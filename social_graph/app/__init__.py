"""FastAPI application: factory, lifespan, routers and middleware."""
