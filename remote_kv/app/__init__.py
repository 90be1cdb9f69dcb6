"""FastAPI application assembly: factory, middleware, routers and lifespan."""
