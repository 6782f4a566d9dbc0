"""api/ -- FastAPI application: routes, transport models, error mapping."""
