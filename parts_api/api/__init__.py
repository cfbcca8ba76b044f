"""HTTP surface: routers, dependencies, response models, rate limiting."""
