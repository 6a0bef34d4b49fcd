"""HTTP layer: versioned REST API, short public routes and the access gate."""
