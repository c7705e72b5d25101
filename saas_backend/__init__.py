"""Multi-tenant SaaS backend: persons, roles, businesses and token auth."""
