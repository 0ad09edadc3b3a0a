"""HTTP routers and pages."""
