"""HTTP routers, grouped by site area."""
