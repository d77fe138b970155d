"""Boundary layer: Mongo repositories and downstream HTTP connectors."""
