"""HTTP layer: routes and error rendering."""
