"""Infrastructure layer: remote client, local persistence and the dev server."""
