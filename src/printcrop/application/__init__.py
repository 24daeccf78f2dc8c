"""Application layer: stateful shells around the pure session core."""
