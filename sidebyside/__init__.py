"""Side by side: resolve the entities named in a comparison query to Wikipedia pages with images."""
