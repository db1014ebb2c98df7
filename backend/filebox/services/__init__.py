"""Service layer: storage, streaming, thumbnails, uploads, stats."""
