"""Self-hosted personal file box: metadata store, range streaming and video thumbnails."""
