"""GCM Arena tournament score service."""
