"""Services for caching, content delivery and the individual demos."""
