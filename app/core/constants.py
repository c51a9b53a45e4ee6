"""Core constants: cache key prefixes and shared literal values."""

# Cache key prefix for effective permission sets (permission:center_id:user_id:version)
CACHE_PREFIX_PERMISSION = "permission"

# Delimiter for composite keys
CACHE_KEY_SEP = ":"
