"""Weather Response Cache.

Provides the concrete implementation of the WeatherCache interface: an
in-memory entry store with TTL expiry and bounded size, persisted as a
single JSON document written atomically after every mutation.
Bounded Context: Cache Management
"""
