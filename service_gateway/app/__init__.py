"""
Steam API gateway application.

The gateway fronts the Steam Web API, enforcing:
- Authentication: API keys from a header or query parameter
- Rate limiting: per-key sliding minute and hour windows
- Translation: normalized requests to Steam's versioned and store URLs
- Decoding: tolerant parsing of Steam's inconsistent JSON

Structure:
- app.main: FastAPI app, routes, and middleware wiring.
- app.auth: API key registry and authenticator.
- app.ratelimit: Sliding window limiter.
- app.adapters: Request translator and Steam HTTP transport.
- app.domain: The API key and rate limit middleware.
"""
