"""In-memory services for configuration, events, metrics and pattern matching."""