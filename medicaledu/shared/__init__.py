"""
Shared utilities package.

Cross-cutting concerns used by every layer:
- Configuration management
- Structured logging
- Distributed tracing
- Retry policies
- Dependency Injection wiring
"""
