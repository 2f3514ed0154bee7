"""Application layer - Use cases and port definitions.

This layer contains:
- Use Cases: card issuance, payment authorization and cancellation,
  card status and limit management
- Ports: Abstract interfaces for repositories, time and locking

The application layer depends only on the domain layer.
Infrastructure implementations are injected via ports.
"""
