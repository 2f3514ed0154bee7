"""Domain layer - Core business logic, entities, and rules.

This layer contains:
- Entities: Card and Payment aggregates with their status state machines
- Value Objects: Money, CardNumber, CardId, PaymentId, YearMonth
- Domain Exceptions: Business rule violations

The domain layer has NO dependencies on external frameworks or infrastructure,
and never reads the clock: time is always passed in.
"""
