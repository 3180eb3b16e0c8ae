"""
Application layer - use cases, DTOs, and the sweep scheduler.

This layer orchestrates domain logic by:
1. Defining request/response DTOs for API contracts
2. Implementing use cases over the storage and notifier ports
3. Driving the periodic reminder sweep
"""
