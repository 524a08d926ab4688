"""
Unit tests for the Hookline backend client.

Test individual components in isolation:
- Error classifier (rule order, purity, sub-codes)
- Retry policies, backoff math and the call state machine
- Token store hydration and write ordering
- Transports, observer and resources with scripted doubles
"""
