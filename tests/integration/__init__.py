"""
Integration tests for the Hookline backend client.

Test components together or against real external services:
- Full call path (ResilientClient -> HttpxTransport -> mock backend)
- Credential storage (real Redis, marked with @pytest.mark.integration)
- Production wiring (create_backend_api)
"""
