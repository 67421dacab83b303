# modvault Test Suite
"""
Test suite including:
- Unit tests per component
- Integration tests (DH + RSA together)
- Security tests (invalid inputs, secret hygiene)

Run with: pytest
Coverage: coverage run -m pytest && coverage report
"""
