"""
Test suite for the IP Case Dashboard.

Run all tests: pytest
Run unit tests only: pytest tests/unit/
Run specific file: pytest tests/unit/test_dashboard_service.py -v
"""
