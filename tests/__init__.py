"""
Tests Package - Unit and Integration Tests

Test structure:
- tests/conftest.py - Shared fixtures (sample records, temp JSON files)
- tests/test_<stage>.py - One module per pipeline stage
- tests/test_pipeline.py, test_cli.py, test_api.py - End-to-end runs
"""
