"""
XtreamEPG Test Suite

Test Categories:
- unit/: Fast, isolated unit tests
- integration/: HTTP endpoint and application startup tests
- fixtures/: Shared sample payloads
"""
