"""
BoweryConnect Crisis API Tests

Running Tests:
    # Run unit and API tests
    pytest -v

    # Run a single module
    pytest tests/unit/test_analyzer.py -v

    # Live smoke tests against a running server
    CRISIS_API_URL=http://localhost:3000 pytest tests/e2e/smoke_test_e2e.py -v

Test Coverage:
    - Immediate crisis keyword matching
    - System prompt augmentation (emotion, language, location)
    - Triage rules, accumulation and last-writer-wins urgency
    - Orchestrator paths: immediate, analyzed, fallback
    - Resource/tip/language catalog
    - Claude message mapping and error handling
    - HTTP endpoints and error payloads
"""
