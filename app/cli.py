# app/cli.py
import os
import uvicorn

DEFAULT_PORT = 4000

def dev() -> None:
    uvicorn.run("app.main:app", host="0.0.0.0", port=DEFAULT_PORT, reload=True)

def start() -> None:
    port = int(os.environ.get("PORT", DEFAULT_PORT))
    uvicorn.run("app.main:app", host="0.0.0.0", port=port)

def pytest() -> None:
    import pytest
    # Run all tests in the tests/ directory, stop after first failure
    pytest.main(["-x", "tests"])
