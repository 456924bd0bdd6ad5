"""Root conftest.py - keeps pytest collection inside tests/."""

collect_ignore_glob = [
    "examples/*.py",
]
