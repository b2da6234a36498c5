# tests/test_imports.py
# Purpose: ensure key modules import without side-effects or missing deps.


def test_imports_smoke():
    modules = [
        "dvfapi.errors",
        "dvfapi.log",
        "dvfapi.config",
        "dvfapi.models",
        "dvfapi.signer",
        "dvfapi.client",
        "dvfapi.__main__",
    ]
    for m in modules:
        __import__(m)
