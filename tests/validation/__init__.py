# tests/validation/__init__.py
"""Physics verification tests for solarlens.

These tests go beyond software correctness to verify:
- Flux conservation through restoration
- Lens geometry against closed-form limits
- Consistency of the inverse problems (flux to radius, Doppler to orbit)
"""
