"""Attendance Register package.

Feature modules (students, register, exports, storage) sit behind a thin Flask
controller layer; the reconciliation logic lives in ``register.store``.
"""
