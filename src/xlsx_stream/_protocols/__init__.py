"""Protocol wrappers for third-party libraries.

Each module imports its library lazily via ``__import__`` and exposes typed
factories, so importing xlsx_stream never imports polars.
"""
