"""Domain models, constants and errors.

Plain data and exceptions only: no zip files, subprocesses or CLI here.
"""
