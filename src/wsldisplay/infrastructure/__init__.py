"""Infrastructure layer — file reads, subprocesses, and sockets.

Pure parsing helpers stay separate from the I/O wrappers so tests can
exercise them without touching the system.
"""
