"""
swiftkit - Swift toolchain version manager for Linux.

Installs Swift toolchains into a per-user data directory and switches the
active one by linking its executables into a bin directory on PATH.
"""
