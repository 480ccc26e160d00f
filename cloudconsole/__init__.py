"""
Cloud Console - an HTTP gateway in front of a local cloud emulator.

This package contains the complete application:
- core: Framework-agnostic object listing and key encoding rules
- infrastructure: boto3 wrappers for storage, functions, queues and topics
- api: FastAPI routes, dependencies and error handling
- config: Application configuration
"""

__version__ = "0.1.0"
