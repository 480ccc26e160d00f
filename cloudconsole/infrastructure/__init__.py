"""
Infrastructure layer - external service integrations.

Each subdirectory wraps part of the emulated cloud API:
- aws: Shared client configuration and error base class
- storage: Object storage (S3)
- compute: Function listing (Lambda)
- messaging: Queues (SQS) and notification topics (SNS)

These wrappers translate between boto3 responses and our domain models.
"""
