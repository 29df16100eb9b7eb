"""
AWS boundary modules.

Exports: S3StorageClient, DynamoTable, CognitoAdminClient, SesEmailClient,
ImmutableContractStorage
"""

from .cognito_client import CognitoAdminClient
from .contract_storage import ImmutableContractStorage
from .dynamodb import DynamoTable
from .s3_client import S3StorageClient
from .ses_client import SesEmailClient

__all__ = [
    "S3StorageClient",
    "DynamoTable",
    "CognitoAdminClient",
    "SesEmailClient",
    "ImmutableContractStorage",
]
