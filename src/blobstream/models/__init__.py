"""
Pydantic models for blobstream.
"""

from blobstream.models.objects import (
    CustomerEncryption,
    ObjectAccessControl,
    ObjectMetadata,
    Owner,
    PredefinedAcl,
    Projection,
    ProjectTeam,
)
from blobstream.models.requests import (
    EncryptionKey,
    InsertObjectRequest,
    ReadObjectRequest,
    ReadRange,
    ResumableUploadRequest,
)

__all__ = [
    "CustomerEncryption",
    "EncryptionKey",
    "InsertObjectRequest",
    "ObjectAccessControl",
    "ObjectMetadata",
    "Owner",
    "PredefinedAcl",
    "Projection",
    "ProjectTeam",
    "ReadObjectRequest",
    "ReadRange",
    "ResumableUploadRequest",
]
