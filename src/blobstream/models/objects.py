"""
Object metadata models.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class Projection(str, Enum):
    """Which metadata fields the service returns."""

    NO_ACL = "noAcl"
    FULL = "full"


class PredefinedAcl(str, Enum):
    """Canned ACLs applied to a new object."""

    AUTHENTICATED_READ = "authenticatedRead"
    BUCKET_OWNER_FULL_CONTROL = "bucketOwnerFullControl"
    BUCKET_OWNER_READ = "bucketOwnerRead"
    PRIVATE = "private"
    PROJECT_PRIVATE = "projectPrivate"
    PUBLIC_READ = "publicRead"
    # Valid for buckets only
    PUBLIC_READ_WRITE = "publicReadWrite"


class Owner(BaseModel):
    """Object owner."""

    entity: str = ""
    entity_id: str = ""


class ProjectTeam(BaseModel):
    """Project team an ACL entry refers to."""

    project_number: str = ""
    team: str = ""


class ObjectAccessControl(BaseModel):
    """Single ACL entry on an object."""

    role: str = ""
    entity: str = ""
    entity_id: str = ""
    email: str = ""
    domain: str = ""
    bucket: str = ""
    object: str = ""
    generation: int = 0
    etag: str = ""
    id: str = ""
    project_team: ProjectTeam | None = None


class CustomerEncryption(BaseModel):
    """Customer-supplied encryption key reported by the service."""

    encryption_algorithm: str = ""
    key_sha256: str = ""


class ObjectMetadata(BaseModel):
    """
    Metadata of a stored object.

    Checksums use display encoding: crc32c and md5_hash are base64.
    """

    bucket: str = ""
    name: str = ""
    id: str = ""
    etag: str = ""
    generation: int = 0
    metageneration: int = 0
    size: int = 0
    content_type: str = ""
    content_encoding: str = ""
    content_disposition: str = ""
    content_language: str = ""
    cache_control: str = ""
    storage_class: str = ""
    kms_key_name: str = ""
    component_count: int = 0
    crc32c: str = ""
    md5_hash: str = ""
    metadata: dict[str, str] = Field(default_factory=dict)
    temporary_hold: bool = False
    event_based_hold: bool | None = None
    acl: list[ObjectAccessControl] = Field(default_factory=list)
    owner: Owner | None = None
    customer_encryption: CustomerEncryption | None = None
    time_created: datetime | None = None
    updated: datetime | None = None
    time_deleted: datetime | None = None
    time_storage_class_updated: datetime | None = None
    retention_expiration_time: datetime | None = None
    kind: str = "storage#object"
