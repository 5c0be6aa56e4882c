"""
Conversions between request/metadata models and wire messages.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from blobstream.checksums import (
    compute_crc32c,
    compute_md5_hex,
    decode_crc32c,
    encode_crc32c,
    md5_base64_to_hex,
    md5_hex_to_base64,
)
from blobstream.logging import get_logger
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
    InsertObjectRequest,
    ReadObjectRequest,
    ResumableUploadRequest,
)
from blobstream.proto import storage_pb2
from blobstream.services._ranges import ReadSelector

logger = get_logger(__name__)

_PROJECTIONS = {
    Projection.NO_ACL: storage_pb2.Projection.Value("NO_ACL"),
    Projection.FULL: storage_pb2.Projection.Value("FULL"),
}

_PREDEFINED_ACLS = {
    PredefinedAcl.AUTHENTICATED_READ: "OBJECT_ACL_AUTHENTICATED_READ",
    PredefinedAcl.BUCKET_OWNER_FULL_CONTROL: "OBJECT_ACL_BUCKET_OWNER_FULL_CONTROL",
    PredefinedAcl.BUCKET_OWNER_READ: "OBJECT_ACL_BUCKET_OWNER_READ",
    PredefinedAcl.PRIVATE: "OBJECT_ACL_PRIVATE",
    PredefinedAcl.PROJECT_PRIVATE: "OBJECT_ACL_PROJECT_PRIVATE",
    PredefinedAcl.PUBLIC_READ: "OBJECT_ACL_PUBLIC_READ",
}


# =============================================================================
# Request parameters
# =============================================================================


def set_common_parameters(proto: Any, request: Any) -> None:
    """Set user_project and quota_user; quota_user wins over user_ip."""
    if request.user_project:
        proto.common_request_params.user_project = request.user_project
    if request.user_ip:
        proto.common_request_params.quota_user = request.user_ip
    if request.quota_user:
        proto.common_request_params.quota_user = request.quota_user


def set_common_object_parameters(proto: Any, request: Any) -> None:
    """Attach a customer-supplied encryption key."""
    key = request.encryption_key
    if key is None:
        return
    params = proto.common_object_request_params
    params.encryption_algorithm = key.algorithm
    params.encryption_key = key.key
    params.encryption_key_sha256 = key.sha256


def set_generation_conditions(proto: Any, request: Any) -> None:
    if request.if_generation_match is not None:
        proto.if_generation_match.value = request.if_generation_match
    if request.if_generation_not_match is not None:
        proto.if_generation_not_match.value = request.if_generation_not_match


def set_metageneration_conditions(proto: Any, request: Any) -> None:
    if request.if_metageneration_match is not None:
        proto.if_metageneration_match.value = request.if_metageneration_match
    if request.if_metageneration_not_match is not None:
        proto.if_metageneration_not_match.value = request.if_metageneration_not_match


def projection_to_proto(projection: Projection) -> int:
    return _PROJECTIONS[Projection(projection)]


def predefined_acl_to_proto(acl: PredefinedAcl) -> int:
    """Map a predefined ACL; bucket-only values map to UNSPECIFIED."""
    name = _PREDEFINED_ACLS.get(PredefinedAcl(acl))
    if name is None:
        logger.error(f"Invalid predefined ACL for objects: {acl.value}")
        return storage_pb2.PredefinedObjectAcl.Value("PREDEFINED_OBJECT_ACL_UNSPECIFIED")
    return storage_pb2.PredefinedObjectAcl.Value(name)


def access_control_to_proto(acl: ObjectAccessControl) -> Any:
    result = storage_pb2.ObjectAccessControl(
        role=acl.role,
        etag=acl.etag,
        id=acl.id,
        bucket=acl.bucket,
        object=acl.object,
        generation=acl.generation,
        entity=acl.entity,
        entity_id=acl.entity_id,
        email=acl.email,
        domain=acl.domain,
    )
    if acl.project_team is not None:
        result.project_team.project_number = acl.project_team.project_number
        result.project_team.team = acl.project_team.team
    return result


def _set_object_metadata(resource: Any, metadata: ObjectMetadata | None) -> None:
    if metadata is None:
        return
    if metadata.content_encoding:
        resource.content_encoding = metadata.content_encoding
    if metadata.content_disposition:
        resource.content_disposition = metadata.content_disposition
    if metadata.cache_control:
        resource.cache_control = metadata.cache_control
    for acl in metadata.acl:
        resource.acl.append(access_control_to_proto(acl))
    if metadata.content_language:
        resource.content_language = metadata.content_language
    if metadata.content_type:
        resource.content_type = metadata.content_type
    if metadata.event_based_hold:
        resource.event_based_hold.value = True
    for key, value in metadata.metadata.items():
        resource.metadata[key] = value
    if metadata.storage_class:
        resource.storage_class = metadata.storage_class
    resource.temporary_hold = metadata.temporary_hold


def _set_resource_options(resource: Any, request: Any) -> None:
    if request.content_encoding:
        resource.content_encoding = request.content_encoding
    if request.content_type:
        resource.content_type = request.content_type
    if request.kms_key_name:
        resource.kms_key_name = request.kms_key_name


def _object_spec(spec: Any, request: InsertObjectRequest | ResumableUploadRequest) -> None:
    resource = spec.resource
    _set_resource_options(resource, request)
    _set_object_metadata(resource, request.object_metadata)
    if request.predefined_acl is not None:
        spec.predefined_acl = predefined_acl_to_proto(request.predefined_acl)
    set_generation_conditions(spec, request)
    set_metageneration_conditions(spec, request)
    if request.projection is not None:
        spec.projection = projection_to_proto(request.projection)
    resource.bucket = request.bucket_name
    resource.name = request.object_name


# =============================================================================
# Requests
# =============================================================================


def insert_request_to_proto(request: InsertObjectRequest) -> Any:
    """
    Build the first InsertObject message for a single-shot upload.

    Raises:
        InvalidArgumentError: A caller-supplied checksum is malformed.
    """
    proto = storage_pb2.InsertObjectRequest()
    _object_spec(proto.insert_object_spec, request)
    set_common_object_parameters(proto, request)
    set_common_parameters(proto, request)
    proto.write_offset = 0

    checksums = proto.object_checksums
    if request.crc32c_value is not None:
        checksums.crc32c.value = decode_crc32c(request.crc32c_value)
    elif not request.disable_crc32c:
        checksums.crc32c.value = compute_crc32c(request.contents)

    if request.md5_hash_value is not None:
        checksums.md5_hash = md5_base64_to_hex(request.md5_hash_value)
    elif not request.disable_md5:
        checksums.md5_hash = compute_md5_hex(request.contents)
    return proto


def resumable_request_to_proto(request: ResumableUploadRequest) -> Any:
    proto = storage_pb2.StartResumableWriteRequest()
    _object_spec(proto.insert_object_spec, request)
    set_common_parameters(proto, request)
    set_common_object_parameters(proto, request)
    return proto


def query_request_to_proto(upload_id: str) -> Any:
    return storage_pb2.QueryWriteStatusRequest(upload_id=upload_id)


def read_request_to_proto(request: ReadObjectRequest, selector: ReadSelector) -> Any:
    proto = storage_pb2.GetObjectMediaRequest(
        bucket=request.bucket_name,
        object=request.object_name,
        read_offset=selector.offset,
        read_limit=selector.limit,
    )
    if request.generation is not None:
        proto.generation = request.generation
    set_generation_conditions(proto, request)
    set_metageneration_conditions(proto, request)
    set_common_object_parameters(proto, request)
    set_common_parameters(proto, request)
    return proto


# =============================================================================
# Responses
# =============================================================================


def _timestamp(proto: Any, field: str) -> datetime | None:
    if not proto.HasField(field):
        return None
    ts = getattr(proto, field)
    return datetime.fromtimestamp(ts.seconds + ts.nanos / 1e9, tz=timezone.utc)


def access_control_from_proto(acl: Any) -> ObjectAccessControl:
    team = None
    if acl.HasField("project_team"):
        team = ProjectTeam(
            project_number=acl.project_team.project_number,
            team=acl.project_team.team,
        )
    return ObjectAccessControl(
        role=acl.role,
        entity=acl.entity,
        entity_id=acl.entity_id,
        email=acl.email,
        domain=acl.domain,
        bucket=acl.bucket,
        object=acl.object,
        generation=acl.generation,
        etag=acl.etag,
        id=acl.id,
        project_team=team,
    )


def object_from_proto(obj: Any) -> ObjectMetadata:
    """Convert a wire Object into ObjectMetadata (display checksums)."""
    owner = None
    if obj.HasField("owner"):
        owner = Owner(entity=obj.owner.entity, entity_id=obj.owner.entity_id)
    encryption = None
    if obj.HasField("customer_encryption"):
        encryption = CustomerEncryption(
            encryption_algorithm=obj.customer_encryption.encryption_algorithm,
            key_sha256=obj.customer_encryption.key_sha256,
        )
    return ObjectMetadata(
        bucket=obj.bucket,
        name=obj.name,
        id=obj.id,
        etag=obj.etag,
        generation=obj.generation,
        metageneration=obj.metageneration,
        size=obj.size,
        content_type=obj.content_type,
        content_encoding=obj.content_encoding,
        content_disposition=obj.content_disposition,
        content_language=obj.content_language,
        cache_control=obj.cache_control,
        storage_class=obj.storage_class,
        kms_key_name=obj.kms_key_name,
        component_count=obj.component_count,
        crc32c=encode_crc32c(obj.crc32c.value) if obj.HasField("crc32c") else "",
        md5_hash=md5_hex_to_base64(obj.md5_hash),
        metadata=dict(obj.metadata),
        temporary_hold=obj.temporary_hold,
        event_based_hold=obj.event_based_hold.value if obj.HasField("event_based_hold") else None,
        acl=[access_control_from_proto(acl) for acl in obj.acl],
        owner=owner,
        customer_encryption=encryption,
        time_created=_timestamp(obj, "time_created"),
        updated=_timestamp(obj, "updated"),
        time_deleted=_timestamp(obj, "time_deleted"),
        time_storage_class_updated=_timestamp(obj, "time_storage_class_updated"),
        retention_expiration_time=_timestamp(obj, "retention_expiration_time"),
    )
