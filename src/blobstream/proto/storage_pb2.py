"""
Wire messages for the blobstream.storage.v1 service.

The schema is declared as a FileDescriptorProto and registered with the
default protobuf descriptor pool at import time; message classes are then
obtained from the pool, exactly like protoc-generated modules do.
"""

from __future__ import annotations

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory
from google.protobuf import timestamp_pb2, wrappers_pb2  # noqa: F401  registers dependencies
from google.protobuf.internal import enum_type_wrapper

PACKAGE = "blobstream.storage.v1"
SERVICE_NAME = f"{PACKAGE}.Storage"

_F = descriptor_pb2.FieldDescriptorProto

_STRING = _F.TYPE_STRING
_BYTES = _F.TYPE_BYTES
_BOOL = _F.TYPE_BOOL
_INT32 = _F.TYPE_INT32
_INT64 = _F.TYPE_INT64
_MESSAGE = _F.TYPE_MESSAGE
_ENUM = _F.TYPE_ENUM

_UINT32_VALUE = ".google.protobuf.UInt32Value"
_INT64_VALUE = ".google.protobuf.Int64Value"
_BOOL_VALUE = ".google.protobuf.BoolValue"
_TIMESTAMP = ".google.protobuf.Timestamp"


def _local(name: str) -> str:
    return f".{PACKAGE}.{name}"


def _field(
    message: descriptor_pb2.DescriptorProto,
    name: str,
    number: int,
    field_type: int,
    type_name: str | None = None,
    repeated: bool = False,
    oneof_index: int | None = None,
) -> None:
    field = message.field.add(
        name=name,
        number=number,
        type=field_type,
        label=_F.LABEL_REPEATED if repeated else _F.LABEL_OPTIONAL,
    )
    if type_name is not None:
        field.type_name = type_name
    if oneof_index is not None:
        field.oneof_index = oneof_index


def _preconditions(message: descriptor_pb2.DescriptorProto, first_number: int) -> None:
    for offset, name in enumerate(
        (
            "if_generation_match",
            "if_generation_not_match",
            "if_metageneration_match",
            "if_metageneration_not_match",
        )
    ):
        _field(message, name, first_number + offset, _MESSAGE, _INT64_VALUE)


def _build_file() -> descriptor_pb2.FileDescriptorProto:
    f = descriptor_pb2.FileDescriptorProto(
        name="blobstream/storage/v1/storage.proto",
        package=PACKAGE,
        syntax="proto3",
        dependency=[
            "google/protobuf/wrappers.proto",
            "google/protobuf/timestamp.proto",
        ],
    )

    projection = f.enum_type.add(name="Projection")
    for number, name in enumerate(("PROJECTION_UNSPECIFIED", "NO_ACL", "FULL")):
        projection.value.add(name=name, number=number)

    acl = f.enum_type.add(name="PredefinedObjectAcl")
    for number, name in enumerate(
        (
            "PREDEFINED_OBJECT_ACL_UNSPECIFIED",
            "OBJECT_ACL_AUTHENTICATED_READ",
            "OBJECT_ACL_BUCKET_OWNER_FULL_CONTROL",
            "OBJECT_ACL_BUCKET_OWNER_READ",
            "OBJECT_ACL_PRIVATE",
            "OBJECT_ACL_PROJECT_PRIVATE",
            "OBJECT_ACL_PUBLIC_READ",
        )
    ):
        acl.value.add(name=name, number=number)

    m = f.message_type.add(name="ChecksummedData")
    _field(m, "content", 1, _BYTES)
    _field(m, "crc32c", 2, _MESSAGE, _UINT32_VALUE)

    m = f.message_type.add(name="ObjectChecksums")
    _field(m, "crc32c", 1, _MESSAGE, _UINT32_VALUE)
    _field(m, "md5_hash", 2, _STRING)

    m = f.message_type.add(name="ContentRange")
    _field(m, "start", 1, _INT64)
    _field(m, "end", 2, _INT64)
    _field(m, "complete_length", 3, _INT64)

    m = f.message_type.add(name="Owner")
    _field(m, "entity", 1, _STRING)
    _field(m, "entity_id", 2, _STRING)

    m = f.message_type.add(name="ProjectTeam")
    _field(m, "project_number", 1, _STRING)
    _field(m, "team", 2, _STRING)

    m = f.message_type.add(name="ObjectAccessControl")
    for number, name in enumerate(("role", "etag", "id", "bucket", "object"), start=1):
        _field(m, name, number, _STRING)
    _field(m, "generation", 6, _INT64)
    for number, name in enumerate(("entity", "entity_id", "email", "domain"), start=7):
        _field(m, name, number, _STRING)
    _field(m, "project_team", 11, _MESSAGE, _local("ProjectTeam"))

    m = f.message_type.add(name="CustomerEncryption")
    _field(m, "encryption_algorithm", 1, _STRING)
    _field(m, "key_sha256", 2, _STRING)

    m = f.message_type.add(name="Object")
    entry = m.nested_type.add(name="MetadataEntry")
    entry.options.map_entry = True
    _field(entry, "key", 1, _STRING)
    _field(entry, "value", 2, _STRING)
    _field(m, "content_encoding", 1, _STRING)
    _field(m, "content_disposition", 2, _STRING)
    _field(m, "cache_control", 3, _STRING)
    _field(m, "acl", 4, _MESSAGE, _local("ObjectAccessControl"), repeated=True)
    _field(m, "content_language", 5, _STRING)
    _field(m, "metageneration", 6, _INT64)
    _field(m, "time_deleted", 7, _MESSAGE, _TIMESTAMP)
    _field(m, "content_type", 8, _STRING)
    _field(m, "size", 9, _INT64)
    _field(m, "time_created", 10, _MESSAGE, _TIMESTAMP)
    _field(m, "crc32c", 11, _MESSAGE, _UINT32_VALUE)
    _field(m, "component_count", 12, _INT32)
    _field(m, "md5_hash", 13, _STRING)
    _field(m, "etag", 14, _STRING)
    _field(m, "updated", 15, _MESSAGE, _TIMESTAMP)
    _field(m, "storage_class", 16, _STRING)
    _field(m, "kms_key_name", 17, _STRING)
    _field(m, "time_storage_class_updated", 18, _MESSAGE, _TIMESTAMP)
    _field(m, "temporary_hold", 19, _BOOL)
    _field(m, "retention_expiration_time", 20, _MESSAGE, _TIMESTAMP)
    _field(m, "metadata", 21, _MESSAGE, _local("Object.MetadataEntry"), repeated=True)
    _field(m, "name", 23, _STRING)
    _field(m, "id", 24, _STRING)
    _field(m, "bucket", 25, _STRING)
    _field(m, "generation", 26, _INT64)
    _field(m, "owner", 27, _MESSAGE, _local("Owner"))
    _field(m, "customer_encryption", 28, _MESSAGE, _local("CustomerEncryption"))
    _field(m, "event_based_hold", 29, _MESSAGE, _BOOL_VALUE)

    m = f.message_type.add(name="CommonRequestParams")
    _field(m, "user_project", 1, _STRING)
    _field(m, "quota_user", 2, _STRING)

    m = f.message_type.add(name="CommonObjectRequestParams")
    _field(m, "encryption_algorithm", 1, _STRING)
    _field(m, "encryption_key", 2, _STRING)
    _field(m, "encryption_key_sha256", 3, _STRING)

    m = f.message_type.add(name="InsertObjectSpec")
    _field(m, "resource", 1, _MESSAGE, _local("Object"))
    _field(m, "predefined_acl", 2, _ENUM, _local("PredefinedObjectAcl"))
    _preconditions(m, 3)
    _field(m, "projection", 7, _ENUM, _local("Projection"))

    m = f.message_type.add(name="InsertObjectRequest")
    m.oneof_decl.add(name="first_message")
    _field(m, "upload_id", 1, _STRING, oneof_index=0)
    _field(m, "insert_object_spec", 2, _MESSAGE, _local("InsertObjectSpec"), oneof_index=0)
    _field(m, "write_offset", 3, _INT64)
    _field(m, "checksummed_data", 4, _MESSAGE, _local("ChecksummedData"))
    _field(m, "object_checksums", 5, _MESSAGE, _local("ObjectChecksums"))
    _field(m, "finish_write", 6, _BOOL)
    _field(m, "common_object_request_params", 7, _MESSAGE, _local("CommonObjectRequestParams"))
    _field(m, "common_request_params", 8, _MESSAGE, _local("CommonRequestParams"))

    m = f.message_type.add(name="GetObjectMediaRequest")
    _field(m, "bucket", 1, _STRING)
    _field(m, "object", 2, _STRING)
    _field(m, "generation", 3, _INT64)
    _field(m, "read_offset", 4, _INT64)
    _field(m, "read_limit", 5, _INT64)
    _preconditions(m, 6)
    _field(m, "common_object_request_params", 10, _MESSAGE, _local("CommonObjectRequestParams"))
    _field(m, "common_request_params", 11, _MESSAGE, _local("CommonRequestParams"))

    m = f.message_type.add(name="GetObjectMediaResponse")
    _field(m, "checksummed_data", 1, _MESSAGE, _local("ChecksummedData"))
    _field(m, "object_checksums", 2, _MESSAGE, _local("ObjectChecksums"))
    _field(m, "content_range", 3, _MESSAGE, _local("ContentRange"))
    _field(m, "metadata", 4, _MESSAGE, _local("Object"))

    m = f.message_type.add(name="StartResumableWriteRequest")
    _field(m, "insert_object_spec", 1, _MESSAGE, _local("InsertObjectSpec"))
    _field(m, "common_request_params", 3, _MESSAGE, _local("CommonRequestParams"))
    _field(m, "common_object_request_params", 4, _MESSAGE, _local("CommonObjectRequestParams"))

    m = f.message_type.add(name="StartResumableWriteResponse")
    _field(m, "upload_id", 1, _STRING)

    m = f.message_type.add(name="QueryWriteStatusRequest")
    _field(m, "upload_id", 1, _STRING)
    _field(m, "common_object_request_params", 2, _MESSAGE, _local("CommonObjectRequestParams"))
    _field(m, "common_request_params", 3, _MESSAGE, _local("CommonRequestParams"))

    m = f.message_type.add(name="QueryWriteStatusResponse")
    _field(m, "committed_size", 1, _INT64)
    _field(m, "complete", 2, _BOOL)

    service = f.service.add(name="Storage")
    service.method.add(
        name="InsertObject",
        input_type=_local("InsertObjectRequest"),
        output_type=_local("Object"),
        client_streaming=True,
    )
    service.method.add(
        name="GetObjectMedia",
        input_type=_local("GetObjectMediaRequest"),
        output_type=_local("GetObjectMediaResponse"),
        server_streaming=True,
    )
    service.method.add(
        name="StartResumableWrite",
        input_type=_local("StartResumableWriteRequest"),
        output_type=_local("StartResumableWriteResponse"),
    )
    service.method.add(
        name="QueryWriteStatus",
        input_type=_local("QueryWriteStatusRequest"),
        output_type=_local("QueryWriteStatusResponse"),
    )
    return f


_POOL = descriptor_pool.Default()

try:
    DESCRIPTOR = _POOL.FindFileByName("blobstream/storage/v1/storage.proto")
except KeyError:
    DESCRIPTOR = _POOL.AddSerializedFile(_build_file().SerializeToString())


def _message(name: str):
    return message_factory.GetMessageClass(_POOL.FindMessageTypeByName(f"{PACKAGE}.{name}"))


Projection = enum_type_wrapper.EnumTypeWrapper(_POOL.FindEnumTypeByName(f"{PACKAGE}.Projection"))
PredefinedObjectAcl = enum_type_wrapper.EnumTypeWrapper(
    _POOL.FindEnumTypeByName(f"{PACKAGE}.PredefinedObjectAcl")
)

ChecksummedData = _message("ChecksummedData")
ObjectChecksums = _message("ObjectChecksums")
ContentRange = _message("ContentRange")
Owner = _message("Owner")
ProjectTeam = _message("ProjectTeam")
ObjectAccessControl = _message("ObjectAccessControl")
CustomerEncryption = _message("CustomerEncryption")
Object = _message("Object")
CommonRequestParams = _message("CommonRequestParams")
CommonObjectRequestParams = _message("CommonObjectRequestParams")
InsertObjectSpec = _message("InsertObjectSpec")
InsertObjectRequest = _message("InsertObjectRequest")
GetObjectMediaRequest = _message("GetObjectMediaRequest")
GetObjectMediaResponse = _message("GetObjectMediaResponse")
StartResumableWriteRequest = _message("StartResumableWriteRequest")
StartResumableWriteResponse = _message("StartResumableWriteResponse")
QueryWriteStatusRequest = _message("QueryWriteStatusRequest")
QueryWriteStatusResponse = _message("QueryWriteStatusResponse")
