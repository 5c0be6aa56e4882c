"""
Transfer services: uploads, downloads and resumable sessions.
"""

from blobstream.services.base import BaseService
from blobstream.services.download import DownloadService, ObjectReadSource
from blobstream.services.resumable import (
    ResumableSessionParams,
    ResumableUploadService,
    ResumableUploadSession,
    ResumableUploadStatus,
    UploadState,
    decode_session_url,
    encode_session_url,
)
from blobstream.services.upload import UploadChunker

__all__ = [
    "BaseService",
    "DownloadService",
    "ObjectReadSource",
    "ResumableSessionParams",
    "ResumableUploadService",
    "ResumableUploadSession",
    "ResumableUploadStatus",
    "UploadChunker",
    "UploadState",
    "decode_session_url",
    "encode_session_url",
]
