"""
Knowledge base: uploaded files and links

Files go to the Supabase Storage S3-compatible endpoint under
user_<id>/knowledge/; links are stored as rows only.
"""

import mimetypes
import os
import uuid
from typing import BinaryIO, Callable, Dict, List, Optional, Tuple
from urllib.parse import urlsplit

import boto3
import magic
from botocore.exceptions import BotoCoreError, ClientError
from werkzeug.utils import secure_filename

from .core.logging_config import get_logger
from .errors import StorageError, ValidationError

logger = get_logger(__name__)

TEXT_EXTENSIONS = ['txt', 'md', 'csv', 'json']
DOCUMENT_EXTENSIONS = ['pdf', 'docx', 'doc', 'pptx', 'ppt', 'xlsx', 'xls']
IMAGE_EXTENSIONS = ['png', 'jpg', 'jpeg', 'gif', 'webp', 'svg']
AUDIO_EXTENSIONS = ['mp3', 'wav', 'ogg', 'm4a', 'flac']
VIDEO_EXTENSIONS = ['mp4', 'avi', 'mov', 'webm']

EXTENSION_FAMILIES: Dict[str, str] = {}
for _family, _extensions in (
    ('text', TEXT_EXTENSIONS),
    ('document', DOCUMENT_EXTENSIONS),
    ('image', IMAGE_EXTENSIONS),
    ('audio', AUDIO_EXTENSIONS),
    ('video', VIDEO_EXTENSIONS),
):
    for _ext in _extensions:
        EXTENSION_FAMILIES[_ext] = _family

# Sniffed families an extension family tolerates (containers overlap)
COMPATIBLE_FAMILIES = {
    'text': {'text'},
    'document': {'document'},
    'image': {'image'},
    'audio': {'audio', 'video'},
    'video': {'video', 'audio'},
}

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
MAX_MEDIA_SIZE = 25 * 1024 * 1024  # 25MB for audio and video

CODE_EXTENSIONS = ['js', 'jsx', 'ts', 'tsx', 'py', 'java', 'cpp', 'c', 'html', 'css', 'json', 'xml']
ARCHIVE_EXTENSIONS = ['zip', 'rar', '7z', 'tar', 'gz']


def _extension(filename: str) -> str:
    return filename.rsplit('.', 1)[-1].lower() if filename and '.' in filename else ''


def _mime_family(mime: str) -> Optional[str]:
    """Family of a sniffed MIME type, or None when it says nothing useful"""
    if mime == 'image/svg+xml':
        return 'image'
    if mime == 'application/pdf':
        return 'document'
    for prefix in ('image', 'audio', 'video', 'text'):
        if mime.startswith(prefix + '/'):
            return prefix
    return None


def format_file_size(size: Optional[int]) -> str:
    """Human readable size; links have no size and show as URL"""
    if not size:
        return 'URL'
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def file_kind(name: str, item_type: str = 'file') -> str:
    """Icon category for a knowledge item"""
    if item_type == 'link' or (name or '').startswith('http'):
        return 'link'

    ext = _extension(name)
    if not ext:
        return 'link'
    if ext in CODE_EXTENSIONS:
        return 'code'
    if ext == 'pdf':
        return 'pdf'
    if ext in VIDEO_EXTENSIONS or ext in ('wmv', 'flv', 'mkv'):
        return 'video'
    if ext in IMAGE_EXTENSIONS or ext == 'bmp':
        return 'image'
    if ext in AUDIO_EXTENSIONS or ext == 'aac':
        return 'audio'
    if ext in ARCHIVE_EXTENSIONS:
        return 'archive'
    return 'document'


class StorageManager:
    """Manages knowledge file storage on the Supabase S3-compatible endpoint"""

    def __init__(self, endpoint_url: str = None, access_key: str = None, secret_key: str = None,
                 region: str = None, bucket_name: str = None, s3_client=None):
        """Initialize S3 client; pass s3_client to reuse an existing one"""
        self.endpoint_url = endpoint_url or os.environ.get('SUPABASE_S3_ENDPOINT')
        self.region = region or os.environ.get('SUPABASE_S3_REGION', 'us-east-1')
        self.bucket_name = bucket_name or os.environ.get('KNOWLEDGE_BUCKET', 'knowledge-base')

        if s3_client is not None:
            self.s3_client = s3_client
            return

        access_key = access_key or os.environ.get('SUPABASE_S3_KEY')
        secret_key = secret_key or os.environ.get('SUPABASE_S3_SECRET')
        if not all([self.endpoint_url, access_key, secret_key]):
            raise StorageError(
                "Missing storage credentials. "
                "Set SUPABASE_S3_ENDPOINT, SUPABASE_S3_KEY, and SUPABASE_S3_SECRET"
            )

        self.s3_client = boto3.client(
            's3',
            endpoint_url=self.endpoint_url,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            region_name=self.region
        )

    def validate_file(self, file_obj: BinaryIO, filename: str) -> Tuple[bool, Optional[str], Optional[str]]:
        """
        Validate file type and size

        Args:
            file_obj: File object to validate
            filename: Name of the file

        Returns:
            Tuple of (is_valid, error_message, file_family)
        """
        file_ext = _extension(filename)
        family = EXTENSION_FAMILIES.get(file_ext)
        if family is None:
            shown = f".{file_ext}" if file_ext else "without extension"
            return False, f"File type {shown} is not supported", None

        file_obj.seek(0, 2)
        file_size = file_obj.tell()
        file_obj.seek(0)

        if file_size == 0:
            return False, "File is empty", None

        max_size = MAX_MEDIA_SIZE if family in ('audio', 'video') else MAX_FILE_SIZE
        if file_size > max_size:
            return False, (
                f"File size {file_size / 1024 / 1024:.1f}MB exceeds maximum of "
                f"{max_size // (1024 * 1024)}MB"
            ), None

        # Magic-number sniff catches renamed files
        try:
            mime = magic.from_buffer(file_obj.read(2048), mime=True)
        except magic.MagicException as e:
            logger.warning(f"Could not verify MIME type of {filename}: {e}")
            mime = None
        finally:
            file_obj.seek(0)

        if mime:
            sniffed = _mime_family(mime)
            if sniffed and sniffed not in COMPATIBLE_FAMILIES[family]:
                if not (file_ext == 'svg' and sniffed == 'text'):
                    return False, f"File content type {mime} doesn't match extension .{file_ext}", None

        return True, None, family

    def build_storage_key(self, user_id: int, filename: str) -> str:
        safe_name = secure_filename(filename) or 'file'
        return f"user_{user_id}/knowledge/{uuid.uuid4().hex}_{safe_name}"

    def upload_file(self, file_obj: BinaryIO, user_id: int, filename: str,
                    content_type: str = None) -> Tuple[str, str]:
        """
        Upload a knowledge file

        Returns:
            Tuple of (storage_key, storage_url)

        Raises:
            StorageError if upload fails
        """
        storage_key = self.build_storage_key(user_id, filename)
        content_type = (
            content_type
            or mimetypes.guess_type(filename)[0]
            or 'application/octet-stream'
        )

        try:
            file_obj.seek(0)
            self.s3_client.upload_fileobj(
                file_obj,
                self.bucket_name,
                storage_key,
                ExtraArgs={
                    'ACL': 'private',
                    'ContentType': content_type
                }
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to upload {storage_key}: {e}")
            raise StorageError(f"Failed to upload file: {e}")

        storage_url = f"{self.endpoint_url}/{self.bucket_name}/{storage_key}"
        logger.info(f"Uploaded knowledge file {storage_key}")
        return storage_key, storage_url

    def generate_download_url(self, storage_key: str, expires_in: int = 3600) -> str:
        """Presigned URL for downloading a file (default 1 hour)"""
        try:
            return self.s3_client.generate_presigned_url(
                'get_object',
                Params={
                    'Bucket': self.bucket_name,
                    'Key': storage_key
                },
                ExpiresIn=expires_in
            )
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"Failed to generate download URL: {e}")

    def delete_file(self, storage_key: str) -> bool:
        try:
            self.s3_client.delete_object(
                Bucket=self.bucket_name,
                Key=storage_key
            )
            return True
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to delete {storage_key}: {e}")
            return False


class KnowledgeBase:
    """Knowledge items of a user: `knowledge_files` rows plus stored objects"""

    def __init__(self, get_db_connection: Callable, storage: StorageManager = None,
                 storage_factory: Callable[[], StorageManager] = StorageManager):
        self.get_db_connection = get_db_connection
        self._storage = storage
        self._storage_factory = storage_factory

    @property
    def storage(self) -> StorageManager:
        # Created on first use so the app starts without storage credentials
        if self._storage is None:
            self._storage = self._storage_factory()
        return self._storage

    def list_files(self, user_id: int) -> List[Dict]:
        conn = self.get_db_connection()
        try:
            cursor = conn.cursor()
            cursor.execute('''
                SELECT id, name, type, url, size, storage_path, content_type, created_at
                FROM knowledge_files
                WHERE user_id = %s
                ORDER BY created_at DESC, id DESC
            ''', (user_id,))
            return [dict(row) for row in cursor.fetchall()]
        finally:
            conn.close()

    def _insert(self, user_id: int, name: str, item_type: str, url: str, size: Optional[int],
                storage_path: Optional[str], content_type: Optional[str]) -> Dict:
        conn = self.get_db_connection()
        try:
            cursor = conn.cursor()
            cursor.execute('''
                INSERT INTO knowledge_files (user_id, name, type, url, size, storage_path, content_type)
                VALUES (%s, %s, %s, %s, %s, %s, %s)
                RETURNING id, name, type, url, size, storage_path, content_type, created_at
            ''', (user_id, name, item_type, url, size, storage_path, content_type))
            row = cursor.fetchone()
            conn.commit()
            return dict(row)
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def add_file(self, user_id: int, file_storage) -> Dict:
        """Validate, upload and record a werkzeug FileStorage"""
        filename = getattr(file_storage, 'filename', None)
        if not file_storage or not filename:
            raise ValidationError('Please choose a file to upload', field='file')

        stream = file_storage.stream
        is_valid, error, _family = self.storage.validate_file(stream, filename)
        if not is_valid:
            raise ValidationError(error, field='file')

        stream.seek(0, 2)
        size = stream.tell()
        stream.seek(0)

        content_type = file_storage.mimetype or mimetypes.guess_type(filename)[0]
        storage_key, storage_url = self.storage.upload_file(stream, user_id, filename, content_type)

        try:
            item = self._insert(user_id, filename, 'file', storage_url, size, storage_key, content_type)
        except Exception:
            # Don't leave an orphaned object behind
            self.storage.delete_file(storage_key)
            raise

        logger.info(f"Added knowledge file {item['id']} for user {user_id}")
        return item

    def add_link(self, user_id: int, raw_url: str) -> Dict:
        url = (raw_url or '').strip()
        if not url:
            raise ValidationError('Please enter a URL', field='url')

        if not url.lower().startswith(('http://', 'https://')):
            url = f"https://{url}"

        try:
            parts = urlsplit(url)
            hostname = parts.hostname or ''
        except ValueError:
            hostname = ''

        if '.' not in hostname:
            raise ValidationError('Please enter a valid URL', field='url')

        item = self._insert(user_id, url, 'link', url, None, None, None)
        logger.info(f"Added knowledge link {item['id']} for user {user_id}")
        return item

    def remove_file(self, user_id: int, file_id: int) -> bool:
        """Delete one of the user's items and its stored object; False if not theirs"""
        conn = self.get_db_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                'DELETE FROM knowledge_files WHERE id = %s AND user_id = %s RETURNING storage_path',
                (file_id, user_id)
            )
            row = cursor.fetchone()
            conn.commit()
        finally:
            conn.close()

        if not row:
            return False

        if row['storage_path']:
            self.storage.delete_file(row['storage_path'])

        logger.info(f"Removed knowledge item {file_id} for user {user_id}")
        return True
