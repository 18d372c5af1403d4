"""
Raw dataset cache.

Two backends share the same read/write interface:
- FileStore: one file per key in a local directory (temp dir by default)
- DynamoStore: one item per key in the config table, for Lambda deployments
  where /tmp does not survive cold starts
"""

import os
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Protocol

from holidaybook.logging_config import get_logger
from holidaybook.settings import Settings

logger = get_logger(__name__)


class RawStore(Protocol):
    def read(self, key: str) -> Optional[bytes]:
        ...

    def write(self, key: str, data: bytes) -> None:
        ...


class FileStore:
    """Cache raw payloads as files in a directory."""

    def __init__(self, directory: os.PathLike, max_age_seconds: Optional[int] = None):
        self.directory = Path(directory)
        self.max_age_seconds = max_age_seconds

    def path_for(self, key: str) -> Path:
        """
        Get the file path for a key.

        Raises:
            ValueError: If the key would point outside the cache directory
        """
        base = self.directory.resolve()
        path = (base / key).resolve()
        if path.parent != base:
            raise ValueError(f"Cache key {key!r} escapes {base}")
        return path

    def read(self, key: str) -> Optional[bytes]:
        path = self.path_for(key)
        if not path.is_file():
            return None

        if self.max_age_seconds is not None:
            age = time.time() - path.stat().st_mtime
            if age > self.max_age_seconds:
                logger.info(
                    "Cached dataset expired",
                    extra={'path': str(path), 'age_seconds': round(age)}
                )
                return None

        return path.read_bytes()

    def write(self, key: str, data: bytes) -> None:
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        # Write then rename so a concurrent reader never sees half a file
        tmp_path = path.with_name(f".{path.name}.tmp")
        tmp_path.write_bytes(data)
        tmp_path.replace(path)
        logger.info("Wrote cache file", extra={'path': str(path), 'bytes': len(data)})


class DynamoStore:
    """
    Cache raw payloads in DynamoDB.

    Table schema (shared config table):
    - config_type (partition key): always 'holiday_dataset'
    - config_key (sort key): cache key
    - data: raw payload (binary)
    - updated_at: ISO timestamp of last write
    - ttl: optional expiry (epoch seconds)
    """

    CONFIG_TYPE = 'holiday_dataset'

    def __init__(
        self,
        table_name: Optional[str] = None,
        region: Optional[str] = None,
        ttl_seconds: Optional[int] = None
    ):
        self.region = region or os.getenv('AWS_REGION', 'us-east-1')
        self.table_name = table_name or os.getenv('CONFIG_TABLE_NAME', 'holidaybook_config')
        self.ttl_seconds = ttl_seconds
        self._dynamodb = None
        self._table = None

    @property
    def dynamodb(self):
        """Lazy-load DynamoDB resource."""
        if self._dynamodb is None:
            import boto3
            self._dynamodb = boto3.resource('dynamodb', region_name=self.region)
        return self._dynamodb

    @property
    def table(self):
        """Lazy-load DynamoDB table."""
        if self._table is None:
            self._table = self.dynamodb.Table(self.table_name)
        return self._table

    def read(self, key: str) -> Optional[bytes]:
        response = self.table.get_item(
            Key={'config_type': self.CONFIG_TYPE, 'config_key': key}
        )
        item = response.get('Item')
        if not item:
            return None

        # DynamoDB deletes expired items lazily
        ttl = item.get('ttl')
        if ttl is not None and int(ttl) < int(time.time()):
            logger.info("Cached dataset expired", extra={'config_key': key})
            return None

        data = item.get('data')
        if data is None:
            return None
        return bytes(data.value) if hasattr(data, 'value') else bytes(data)

    def write(self, key: str, data: bytes) -> None:
        item = {
            'config_type': self.CONFIG_TYPE,
            'config_key': key,
            'data': data,
            'updated_at': datetime.now(timezone.utc).isoformat(),
        }
        if self.ttl_seconds:
            item['ttl'] = int(time.time()) + self.ttl_seconds

        self.table.put_item(Item=item)
        logger.info(
            "Stored dataset in DynamoDB",
            extra={'table': self.table_name, 'config_key': key, 'bytes': len(data)}
        )


def get_store(settings: Settings) -> RawStore:
    """Build the cache backend selected by CACHE_BACKEND."""
    if settings.CACHE_BACKEND == 'dynamodb':
        return DynamoStore(
            table_name=settings.CONFIG_TABLE_NAME,
            region=settings.AWS_REGION,
            ttl_seconds=settings.CACHE_MAX_AGE_SECONDS,
        )
    return FileStore(settings.CACHE_DIR, max_age_seconds=settings.CACHE_MAX_AGE_SECONDS)
