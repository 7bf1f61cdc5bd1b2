from typing import Iterator, List, Optional, Tuple

from botocore.exceptions import BotoCoreError, ClientError

from ..errors import ObjectNotFoundError, TransportError
from ..models import GroupingPrefix, ListingEntry, RealObject
from .base import CloudProvider

DEFAULT_CHUNK_SIZE = 4 * 1024 * 1024

NOT_FOUND_CODES = ('NoSuchKey', '404', 'NotFound')


def _error_code(e: ClientError) -> str:
    return e.response.get('Error', {}).get('Code', 'Unknown')


class S3Provider(CloudProvider):
    def __init__(self, bucket_name: str, s3_client, delimiter: Optional[str] = None,
                 chunk_size: int = DEFAULT_CHUNK_SIZE):
        self.bucket_name = bucket_name
        self.s3_client = s3_client
        self.delimiter = delimiter
        self.chunk_size = chunk_size

    def describe(self) -> str:
        return f"s3://{self.bucket_name}/"

    def list_page(
        self,
        prefix: str,
        next_token: Optional[str] = None,
    ) -> Tuple[List[ListingEntry], Optional[str]]:
        kwargs = {
            'Bucket': self.bucket_name,
            'Prefix': prefix,
        }
        if self.delimiter:
            kwargs['Delimiter'] = self.delimiter
        if next_token:
            kwargs['ContinuationToken'] = next_token

        try:
            response = self.s3_client.list_objects_v2(**kwargs)
        except ClientError as e:
            raise TransportError(
                f"Error listing S3 objects at '{prefix}': {_error_code(e)}"
            ) from e
        except BotoCoreError as e:
            raise TransportError(f"Error listing S3 objects: {e}") from e

        entries = []
        for obj in response.get('Contents', []):
            entries.append(RealObject(
                name=obj['Key'],
                last_modified=obj['LastModified'],
                size=obj.get('Size'),
            ))
        for cp in response.get('CommonPrefixes', []):
            entries.append(GroupingPrefix(prefix=cp['Prefix']))

        return entries, response.get('NextContinuationToken')

    def iter_chunks(self, name: str) -> Iterator[bytes]:
        try:
            response = self.s3_client.get_object(Bucket=self.bucket_name, Key=name)
            body = response['Body']
            try:
                for chunk in body.iter_chunks(self.chunk_size):
                    yield chunk
            finally:
                body.close()
        except ClientError as e:
            code = _error_code(e)
            if code in NOT_FOUND_CODES:
                raise ObjectNotFoundError(name) from e
            raise TransportError(f"Error accessing object '{name}': {code}") from e
        except BotoCoreError as e:
            raise TransportError(f"Error reading object '{name}': {e}") from e
