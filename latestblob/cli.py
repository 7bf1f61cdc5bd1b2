import argparse
import os
import sys

import boto3
import botocore
import botocore.client
from azure.identity import DefaultAzureCredential
from azure.storage.blob import ContainerClient

from .commands.clean import do_clean
from .commands.ls import do_list
from .commands.open import do_open
from .config import get_setting, load_config
from .errors import LatestBlobError
from .localfs import default_cache_root
from .progress import Progress, Spinner
from .providers.azure import AzureBlobProvider, account_url
from .providers.base import CloudProvider
from .providers.s3 import S3Provider


def _retry_config(retries, **kwargs):
    return botocore.client.Config(
        retries={'max_attempts': retries + 1, 'mode': 'standard'},
        **kwargs,
    )


def create_s3_client(args, retries=0):
    if args.profile:
        session = boto3.Session(profile_name=args.profile)
        return session.client('s3', endpoint_url=args.endpoint_url, config=_retry_config(retries))
    elif args.access_key and args.secret_key:
        return boto3.client(
            's3',
            aws_access_key_id=args.access_key,
            aws_secret_access_key=args.secret_key,
            endpoint_url=args.endpoint_url,
            config=_retry_config(retries),
        )
    else:
        return boto3.client(
            's3',
            endpoint_url=args.endpoint_url,
            config=_retry_config(retries, signature_version=botocore.UNSIGNED),
        )


def create_container_client(args, retries=0):
    """Build a ContainerClient using the account key when given, else the default Azure credential chain."""
    credential = args.storage_account_key or DefaultAzureCredential()
    return ContainerClient(
        account_url(args.storage_account),
        container_name=args.container,
        credential=credential,
        retry_total=retries,
    )


def create_provider(args, config) -> CloudProvider:
    retries = args.retries if args.retries is not None else get_setting(config, 'retries')
    delimiter = args.delimiter if args.delimiter is not None else get_setting(config, 'delimiter')
    if args.provider == 's3':
        s3_client = create_s3_client(args, retries)
        return S3Provider(
            args.container, s3_client,
            delimiter=delimiter,
            chunk_size=get_setting(config, 'chunk_size'),
        )
    container_client = create_container_client(args, retries)
    return AzureBlobProvider(container_client, delimiter=delimiter)


def _add_connection_options(parser):
    group = parser.add_argument_group('Storage location')
    group.add_argument('-s', '--storage-account', default=os.environ.get('STORAGE_ACCOUNT'),
                       help='Name of the storage account (env: STORAGE_ACCOUNT)')
    group.add_argument('-k', '--storage-account-key', default=os.environ.get('STORAGE_ACCOUNT_KEY'),
                       help='Storage account key (env: STORAGE_ACCOUNT_KEY); default Azure credentials otherwise')
    group.add_argument('-c', '--container-name', dest='container', default=os.environ.get('STORAGE_CONTAINER'),
                       help='Name of the blob container or S3 bucket (env: STORAGE_CONTAINER)')
    group.add_argument('--provider', choices=['azure', 's3'], default=None,
                       help='Storage backend (default: azure, or "provider" from config)')
    group.add_argument('--delimiter', default=None,
                       help='Group listing results by this delimiter (e.g. "/")')
    group.add_argument('--retries', type=int, default=None,
                       help='Retries for failed service requests (default: 0)')

    s3_group = parser.add_argument_group('S3 Authentication methods')
    s3_group.add_argument('--profile', help='AWS CLI profile name for S3')
    s3_group.add_argument('--access-key', help='AWS access key for S3')
    s3_group.add_argument('--secret-key', help='AWS secret key for S3')
    s3_group.add_argument('--endpoint-url', help='Endpoint for S3-compatible storage')


def _add_cache_options(parser):
    parser.add_argument('--cache-dir', default=None,
                        help='Local cache directory (default: blob_cache next to the program)')


def build_parser():
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('--config', dest='config_path', default=None,
                        help='Path to config file (default: ~/.latestblob/config.json)')
    common.add_argument('-v', '--verbose', action='store_true', help='Print request traces to stderr')

    parser = argparse.ArgumentParser(
        prog='latestblob',
        description='Download and open the most recently modified blob under a prefix',
    )
    subparsers = parser.add_subparsers(dest='command', metavar='command')
    subparsers.required = True

    list_parser = subparsers.add_parser('list', parents=[common], help='List objects under a prefix')
    _add_connection_options(list_parser)
    list_parser.add_argument('prefix', help='Prefix of the blob names')
    list_parser.add_argument('--latest', action='store_true', help='Mark the object "open" would pick')

    open_parser = subparsers.add_parser('open', parents=[common], help='Download and open the latest object')
    _add_connection_options(open_parser)
    _add_cache_options(open_parser)
    open_parser.add_argument('prefix', help='Prefix of the blob names')
    open_parser.add_argument('--name', default=None, help='Open this exact object instead of the latest')
    open_parser.add_argument('--no-cache', action='store_true',
                             help='Write the file by base name into the current directory')
    open_parser.add_argument('--binary', action='store_true',
                             help='Write content as-is without checking that it is text')

    clean_parser = subparsers.add_parser('clean', parents=[common], help='Empty the local cache directory')
    _add_cache_options(clean_parser)
    clean_parser.add_argument('-y', '--yes', action='store_true', help='Do not ask for confirmation')

    return parser


def parse_args(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    config = load_config(args.config_path)

    if args.command == 'clean':
        return args, config

    if args.provider is None:
        args.provider = get_setting(config, 'provider')
    if args.provider not in ('azure', 's3'):
        parser.error(f"Unsupported provider in config: {args.provider!r} (azure|s3)")
    if not args.container:
        parser.error('a container name is required (-c/--container-name or STORAGE_CONTAINER)')
    if args.provider == 'azure' and not args.storage_account:
        parser.error('a storage account is required (-s/--storage-account or STORAGE_ACCOUNT)')
    if (args.access_key and not args.secret_key) or (args.secret_key and not args.access_key):
        parser.error('S3 --access-key and --secret-key must be provided together')
    if sum(1 for x in [args.profile, args.access_key] if x) > 1:
        parser.error('Only one S3 authentication method (--profile, --access-key) can be used.')
    if args.retries is not None and args.retries < 0:
        parser.error('--retries must not be negative')
    return args, config


def resolve_cache_root(args, config):
    return args.cache_dir or get_setting(config, 'cache_dir') or default_cache_root()


def main(argv=None):
    args, config = parse_args(argv)
    verbose = args.verbose or bool(get_setting(config, 'verbose'))

    if args.command == 'clean':
        try:
            do_clean(resolve_cache_root(args, config), assume_yes=args.yes)
        except LatestBlobError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        return 0

    try:
        provider = create_provider(args, config)
    except Exception as e:
        print(f"Error creating {args.provider} client: {e}", file=sys.stderr)
        return 1

    try:
        if args.command == 'list':
            do_list(provider, args.prefix, show_latest=args.latest, verbose=verbose)
        else:
            local_root = None if args.no_cache else resolve_cache_root(args, config)
            text_only = bool(get_setting(config, 'text_only')) and not args.binary
            progress = Spinner() if sys.stderr.isatty() and not verbose else Progress()
            do_open(
                provider, args.prefix,
                name=args.name,
                local_root=local_root,
                text_only=text_only,
                progress=progress,
                verbose=verbose,
            )
    except LatestBlobError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
