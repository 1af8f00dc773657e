"""Keep a local file in sync with a remote one."""

import shutil
from pathlib import Path

import structlog

from src.digest import Digester
from src.file_cache import CacheStore
from src.observability.redact import redact_url_credentials
from src.remote_file.fetcher import ConditionalFetcher
from src.remote_file.models import MirrorResult, ResourceOptions
from src.remote_file.transport import Transport


logger = structlog.get_logger()


def ensure_remote_file(
    uri: str,
    path: Path | str,
    *,
    store: CacheStore,
    transport: Transport,
    options: ResourceOptions | None = None,
    digester: Digester | None = None,
) -> MirrorResult:
    """Ensure ``path`` holds the current content of ``uri``.

    The checksum of the existing file decides whether remembered validators
    are sent. New content replaces the file atomically; unchanged content
    leaves it untouched.

    Args:
        uri: URI of the remote file.
        path: Local destination.
        store: Store holding cache-control records.
        transport: HTTP transport.
        options: Resource options.
        digester: Digester for checksums.

    Returns:
        MirrorResult describing the file now at ``path``.
    """
    target = Path(path)
    digester = digester or Digester()
    log = logger.bind(
        component="mirror", uri=redact_url_credentials(uri), path=str(target)
    )

    current_checksum = digester.checksum_for_file(target)
    fetcher = ConditionalFetcher(
        uri,
        options or ResourceOptions(),
        current_checksum,
        store=store,
        transport=transport,
        digester=digester,
    )
    result = fetcher.fetch()

    if result.content is None:
        if current_checksum is None:
            log.warning("not_modified_without_local_copy")
        else:
            log.info("file_up_to_date")
        return MirrorResult(
            path=target,
            updated=False,
            etag=result.etag,
            mtime=result.mtime,
            checksum=current_checksum,
        )

    _install(result.content, target)
    checksum = digester.checksum_for_file(target)
    log.info("file_updated", checksum=checksum)
    return MirrorResult(
        path=target,
        updated=True,
        etag=result.etag,
        mtime=result.mtime,
        checksum=checksum,
    )


def _install(tempfile_path: Path, target: Path) -> None:
    """Move a downloaded temp file over the target path."""
    target.parent.mkdir(parents=True, exist_ok=True)
    staging = target.with_name(f".{target.name}.tmp")
    shutil.move(str(tempfile_path), staging)
    staging.replace(target)
