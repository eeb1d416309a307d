"""Resolution of per-request overrides against the uploader configuration."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from gcloud_storage.storage.models import (
    DEFAULT_PREDEFINED_ACL,
    PerRequestOptions,
    PredefinedAcl,
    StorageConfiguration,
    WriteStreamOptions,
)


@dataclass(frozen=True)
class ResolvedOptions:
    """Effective options for a single upload."""
    bucket_name: str
    predefined_acl: PredefinedAcl
    storage_base_uri: Optional[str]
    write_stream_options: Optional[WriteStreamOptions]
    prefix: Optional[str]


def _pick(override: Any, default: Any) -> Any:
    return override if override is not None else default


def resolve_request_options(
    config: StorageConfiguration,
    overrides: Optional[PerRequestOptions] = None,
) -> ResolvedOptions:
    """Resolve effective options field by field.

    An override field wins whenever it is set. ``write_stream_options`` is
    taken as a whole from whichever side wins; the two option sets are never
    merged key by key. The access-control setting falls back to
    ``publicRead`` when neither side sets it.

    Args:
        config: Process-wide storage configuration
        overrides: Optional per-request overrides

    Returns:
        ResolvedOptions: Options to use for this upload
    """
    overrides = overrides or PerRequestOptions()

    return ResolvedOptions(
        bucket_name=_pick(overrides.default_bucket_name, config.default_bucket_name),
        predefined_acl=_pick(
            overrides.predefined_acl,
            _pick(config.predefined_acl, DEFAULT_PREDEFINED_ACL),
        ),
        storage_base_uri=_pick(overrides.storage_base_uri, config.storage_base_uri),
        write_stream_options=_pick(
            overrides.write_stream_options, config.write_stream_options
        ),
        prefix=overrides.prefix,
    )


def build_stream_options(
    resolved: ResolvedOptions,
    mimetype: Optional[str] = None,
) -> Dict[str, Any]:
    """Build the keyword options for the object write.

    ``content_type`` is present only when a MIME type is known.
    """
    stream_options: Dict[str, Any] = {"predefined_acl": resolved.predefined_acl}

    if resolved.write_stream_options is not None:
        stream_options.update(resolved.write_stream_options.model_dump(exclude_none=True))

    if mimetype:
        stream_options["content_type"] = mimetype

    return stream_options
