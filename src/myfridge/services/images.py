"""Storage reference to public URL resolution."""

from dataclasses import dataclass

from myfridge.config import DEFAULT_BUCKET

_STRIP_CHARS = "`[]\" "


@dataclass(frozen=True)
class ImageUrlResolver:
    """Map stored object references to fetchable public URLs."""

    base_url: str
    default_bucket: str = DEFAULT_BUCKET
    allowed_buckets: frozenset[str] = frozenset({DEFAULT_BUCKET})

    def resolve(self, ref: str | None) -> str | None:
        """Return a public URL for a reference, or None when it is blank."""
        if ref is None:
            return None
        cleaned = ref.strip().strip(_STRIP_CHARS)
        if not cleaned:
            return None
        if cleaned.startswith(("http://", "https://")):
            return cleaned

        bucket = self.default_bucket
        object_path = cleaned
        first_segment, sep, rest = cleaned.partition("/")
        if sep and first_segment and first_segment in self.allowed_buckets:
            bucket = first_segment
            object_path = rest

        base = self.base_url.rstrip("/")
        return f"{base}/storage/v1/object/public/{bucket}/{object_path}"
