"""Portal registry: named per-request buckets of markup fragments."""
import io
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Optional, TextIO, Union

from pyportal.runtime.paths import PathResolver, make_resolver

logger = logging.getLogger(__name__)


class BucketKind(str, Enum):
    """Built-in buckets. Values are the reserved bucket names."""

    DEFAULT = "__PORTAL_KEY"
    STYLESHEET = "__PORTAL_CSS_KEY"
    SCRIPT_FILE = "__PORTAL_JS_KEY"
    SCRIPT_BLOCK = "__PORTAL_SCRIPT_KEY"


Bucket = Union[BucketKind, str]


@dataclass(frozen=True)
class BucketPolicy:
    """How a bucket kind accepts and emits fragments."""

    unique: bool = False
    front: bool = False
    template: str = "{}"

    def format(self, fragment: str) -> str:
        return self.template.format(fragment)


VERBATIM = BucketPolicy()

POLICIES: Dict[BucketKind, BucketPolicy] = {
    BucketKind.DEFAULT: VERBATIM,
    BucketKind.STYLESHEET: BucketPolicy(
        unique=True,
        front=True,
        template='<link href="{}" rel="stylesheet" type="text/css"/>',
    ),
    BucketKind.SCRIPT_FILE: BucketPolicy(
        unique=True,
        front=True,
        template='<script src="{}" type="text/javascript"></script>',
    ),
    BucketKind.SCRIPT_BLOCK: VERBATIM,
}


def bucket_name(bucket: Bucket) -> str:
    """Storage key for a bucket kind or custom name."""
    if isinstance(bucket, BucketKind):
        return bucket.value
    return bucket


def policy_for(bucket: Bucket) -> BucketPolicy:
    """Policy for a bucket; reserved names share their kind's policy."""
    try:
        return POLICIES[BucketKind(bucket)]
    except ValueError:
        return VERBATIM


class PortalRegistry:
    """
    Per-request mapping from bucket name to an ordered list of fragments.

    Child views push fragments in, the layout flushes them out. None of the
    operations fail: unknown buckets are created empty on first touch.
    One instance belongs to exactly one request and is never shared.

    root_path only feeds the default resolver; a custom resolver replaces
    it entirely.
    """

    def __init__(self, root_path: str = "", resolver: Optional[PathResolver] = None) -> None:
        self.resolver: PathResolver = resolver or make_resolver(root_path)
        self._buckets: Dict[str, List[str]] = {}

    def _get(self, bucket: Bucket) -> List[str]:
        key = bucket_name(bucket)
        fragments = self._buckets.get(key)
        if fragments is None:
            fragments = []
            self._buckets[key] = fragments
        return fragments

    # In

    def append(self, bucket: Bucket, text: str) -> None:
        """Append text at the end of the bucket."""
        self._get(bucket).append(text)
        logger.debug("portal %s: appended %d chars", bucket_name(bucket), len(text))

    def append_unique(self, bucket: Bucket, text: str) -> None:
        """Append text at the end unless an identical fragment is present."""
        fragments = self._get(bucket)
        if text not in fragments:
            fragments.append(text)
            logger.debug("portal %s: appended unique fragment", bucket_name(bucket))

    def append_unique_front(self, bucket: Bucket, text: str) -> None:
        """Insert text as the first fragment unless an identical one is present."""
        fragments = self._get(bucket)
        if text not in fragments:
            fragments.insert(0, text)
            logger.debug("portal %s: inserted %r at front", bucket_name(bucket), text)

    def add(self, bucket: Bucket, text: str) -> None:
        """Add text using the bucket's own policy."""
        policy = policy_for(bucket)
        if policy.front:
            self.append_unique_front(bucket, text)
        elif policy.unique:
            self.append_unique(bucket, text)
        else:
            self.append(bucket, text)

    def add_css(self, path: str) -> None:
        """Register a stylesheet by app-relative path, e.g. '~/css/site.css'."""
        self.append_unique_front(BucketKind.STYLESHEET, self.resolver(path))

    def add_css_absolute(self, path: str) -> None:
        """Register a stylesheet by a path or URL stored as given."""
        self.append_unique_front(BucketKind.STYLESHEET, path)

    def add_js(self, path: str) -> None:
        """Register a script file by app-relative path, e.g. '~/scripts/app.js'."""
        self.append_unique_front(BucketKind.SCRIPT_FILE, self.resolver(path))

    def add_js_absolute(self, path: str) -> None:
        self.append_unique_front(BucketKind.SCRIPT_FILE, path)

    def add_script(self, text: str) -> None:
        self.append(BucketKind.SCRIPT_BLOCK, text)

    def add_script_unique(self, text: str) -> None:
        self.append_unique(BucketKind.SCRIPT_BLOCK, text)

    # Misc

    def clear(self, bucket: Bucket = BucketKind.DEFAULT) -> None:
        """Drop every fragment added to the bucket so far."""
        self._get(bucket).clear()

    def fragments(self, bucket: Bucket = BucketKind.DEFAULT) -> List[str]:
        """Copy of the bucket's current fragments."""
        return list(self._get(bucket))

    def buckets(self) -> List[str]:
        """Names of every bucket touched in this request."""
        return list(self._buckets)

    def __contains__(self, bucket: object) -> bool:
        if not isinstance(bucket, str):
            return False
        return bucket_name(bucket) in self._buckets

    def __len__(self) -> int:
        return len(self._buckets)

    def __iter__(self) -> Iterator[str]:
        return iter(self.buckets())

    # Out

    def flush(self, out: TextIO, bucket: Bucket = BucketKind.DEFAULT) -> None:
        """
        Write the bucket's fragments to out, formatted for the bucket kind.
        The bucket is left intact, so flushing twice emits everything twice.
        """
        policy = policy_for(bucket)
        for fragment in self._get(bucket):
            out.write(policy.format(fragment))

    def render(self, bucket: Bucket = BucketKind.DEFAULT) -> str:
        """Flush the bucket into a string."""
        buffer = io.StringIO()
        self.flush(buffer, bucket)
        return buffer.getvalue()

    def __repr__(self) -> str:
        sizes = ", ".join(f"{k}={len(v)}" for k, v in self._buckets.items())
        return f"PortalRegistry({sizes})"
