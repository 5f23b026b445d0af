from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlparse

from skillshelf.constants import ALLOWED_REMOTE_HOSTS, ALLOWED_REMOTE_SCHEMES
from skillshelf.errors import ValidationError
from skillshelf.files.models import ConflictPolicy
from skillshelf.skills.models import Root


@dataclass(frozen=True)
class RemoteLocator:
    url: str
    owner: str
    repo: str

    @classmethod
    def parse(
        cls,
        value: str,
        allowed_schemes: tuple[str, ...] = ALLOWED_REMOTE_SCHEMES,
        allowed_hosts: tuple[str, ...] = ALLOWED_REMOTE_HOSTS,
    ) -> "RemoteLocator":
        text = value.strip()
        parsed = urlparse(text)
        if parsed.scheme.lower() not in allowed_schemes:
            raise ValidationError(
                f"Unsupported URL scheme '{parsed.scheme}'; allowed: {', '.join(allowed_schemes)}"
            )
        host = (parsed.hostname or "").lower()
        if host not in allowed_hosts or parsed.username or parsed.password or parsed.port:
            raise ValidationError(
                f"Only repositories on {', '.join(allowed_hosts)} are supported: {text}"
            )
        if parsed.query or parsed.fragment:
            raise ValidationError(f"Repository URL must not carry a query or fragment: {text}")

        segments = [segment for segment in parsed.path.split("/") if segment]
        if len(segments) != 2:
            raise ValidationError(f"Expected https://{host}/<owner>/<repo>: {text}")
        owner, repo = segments
        if repo.endswith(".git"):
            repo = repo[: -len(".git")]
        if not owner or not repo or owner.startswith(".") or repo.startswith("."):
            raise ValidationError(f"Invalid repository URL: {text}")
        return cls(url=f"https://{host}/{owner}/{repo}", owner=owner, repo=repo)

    @staticmethod
    def registry_url(source: str) -> str:
        """Expand an ``owner/repo`` registry source into a GitHub URL."""
        cleaned = source.strip().strip("/")
        if cleaned.count("/") != 1:
            raise ValidationError(f"Registry source must look like owner/repo: {source}")
        return f"https://github.com/{cleaned}"


@dataclass(frozen=True)
class ImportRequest:
    locator: str
    target_root: Root
    conflict_policy: ConflictPolicy
    sub_path: str | None = None
