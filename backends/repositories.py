"""Mapping of Searchfox repository names to their GitHub mirror locations."""

from typing import Dict

from backends.models import RepoLocation

DEFAULT_BRANCH = "main"

# All Firefox trees are branches of the unified repository.
DEFAULT_HOSTING_REPOSITORY = "mozilla/firefox"

BRANCH_BY_REPO: Dict[str, str] = {
    "mozilla-central": "main",
    "autoland": "autoland",
    "mozilla-beta": "beta",
    "mozilla-release": "release",
    "mozilla-esr115": "esr115",
    "mozilla-esr128": "esr128",
    "mozilla-esr140": "esr140",
    "comm-central": "main",
}

# comm-central still lives in Mercurial; the only git copy is the
# experimental releases-comm-central mirror. This is the one repository
# not served from DEFAULT_HOSTING_REPOSITORY.
HOSTING_REPOSITORY_OVERRIDES: Dict[str, str] = {
    "comm-central": "mozilla/releases-comm-central",
}


class RepositoryResolver:
    """Resolve logical repository names to download and browse locations.

    Unknown names are not rejected: they resolve to the default branch of
    the default hosting repository.
    """

    def __init__(self, searchfox_url: str, raw_content_url: str) -> None:
        """Initialize the resolver.

        Args:
            searchfox_url: Searchfox base URL, used for browse links
            raw_content_url: Base URL serving raw files of the mirror
        """
        self.searchfox_url = searchfox_url.rstrip("/")
        self.raw_content_url = raw_content_url.rstrip("/")

    def resolve(self, repo: str) -> RepoLocation:
        return RepoLocation(
            hosting_repository=HOSTING_REPOSITORY_OVERRIDES.get(
                repo, DEFAULT_HOSTING_REPOSITORY
            ),
            branch=BRANCH_BY_REPO.get(repo, DEFAULT_BRANCH),
            source_browse_base_url=f"{self.searchfox_url}/{repo}/source",
        )

    def raw_url(self, location: RepoLocation, path: str) -> str:
        """Build the raw download URL of ``path`` at ``location``."""
        return (
            f"{self.raw_content_url}/{location.hosting_repository}"
            f"/{location.branch}/{path}"
        )
