"""Source reachability and decodability checks."""

from PIL import Image

from ...common.schemas import SourceStatus
from ...utils.image_io import decode_image
from ...utils.source_fetcher import SourceFetcher


class SourceValidator:
    """Decide whether a source URL can feed a derivation."""

    def __init__(self, fetcher: SourceFetcher):
        self.fetcher: SourceFetcher = fetcher

    def validate(self, url: str) -> SourceStatus:
        """EXISTS if `url` can be opened for reading, UNREACHABLE otherwise."""
        if self.fetcher.exists(url):
            return SourceStatus.EXISTS
        return SourceStatus.UNREACHABLE

    def load(self, url: str) -> Image.Image:
        """
        Open and decode the source image.

        Raises:
            SourceUnreachableError: If the URL cannot be opened
            NotAnImageError: If the content is not a decodable image
        """
        return decode_image(self.fetcher.read(url), url)
